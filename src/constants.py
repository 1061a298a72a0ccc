# SENSOR STREAM CONFIGURATION

# Base URL of the phyphox "remote access" server running on the phone.
# Make sure to include "http://" and the port number
PHYPHOX_BASE_URL = "http://192.168.0.36:8080"

# phyphox buffer names for the "Accelerometer & Gyroscope" experiment,
# accelerometer first, then gyroscope (index-aligned with x, y, z)
ACC_SENSORS = ["accX", "accY", "accZ"]
GYRO_SENSORS = ["gyrX", "gyrY", "gyrZ"]
SENSORS = ACC_SENSORS + GYRO_SENSORS

# Poll ~10 times per second
POLL_INTERVAL = 0.1

# Seconds to back off after a failed request to phyphox
RETRY_DELAY = 2.0

# FIXED-WINDOW FEATURE EXTRACTION

# Window size: number of samples per feature window
# Must match the size used when the classifier was trained
WINDOW_SIZE = 50

# Overlap: number of samples kept in the window after each slide
# - OVERLAP_SIZE == 0: non-overlapping windows
# - 0 < OVERLAP_SIZE < WINDOW_SIZE: a new summary every WINDOW_SIZE - OVERLAP_SIZE samples
OVERLAP_SIZE = 25

# ANOMALY SEGMENTATION (gyroscope Y drives both start and end)

# |gyroY| above this counts as an excursion
GYRO_Y_THRESHOLD = 1.5

# Inclusive signed band meaning "gyroY has returned to baseline"
ANOMALY_END_LOW = -1.0
ANOMALY_END_HIGH = 1.0

# Consecutive excursion samples needed to start collecting
START_RUN_LENGTH = 1

# Captures shorter than this are discarded
MIN_CAPTURE_LENGTH = 20

# Consecutive in-band samples needed to stop collecting
END_RUN_LENGTH = 5

# Which processing path(s) the controller runs: "window", "anomaly" or "both"
DEFAULT_MODE = "anomaly"

# PREDICTION SERVICE

PREDICTION_URL = "http://localhost:5000/predict"
PREDICTION_TIMEOUT = 5.0

# Feature-window model outputs integer classes (index-aligned: 0..5)
GESTURE_NAMES = [
    "Idle", "Left Slip", "Right Slip", "Left Roll", "Right Roll", "Pull Back"
]

# KEY BINDING

# Seconds before the same gesture can press its key again
COOLDOWN_DURATION = 0.3
