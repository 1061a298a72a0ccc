"""
Summary statistics for windows of sensor data.

For each axis of a window we compute:
- mean
- min
- max

A full summary holds one {x, y, z} triple per sensor:

    {"accelerometer": {"x": {"mean", "min", "max"}, "y": ..., "z": ...},
     "gyroscope":     {...}}
"""

from typing import Dict, Sequence

import numpy as np


SENSOR_KEYS = ("accelerometer", "gyroscope")
SENSOR_PREFIXES = {"accelerometer": "acc", "gyroscope": "gyro"}
AXES = ("x", "y", "z")
STATS = ("mean", "min", "max")

# Column names of a flattened summary, in row order
FEATURE_NAMES = [
    f"{SENSOR_PREFIXES[sensor]}_{axis}_{stat}"
    for sensor in SENSOR_KEYS
    for axis in AXES
    for stat in STATS
]

EMPTY_AXIS_FEATURES = {"mean": float("nan"), "min": float("nan"), "max": float("nan")}


def axis_features(axis_data: Sequence[float]) -> Dict[str, float]:
    """
    Mean, min and max of a single axis.
    Returns NaN for all three when the axis holds no samples.
    """
    if len(axis_data) == 0:
        return dict(EMPTY_AXIS_FEATURES)

    x = np.asarray(axis_data, dtype=float)
    return {
        "mean": float(np.mean(x)),
        "min": float(np.min(x)),
        "max": float(np.max(x)),
    }


def feature_summary_to_row(summary: Dict[str, Dict[str, Dict[str, float]]]) -> np.ndarray:
    """
    Flatten a {accelerometer, gyroscope} summary into one feature row.

    Order is sensor -> axis -> stat, matching FEATURE_NAMES, so the row can
    be fed straight into a classifier trained on the same layout.
    Returns shape (1, 18).
    """
    features = []
    for sensor in SENSOR_KEYS:
        for axis in AXES:
            axis_feats = summary[sensor][axis]
            features.extend(axis_feats[stat] for stat in STATS)

    return np.array(features, dtype=float).reshape(1, -1)
