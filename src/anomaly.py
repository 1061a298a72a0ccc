"""
anomaly.py

Threshold-based gesture segmentation on gyroscope Y.

A capture starts once |gyroY| stays above GYRO_Y_THRESHOLD for
START_RUN_LENGTH samples, and ends once gyroY stays inside
[ANOMALY_END_LOW, ANOMALY_END_HIGH] for END_RUN_LENGTH samples. While
collecting, -gyroY and accX are recorded. Captures of at least
MIN_CAPTURE_LENGTH samples are emitted as one flat sequence:

    [-gyroY_0, ..., -gyroY_n, accX_0, ..., accX_n]
"""

import logging
import math
from typing import Callable, List, Optional

from constants import (
    ANOMALY_END_HIGH,
    ANOMALY_END_LOW,
    END_RUN_LENGTH,
    GYRO_Y_THRESHOLD,
    MIN_CAPTURE_LENGTH,
    START_RUN_LENGTH,
)

logger = logging.getLogger(__name__)

IDLE = "IDLE"
COLLECTING = "COLLECTING"


class SegmenterState:
    """Counters and sequences carried from one step to the next."""

    def __init__(self):
        self.collecting = False
        self.above_threshold_run = 0
        self.in_end_band_run = 0
        self.gyro_sequence: List[float] = []
        self.acc_sequence: List[float] = []

    def reset_sequences(self) -> None:
        self.gyro_sequence = []
        self.acc_sequence = []

    def __repr__(self) -> str:
        return (
            f"SegmenterState(collecting={self.collecting}, "
            f"above={self.above_threshold_run}, in_band={self.in_end_band_run}, "
            f"collected={len(self.gyro_sequence)})"
        )


class AnomalySegmenter:
    """
    IDLE / COLLECTING state machine over (accX, gyroY) pairs.

    Parameters:
        on_capture : callable, optional
            Called with each emitted sequence. Must not block; hand the
            sequence off (e.g., to a PredictionClient) and return.
        excursion_threshold : float
            |gyroY| above this counts toward starting a capture
        end_band_low, end_band_high : float
            Inclusive signed band counted toward ending a capture
        start_run_length : int
            Consecutive excursions needed to start (>= 1)
        min_capture_length : int
            Shorter captures are discarded
        end_run_length : int
            Consecutive in-band samples needed to end (>= 1)
    """

    def __init__(
        self,
        on_capture: Optional[Callable[[List[float]], None]] = None,
        excursion_threshold: float = GYRO_Y_THRESHOLD,
        end_band_low: float = ANOMALY_END_LOW,
        end_band_high: float = ANOMALY_END_HIGH,
        start_run_length: int = START_RUN_LENGTH,
        min_capture_length: int = MIN_CAPTURE_LENGTH,
        end_run_length: int = END_RUN_LENGTH,
    ):
        for name, value in (
            ("excursion_threshold", excursion_threshold),
            ("end_band_low", end_band_low),
            ("end_band_high", end_band_high),
        ):
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if end_band_low > end_band_high:
            raise ValueError(
                f"end_band_low ({end_band_low}) cannot exceed "
                f"end_band_high ({end_band_high})"
            )
        if start_run_length < 1:
            raise ValueError(f"start_run_length must be >= 1, got {start_run_length}")
        if end_run_length < 1:
            raise ValueError(f"end_run_length must be >= 1, got {end_run_length}")
        if min_capture_length < 0:
            raise ValueError(
                f"min_capture_length must be >= 0, got {min_capture_length}"
            )

        self.on_capture = on_capture
        self.excursion_threshold = excursion_threshold
        self.end_band_low = end_band_low
        self.end_band_high = end_band_high
        self.start_run_length = start_run_length
        self.min_capture_length = min_capture_length
        self.end_run_length = end_run_length

        self.state_data = SegmenterState()
        self.captures_emitted = 0
        self.captures_discarded = 0

    @property
    def collecting(self) -> bool:
        return self.state_data.collecting

    @property
    def state(self) -> str:
        return COLLECTING if self.state_data.collecting else IDLE

    def step(self, acc_x: float, gyro_y: float) -> Optional[List[float]]:
        """
        Advance by one sample.

        Returns:
            list or None
                The emitted sequence if a capture closed on this sample and
                was long enough, otherwise None.
        """
        s = self.state_data

        if abs(gyro_y) > self.excursion_threshold:
            s.above_threshold_run += 1
        else:
            s.above_threshold_run = 0

        if s.above_threshold_run >= self.start_run_length and not s.collecting:
            s.collecting = True
            s.reset_sequences()
            s.in_end_band_run = 0
            logger.debug("Anomaly found: collecting data.")

        if not s.collecting:
            return None

        # Gyro Y arrives inverted from the earable, flip it back
        s.gyro_sequence.append(-gyro_y)
        s.acc_sequence.append(acc_x)

        if self.end_band_low <= gyro_y <= self.end_band_high:
            s.in_end_band_run += 1
        else:
            s.in_end_band_run = 0

        if s.in_end_band_run < self.end_run_length:
            return None

        s.collecting = False
        collected = len(s.gyro_sequence)
        sequence = None
        if collected >= self.min_capture_length:
            sequence = s.gyro_sequence + s.acc_sequence
            self.captures_emitted += 1
            logger.info("Anomaly ended, emitting %d samples.", collected)
        else:
            self.captures_discarded += 1
            logger.info(
                "Anomaly ended. Data collected was too short (%d samples).", collected
            )
        s.reset_sequences()

        if sequence is not None and self.on_capture is not None:
            self.on_capture(sequence)
        return sequence

    def reset(self) -> None:
        """
        Back to IDLE with empty sequences and zeroed run counters.
        captures_emitted / captures_discarded keep counting across resets.
        """
        self.state_data = SegmenterState()

    def __repr__(self) -> str:
        return f"AnomalySegmenter({self.state}, {self.state_data!r})"
