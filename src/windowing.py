"""
windowing.py

Real-time fixed-size windows for earable IMU data.

This module provides:
- Window: a fixed-capacity buffer of [x, y, z] samples for one sensor type
  that can 'slide' (keep the last overlap_size samples, drop the rest)
- SensorDataHandler: two windows (accelerometer, gyroscope) advanced in
  lock-step that emit a feature summary every time both are full
"""

import logging
from typing import Dict, Optional, Sequence

from features import AXES, axis_features

logger = logging.getLogger(__name__)


class WindowError(RuntimeError):
    """Window used in a way that breaks its fill/slide contract."""


class CapacityViolation(WindowError):
    """add_data called on a window that is already full."""


class NotReadyToSlide(WindowError):
    """slide called on a window that is not full yet."""


class Window:
    """
    Window of sensor data from a single sensor type (e.g. accelerometer).

    Parameters:
        window_size : int
            Maximum number of samples held by the window (e.g., 50)
        sensor_type : str
            Name of the sensor feeding the window (e.g., "gyroscope")
        overlap_size : int, optional
            Number of samples kept after a slide.
            0 empties the window on every slide.
            Default: 0

    Attributes:
        x, y, z : list
            Per-axis samples, always the same length
    """

    def __init__(self, window_size: int, sensor_type: str, overlap_size: int = 0):
        if window_size <= 0:
            raise ValueError(f"window_size must be > 0, got {window_size}")
        overlap_size = overlap_size or 0
        if not 0 <= overlap_size < window_size:
            raise ValueError(
                f"overlap_size must be in [0, {window_size}), got {overlap_size}"
            )

        self.window_size = window_size
        self.sensor_type = sensor_type
        self.overlap_size = overlap_size

        self.x: list = []
        self.y: list = []
        self.z: list = []

    def get_length(self) -> int:
        """Number of samples currently stored (based on the x axis)."""
        return len(self.x)

    def get_max_length(self) -> int:
        """Maximum number of samples the window can hold."""
        return self.window_size

    @property
    def fill_ratio(self) -> float:
        """How full the window is, 0.0 .. 1.0."""
        return self.get_length() / self.window_size

    def is_full(self) -> bool:
        return len(self.x) >= self.window_size

    def add_data(self, x: float, y: float, z: float) -> None:
        """
        Append one sample to every axis.

        Raises:
            CapacityViolation
                If the window is already full. The caller must slide first.
        """
        if self.is_full():
            raise CapacityViolation(f"Window is full: {self!r}")
        self.x.append(x)
        self.y.append(y)
        self.z.append(z)

    def extract_features(self) -> Dict[str, Dict[str, float]]:
        """
        Mean, min and max of each axis over everything currently buffered,
        including samples retained from the previous slide.

        Returns:
            dict
                {"x": {...}, "y": {...}, "z": {...}}
        """
        return {axis: axis_features(getattr(self, axis)) for axis in AXES}

    def slide(self) -> None:
        """
        Discard the first (window_size - overlap_size) samples and keep
        the last overlap_size samples at the front.

        Raises:
            NotReadyToSlide
                If the window is not full.
        """
        if self.get_length() < self.window_size:
            raise NotReadyToSlide(f"Window is not full: {self!r}")

        step = self.window_size - self.overlap_size
        self.x = self.x[step:]
        self.y = self.y[step:]
        self.z = self.z[step:]

    def reset(self) -> None:
        """Drop every sample (e.g., when a stream restarts)."""
        self.x = []
        self.y = []
        self.z = []

    def __len__(self) -> int:
        return self.get_length()

    def __repr__(self) -> str:
        return (
            f"SlidingWindow({self.sensor_type}, size={self.window_size}, "
            f"currentLength={self.get_length()})"
        )


class SensorDataHandler:
    """
    Accelerometer and gyroscope windows stepped together.

    Both windows share window_size / overlap_size, and each call to
    handle_data adds exactly one sample to each, so they fill and slide
    at the same time.
    """

    def __init__(self, window_size: int, overlap_size: int = 0):
        self.acc_window = Window(window_size, "accelerometer", overlap_size)
        self.gyro_window = Window(window_size, "gyroscope", overlap_size)

    def handle_data(
        self, acc: Sequence[float], gyro: Sequence[float]
    ) -> Optional[Dict[str, Dict[str, Dict[str, float]]]]:
        """
        Process one combined sample.

        Parameters:
            acc : sequence of 3 floats
                Accelerometer (x, y, z)
            gyro : sequence of 3 floats
                Gyroscope (x, y, z)

        Returns:
            dict or None
                {"accelerometer": {...}, "gyroscope": {...}} when both windows
                filled up on this sample (the windows are slid afterwards),
                None while still accumulating.

        Raises:
            ValueError
                If either sample does not have exactly 3 values. Neither
                window is touched in that case.
            WindowError
                If the two windows are no longer the same length.
        """
        if len(acc) != 3 or len(gyro) != 3:
            raise ValueError(
                f"acc and gyro must have exactly 3 values [x, y, z], "
                f"got {len(acc)} and {len(gyro)}"
            )
        if self.acc_window.get_length() != self.gyro_window.get_length():
            raise WindowError(
                f"Windows out of step: {self.acc_window!r} vs {self.gyro_window!r}"
            )

        self.acc_window.add_data(*acc)
        self.gyro_window.add_data(*gyro)

        if self.acc_window.is_full() and self.gyro_window.is_full():
            features = {
                "accelerometer": self.acc_window.extract_features(),
                "gyroscope": self.gyro_window.extract_features(),
            }
            self.acc_window.slide()
            self.gyro_window.slide()
            logger.debug("Window full, extracted features")
            return features

        return None

    def reset(self) -> None:
        self.acc_window.reset()
        self.gyro_window.reset()

    def __repr__(self) -> str:
        return f"SensorDataHandler({self.acc_window!r}, {self.gyro_window!r})"
