"""
pipeline.py

Feeds each combined (acc, gyro) sample to the fixed-window feature extractor
and/or the anomaly segmenter. The two paths share nothing but the input.
Their outputs leave through callbacks, the pipeline never waits on them.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence

from anomaly import AnomalySegmenter
from constants import DEFAULT_MODE, OVERLAP_SIZE, WINDOW_SIZE
from windowing import SensorDataHandler

logger = logging.getLogger(__name__)

MODES = ("window", "anomaly", "both")


class GesturePipeline:
    """
    Parameters:
        mode : str
            "window"  -> feature summaries only
            "anomaly" -> anomaly captures only
            "both"    -> both paths on every sample
        window_size, overlap_size : int
            Passed to SensorDataHandler
        on_features : callable, optional
            Receives each feature summary
        on_capture : callable, optional
            Receives each capture sequence
        segmenter : AnomalySegmenter, optional
            Pre-configured segmenter (thresholds). Its own on_capture is kept
            unless on_capture is given here.
    """

    def __init__(
        self,
        mode: str = DEFAULT_MODE,
        window_size: int = WINDOW_SIZE,
        overlap_size: int = OVERLAP_SIZE,
        on_features: Optional[Callable[[Dict], None]] = None,
        on_capture: Optional[Callable[[List[float]], None]] = None,
        segmenter: Optional[AnomalySegmenter] = None,
    ):
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode!r} (expected one of {MODES})")

        self.mode = mode
        self.on_features = on_features
        self.handler = SensorDataHandler(window_size, overlap_size)
        self.segmenter = segmenter or AnomalySegmenter()
        if on_capture is not None:
            self.segmenter.on_capture = on_capture

        self.samples_seen = 0
        self.summaries_emitted = 0

    @property
    def uses_windows(self) -> bool:
        return self.mode in ("window", "both")

    @property
    def uses_anomaly(self) -> bool:
        return self.mode in ("anomaly", "both")

    def process(self, acc: Sequence[float], gyro: Sequence[float]) -> None:
        """Handle one combined sample, in arrival order."""
        self.samples_seen += 1

        if self.uses_windows:
            features = self.handler.handle_data(acc, gyro)
            if features is not None:
                self.summaries_emitted += 1
                if self.on_features is not None:
                    self.on_features(features)

        if self.uses_anomaly:
            self.segmenter.step(acc[0], gyro[1])

    def reset(self) -> None:
        self.handler.reset()
        self.segmenter.reset()

    def stats(self) -> Dict[str, int]:
        return {
            "samples": self.samples_seen,
            "feature summaries": self.summaries_emitted,
            "captures emitted": self.segmenter.captures_emitted,
            "captures discarded": self.segmenter.captures_discarded,
        }

    def __repr__(self) -> str:
        return f"GesturePipeline(mode={self.mode}, {self.handler!r}, {self.segmenter!r})"
