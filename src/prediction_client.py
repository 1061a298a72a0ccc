"""
Prediction collaborators.

Both expose submit(payload) and report the decoded gesture label through an
on_result callback:
- PredictionClient POSTs the payload to the inference API on a background
  thread (fire-and-forget, responses may come back in any order)
- LocalModelPredictor runs a joblib-saved classifier in-process
"""

import logging
import math
import threading
from typing import Callable, List, Optional

import joblib
import numpy as np
import requests

from constants import GESTURE_NAMES, PREDICTION_TIMEOUT, PREDICTION_URL
from features import feature_summary_to_row

logger = logging.getLogger(__name__)

UNKNOWN_GESTURE = "Unknown"


def decode_prediction(value) -> str:
    """
    Translate a model output to a human-readable gesture.

    Feature-window models answer with a class index (0 = Idle, 1 = Left Slip,
    2 = Right Slip, 3 = Left Roll, 4 = Right Roll, 5 = Pull Back); sequence
    models answer with the name itself.
    """
    if isinstance(value, str):
        return value if value in GESTURE_NAMES else UNKNOWN_GESTURE
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        if 0 <= value < len(GESTURE_NAMES):
            return GESTURE_NAMES[int(value)]
    return UNKNOWN_GESTURE


def to_json_safe(payload):
    """Replace NaN / inf with None so the body is valid JSON."""
    if isinstance(payload, dict):
        return {k: to_json_safe(v) for k, v in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [to_json_safe(v) for v in payload]
    if isinstance(payload, float) and not math.isfinite(payload):
        return None
    return payload


class _PredictionThread(threading.Thread):
    """One POST to the inference API. Reports back through the client."""

    def __init__(self, client: "PredictionClient", payload):
        super().__init__()
        self.client = client
        self.payload = payload
        self.daemon = True  # do not block program exit

    def run(self):
        client = self.client
        try:
            resp = client.session.post(
                client.url, json=self.payload, timeout=client.timeout
            )
            resp.raise_for_status()
            data = resp.json()
            label = decode_prediction(data.get("prediction"))
        except requests.RequestException as e:
            client._record_failure(f"Error: {e} (is the server running?)")
            return
        except (ValueError, AttributeError) as e:
            # Body was not JSON, or not a JSON object
            client._record_failure(f"Unexpected response format: {e}")
            return

        logger.info("Predicted gesture: %s", label)
        client._deliver(label)


class PredictionClient:
    """
    Fire-and-forget client for the inference API.

    Parameters:
        url : str
            POST endpoint (e.g., "http://localhost:5000/predict")
        timeout : float
            Per-request timeout in seconds
        on_result : callable, optional
            Called with each decoded gesture label, from the worker thread
        session : object with .post, optional
            requests.Session or compatible. Defaults to the requests module.
    """

    def __init__(
        self,
        url: str = PREDICTION_URL,
        timeout: float = PREDICTION_TIMEOUT,
        on_result: Optional[Callable[[str], None]] = None,
        session=None,
    ):
        self.url = url
        self.timeout = timeout
        self.on_result = on_result
        self.session = session if session is not None else requests

        self.submitted = 0
        self.failures = 0
        self.results: List[str] = []
        self._lock = threading.Lock()
        self._threads: List[threading.Thread] = []

    def submit(self, payload) -> None:
        """Start a request for payload and return immediately."""
        thread = _PredictionThread(self, to_json_safe(payload))
        with self._lock:
            self.submitted += 1
            self._threads = [t for t in self._threads if t.is_alive()]
            self._threads.append(thread)
        thread.start()

    def wait(self, timeout: Optional[float] = None) -> None:
        """Join outstanding requests (shutdown / tests)."""
        with self._lock:
            threads = list(self._threads)
        for thread in threads:
            thread.join(timeout)

    def _record_failure(self, message: str) -> None:
        logger.warning(message)
        with self._lock:
            self.failures += 1

    def _deliver(self, label: str) -> None:
        with self._lock:
            self.results.append(label)
        if self.on_result is not None:
            try:
                self.on_result(label)
            except Exception:
                logger.exception("on_result callback failed for %s", label)


class LocalModelPredictor:
    """
    In-process alternative to PredictionClient.

    Loads a classifier saved with joblib and predicts synchronously.
    Feature summaries are flattened with feature_summary_to_row; capture
    sequences are used as a single row as-is. A payload the model cannot
    handle (e.g., a capture whose length differs from the training rows) is
    logged and counted in failures, it never reaches the sample loop.
    """

    def __init__(self, model_path: str, on_result: Optional[Callable[[str], None]] = None):
        self.model = joblib.load(model_path)
        self.on_result = on_result
        self.results: List[str] = []
        self.failures = 0
        logger.info("Loaded local model from %s", model_path)

    def submit(self, payload) -> Optional[str]:
        try:
            if isinstance(payload, dict):
                row = feature_summary_to_row(payload)
            else:
                row = np.asarray(payload, dtype=float).reshape(1, -1)
            label = decode_prediction(self.model.predict(row)[0])
        except Exception as e:
            self.failures += 1
            logger.warning("Local prediction failed: %s", e)
            return None

        self.results.append(label)
        logger.info("Predicted gesture: %s", label)
        if self.on_result is not None:
            self.on_result(label)
        return label
