import logging
import queue
import threading
from typing import Dict, List, Optional, Sequence, Tuple

import requests

from constants import ACC_SENSORS, GYRO_SENSORS, POLL_INTERVAL, RETRY_DELAY, SENSORS

logger = logging.getLogger(__name__)

Sample = Tuple[Tuple[float, float, float], Tuple[float, float, float]]


def build_query_url(base_url: str, sensors: Sequence[str] = SENSORS) -> str:
    """Full phyphox query URL, e.g. http://phone:8080/get?accX&accY&accZ&gyrX&gyrY&gyrZ"""
    return base_url.rstrip("/") + "/get?" + "&".join(sensors)


def parse_sample(
    data_json: dict,
    sensors: Sequence[str] = SENSORS,
    invert: Sequence[str] = (),
) -> Sample:
    """
    Pull the newest value of every requested buffer out of a phyphox /get
    response and split it into (acc, gyro) triples.

    Buffers named in invert have their sign flipped, so the stream leaves
    here already in the earable's axis convention.
    """
    # The sensor objects live either under "buffer" or at the top level
    container = data_json.get("buffer", None)
    if isinstance(container, dict):
        sensor_root = container
    else:
        sensor_root = data_json

    if not isinstance(sensor_root, dict):
        raise ValueError(f"Unexpected JSON format: {data_json}")

    values: Dict[str, float] = {}
    for sensor in sensors:
        if sensor not in sensor_root:
            raise KeyError(
                f"Sensor '{sensor}' not found in response. "
                f"Available keys: {list(sensor_root.keys())}"
            )

        sensor_obj = sensor_root[sensor]
        buffer_vals = sensor_obj.get("buffer", None) if isinstance(sensor_obj, dict) else sensor_obj

        if not isinstance(buffer_vals, (list, tuple)) or len(buffer_vals) == 0:
            raise IndexError(f"No numeric data found for sensor '{sensor}'")

        value = float(buffer_vals[-1])
        values[sensor] = -value if sensor in invert else value

    acc = tuple(values[s] for s in sensors[:3])
    gyro = tuple(values[s] for s in sensors[3:6])
    return acc, gyro


class CollectDataThread(threading.Thread):
    """
    Background thread that polls a phyphox /get endpoint and pushes each
    (acc, gyro) sample onto one ordered queue.

    The queue is the only hand-off to the processing loop, so samples reach
    the pipeline in exactly the order they were read.
    """

    def __init__(
        self,
        url: str,
        sample_queue: "queue.Queue[Sample]",
        sensors: Optional[List[str]] = None,
        poll_interval: float = POLL_INTERVAL,
        invert: Sequence[str] = (),
        session=None,
    ):
        super().__init__()
        self.query_url = url
        self.sensors = sensors or ACC_SENSORS + GYRO_SENSORS
        self.sample_queue = sample_queue
        self.poll_interval = poll_interval
        self.invert = tuple(invert)
        self.session = session if session is not None else requests
        self.stop_event = threading.Event()
        self.daemon = True  # do not block program exit

        self.samples_read = 0
        self.errors = 0

    def poll_once(self) -> Sample:
        """One request to phyphox, parsed into a sample."""
        resp = self.session.get(self.query_url, timeout=2.0)
        resp.raise_for_status()
        return parse_sample(resp.json(), self.sensors, self.invert)

    def run(self):
        logger.info("Polling phyphox at: %s", self.query_url)

        while not self.stop_event.is_set():
            try:
                sample = self.poll_once()
                self.sample_queue.put(sample)
                self.samples_read += 1

            except requests.RequestException as e:
                # Networking problems: timeout, connection refused, etc.
                self.errors += 1
                logger.warning(
                    "Request to phyphox failed: %s. Check that phone and PC are on "
                    "the same network, remote access is enabled, and the URL is correct.",
                    e,
                )
                # Wait a bit longer before next attempt
                self.stop_event.wait(RETRY_DELAY)
                continue

            except (KeyError, IndexError, ValueError, TypeError) as e:
                # Problems with data format or missing buffers
                self.errors += 1
                logger.warning(
                    "Data format error: %s. Make sure phyphox provides all these "
                    "buffers: %s",
                    e,
                    self.sensors,
                )
                self.stop_event.wait(RETRY_DELAY)
                continue

            self.stop_event.wait(self.poll_interval)

        logger.info("Stopping data collection.")

    def stop(self):
        """Signal the thread to stop on the next loop."""
        self.stop_event.set()
