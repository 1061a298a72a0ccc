"""
controller.py

Runs the gesture pipeline on a live phyphox stream or a recorded CSV and
forwards its outputs to the prediction service.

Usage examples:
    # Live, anomaly captures sent to the local inference API
    gesture-controller --source live --phone-url http://192.168.0.36:8080

    # Replay a recording through both paths with a local model
    gesture-controller --source replay --csv session.csv --mode both --model model.pkl
"""

import argparse
import logging
import queue
from typing import Iterable, List, Optional

from tabulate import tabulate

from anomaly import AnomalySegmenter
from constants import (
    ANOMALY_END_HIGH,
    ANOMALY_END_LOW,
    DEFAULT_MODE,
    END_RUN_LENGTH,
    GYRO_Y_THRESHOLD,
    MIN_CAPTURE_LENGTH,
    OVERLAP_SIZE,
    PHYPHOX_BASE_URL,
    POLL_INTERVAL,
    PREDICTION_TIMEOUT,
    PREDICTION_URL,
    SENSORS,
    START_RUN_LENGTH,
    WINDOW_SIZE,
)
from data_loader import iter_samples, load_recording
from keybinder import execute_action
from logging_setup import setup_logging
from phone_interface import CollectDataThread, build_query_url
from pipeline import MODES, GesturePipeline
from prediction_client import LocalModelPredictor, PredictionClient

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Real-time earable gesture recognition (windows + anomaly captures)"
    )
    parser.add_argument("--source", choices=["live", "replay"], default="live")
    parser.add_argument("--csv", help="Recording to replay (with --source replay)")
    parser.add_argument(
        "--phone-url",
        default=PHYPHOX_BASE_URL,
        help=f"phyphox remote access URL (default: {PHYPHOX_BASE_URL})",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=POLL_INTERVAL,
        help=f"Seconds between phyphox polls (default: {POLL_INTERVAL})",
    )
    parser.add_argument(
        "--invert",
        nargs="*",
        default=[],
        metavar="BUFFER",
        help="Sensor buffers whose sign the source flips (e.g. gyrY)",
    )
    parser.add_argument("--mode", choices=MODES, default=DEFAULT_MODE)

    # Prediction
    parser.add_argument(
        "--url",
        default=PREDICTION_URL,
        help=f"Inference API endpoint (default: {PREDICTION_URL})",
    )
    parser.add_argument("--timeout", type=float, default=PREDICTION_TIMEOUT)
    parser.add_argument(
        "--model",
        default=None,
        help="Use a local joblib model instead of the inference API",
    )
    parser.add_argument(
        "--keys", action="store_true", help="Press keys for predicted gestures"
    )

    # Windows
    parser.add_argument("--window-size", type=int, default=WINDOW_SIZE)
    parser.add_argument("--overlap-size", type=int, default=OVERLAP_SIZE)

    # Anomaly thresholds
    parser.add_argument("--threshold", type=float, default=GYRO_Y_THRESHOLD)
    parser.add_argument("--end-low", type=float, default=ANOMALY_END_LOW)
    parser.add_argument("--end-high", type=float, default=ANOMALY_END_HIGH)
    parser.add_argument("--start-run", type=int, default=START_RUN_LENGTH)
    parser.add_argument("--min-length", type=int, default=MIN_CAPTURE_LENGTH)
    parser.add_argument("--end-run", type=int, default=END_RUN_LENGTH)

    parser.add_argument("--log-level", default="INFO")
    return parser


def on_prediction(label: str, use_keys: bool) -> None:
    if use_keys and label != "Unknown":
        execute_action(label)


def build_pipeline(args, predictor) -> GesturePipeline:
    segmenter = AnomalySegmenter(
        excursion_threshold=args.threshold,
        end_band_low=args.end_low,
        end_band_high=args.end_high,
        start_run_length=args.start_run,
        min_capture_length=args.min_length,
        end_run_length=args.end_run,
    )
    return GesturePipeline(
        mode=args.mode,
        window_size=args.window_size,
        overlap_size=args.overlap_size,
        on_features=predictor.submit,
        on_capture=predictor.submit,
        segmenter=segmenter,
    )


def run_samples(pipeline: GesturePipeline, samples: Iterable) -> None:
    """Feed samples to the pipeline one at a time, in order."""
    for acc, gyro in samples:
        pipeline.process(acc, gyro)


def run_live(pipeline: GesturePipeline, args) -> None:
    sample_queue: "queue.Queue" = queue.Queue()
    data_thread = CollectDataThread(
        url=build_query_url(args.phone_url, SENSORS),
        sample_queue=sample_queue,
        sensors=SENSORS,
        poll_interval=args.poll_interval,
        invert=args.invert,
    )
    data_thread.start()

    def drain():
        while True:
            try:
                yield sample_queue.get(timeout=1.0)
            except queue.Empty:
                if not data_thread.is_alive():
                    return

    try:
        run_samples(pipeline, drain())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down.")
    finally:
        data_thread.stop()


def print_session_table(stats: dict, predictions: List[str]) -> None:
    rows = [[name, value] for name, value in stats.items()]
    rows.append(["predictions", len(predictions)])
    print("\nSESSION SUMMARY")
    print(tabulate(rows, headers=["Metric", "Value"], tablefmt="pretty"))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    if args.source == "replay" and not args.csv:
        logger.error("--source replay needs --csv")
        return 2

    def handle_result(label: str) -> None:
        on_prediction(label, args.keys)

    if args.model:
        predictor = LocalModelPredictor(args.model, on_result=handle_result)
    else:
        predictor = PredictionClient(args.url, args.timeout, on_result=handle_result)

    pipeline = build_pipeline(args, predictor)
    logger.info("Initialized pipeline: %r", pipeline)

    if args.source == "replay":
        df = load_recording(args.csv, invert=args.invert)
        run_samples(pipeline, iter_samples(df))
    else:
        run_live(pipeline, args)

    if isinstance(predictor, PredictionClient):
        predictor.wait(timeout=args.timeout)

    print_session_table(pipeline.stats(), predictor.results)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
