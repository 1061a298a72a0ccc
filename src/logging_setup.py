import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, "%H:%M:%S"))
    root.handlers.clear()
    root.addHandler(handler)

    # Quiet per-request connection logs from requests/urllib3
    logging.getLogger("urllib3").setLevel(logging.WARNING)
