"""Logging setup for the monitor process."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y%m%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> None:
    """Send all log lines to stdout; verbose lowers the threshold from INFO to DEBUG."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    for h in root_logger.handlers[:]:
        root_logger.removeHandler(h)
    root_logger.addHandler(handler)
    # Connection pool chatter would drown the per-client debug lines.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
