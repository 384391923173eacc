"""Standard-library logging setup."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process.

    Args:
        level: Minimum log level name (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)

    for noisy in ["mysql.connector", "httpx", "multipart"]:
        logging.getLogger(noisy).setLevel(logging.WARNING)
