"""Key=value logging shared by the LeaseDesk API and the Streamlit dashboard."""

from __future__ import annotations

import logging
import os
from typing import Optional

ROOT_NAMESPACE = "leasedesk"

# Libraries that log every request or file event at INFO/DEBUG.
NOISY_LOGGERS = ("urllib3", "watchdog", "multipart", "python_multipart")


def _level() -> str:
    return (os.getenv("LEASEDESK_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "INFO").upper()


def configure_logging(namespace: str = ROOT_NAMESPACE) -> logging.Logger:
    """Attach a single stream handler to ``namespace`` (once) and return it.

    Messages are written as ``event key=value ...`` so the API and the
    dashboard produce one greppable format when run side by side.
    """

    logger = logging.getLogger(namespace)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.setLevel(_level())
    logger.propagate = False
    return logger


def quiet_libraries(level: int = logging.WARNING) -> None:
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level)


def get_logger(child: Optional[str] = None) -> logging.Logger:
    base = configure_logging()
    return base.getChild(child) if child else base


__all__ = ["configure_logging", "get_logger", "quiet_libraries"]
