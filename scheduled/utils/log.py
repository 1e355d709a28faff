"""Logging helpers for scheduled."""

import sys
from typing import Any, Callable

from loguru import logger


TaskLogger = Callable[[Any, str], Any]
"""``(base_logger, name) -> logger`` used to build the logger of one job."""

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level:8}</level> | "
    "<cyan>{extra[job]}</cyan> | {message}"
)


def default_task_logger(base: Any, name: str) -> Any:
    """Clone ``base`` with its ``job`` label set to ``name``."""
    return base.bind(job=name)


def setup_logging(level: str = "INFO", log_file: str = "") -> None:
    """
    Replace loguru sinks with a stderr sink and an optional file sink.

    Records without a ``job`` label are shown with ``-``.
    """
    logger.remove()
    logger.configure(extra={"job": "-"})
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
    if log_file:
        logger.add(log_file, level=level.upper(), format=LOG_FORMAT, rotation="10 MB", retention=5)
