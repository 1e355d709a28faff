"""Utilities module."""

from scheduled.utils.log import (
    LOG_FORMAT,
    TaskLogger,
    default_task_logger,
    setup_logging,
)

__all__ = [
    "LOG_FORMAT",
    "TaskLogger",
    "default_task_logger",
    "setup_logging",
]
