"""Error notifiers: where failed job runs are reported."""

import sys
import traceback
from typing import Callable

from loguru import logger


ErrorNotifier = Callable[[BaseException], None]


def print_error(error: BaseException) -> None:
    """Write the full error description, traceback included, to stderr."""
    traceback.print_exception(type(error), error, error.__traceback__, file=sys.stderr)
    sys.stderr.flush()


def log_error(error: BaseException) -> None:
    """Report the error through loguru at error level, with traceback."""
    logger.opt(exception=error).error(f"Scheduled job failed: {type(error).__name__}: {error}")
