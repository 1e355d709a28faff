"""Cron expression evaluation."""

from datetime import datetime
from typing import Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from croniter import croniter

from scheduled.errors import ConfigurationError


class CronEvaluator(Protocol):
    """Computes the next instant matching a cron expression."""

    def next(self, expression: str, from_time: datetime) -> datetime:
        """
        Return the first matching instant strictly after ``from_time``.

        Raises:
            ConfigurationError: If ``expression`` is malformed.
        """
        ...


class CroniterEvaluator:
    """
    Default evaluator backed by croniter.

    Supports the standard 5-field format (minute hour day month day_of_week)
    and croniter's optional seconds field. When ``tz`` is set, expressions are
    matched in that timezone instead of the timezone of ``from_time``.
    """

    def __init__(self, tz: Optional[str] = None):
        try:
            self.tz = ZoneInfo(tz) if tz else None
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigurationError(f"unknown timezone '{tz}'") from None

    def next(self, expression: str, from_time: datetime) -> datetime:
        if not croniter.is_valid(expression):
            raise ConfigurationError(f"Invalid cron expression: {expression!r}")

        base = from_time.astimezone(self.tz) if self.tz is not None else from_time
        try:
            return croniter(expression, base).get_next(datetime)
        except (ValueError, KeyError) as e:
            raise ConfigurationError(f"Invalid cron expression: {expression!r} - {e}") from e
