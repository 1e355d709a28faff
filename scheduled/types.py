"""Interval and job state types for scheduled."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Optional, Union

from scheduled.errors import ConfigurationError


class _Sentinel:
    """Named singleton marker."""

    def __init__(self, name: str):
        self._name = name

    def __repr__(self) -> str:
        return self._name

    def __bool__(self) -> bool:
        # CANCEL must never be mistaken for a truthy "run now" verdict
        return False


CANCEL = _Sentinel("CANCEL")
"""Returned by a predicate to stop polling permanently."""

NO_NAME = _Sentinel("NO_NAME")
"""Passed as ``name`` to skip name derivation and use the base logger as is."""


class IntervalKind(str, Enum):
    """How a job decides when to run."""

    FIXED = "fixed"         # every N seconds
    CRON = "cron"           # cron expression
    PREDICATE = "predicate" # polled condition


@dataclass(frozen=True)
class FixedSeconds:
    """Run immediately, then every ``seconds``."""

    seconds: float

    def __post_init__(self) -> None:
        if isinstance(self.seconds, bool) or not isinstance(self.seconds, (int, float)):
            raise ConfigurationError(f"Fixed period must be a number, got {self.seconds!r}")
        if self.seconds <= 0:
            raise ConfigurationError(f"Fixed period must be positive, got {self.seconds!r}")

    @property
    def kind(self) -> IntervalKind:
        return IntervalKind.FIXED


@dataclass(frozen=True)
class CronExpression:
    """Run at the instants matched by a cron line, e.g. ``"10 9 * * *"``."""

    expression: str

    def __post_init__(self) -> None:
        if not isinstance(self.expression, str) or not self.expression.strip():
            raise ConfigurationError(f"Cron expression must be a non-empty string, got {self.expression!r}")

    @property
    def kind(self) -> IntervalKind:
        return IntervalKind.CRON


@dataclass(frozen=True)
class Predicate:
    """Run whenever ``check(job_state)`` is truthy; stop when it returns ``CANCEL``."""

    check: Callable[["JobState"], Any]

    def __post_init__(self) -> None:
        if not callable(self.check):
            raise ConfigurationError(f"Predicate must be callable, got {self.check!r}")

    @property
    def kind(self) -> IntervalKind:
        return IntervalKind.PREDICATE


IntervalSpec = Union[FixedSeconds, CronExpression, Predicate]


@dataclass
class JobState:
    """
    Runtime state of a predicate-driven job.

    Owned by the single engine polling that job. ``last_run`` records the
    last attempted invocation, whether or not the body succeeded.
    """

    last_run: Optional[datetime] = None


def classify(interval: Any) -> IntervalSpec:
    """
    Turn a user supplied interval into an Interval Spec.

    - ``int`` / ``float`` / ``timedelta`` -> ``FixedSeconds``
    - ``str`` -> ``CronExpression``
    - callable -> ``Predicate``

    Raises:
        ConfigurationError: For any other value.
    """
    if isinstance(interval, (FixedSeconds, CronExpression, Predicate)):
        return interval

    # bool is an int subclass; True is not a period
    if isinstance(interval, bool):
        raise ConfigurationError(f"Unsupported value for interval: {interval!r}")

    if isinstance(interval, timedelta):
        return FixedSeconds(interval.total_seconds())

    if isinstance(interval, (int, float)):
        return FixedSeconds(interval)

    if isinstance(interval, str):
        return CronExpression(interval)

    if callable(interval):
        return Predicate(interval)

    raise ConfigurationError(f"Unsupported value for interval: {interval!r}")
