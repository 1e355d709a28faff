"""Interval resolver: picks the engine for a registration."""

from __future__ import annotations

from concurrent.futures import Executor
from typing import Any, Callable, Optional

from scheduled.config.runtime import SchedulerConfig
from scheduled.engine.base import Engine
from scheduled.engine.cron import CronEngine
from scheduled.engine.fixed import FixedIntervalEngine
from scheduled.engine.isolator import ExecutionIsolator
from scheduled.engine.predicate import PredicateEngine
from scheduled.errors import ConfigurationError
from scheduled.types import CronExpression, FixedSeconds, Predicate, classify


def resolve(
    interval: Any,
    body: Callable[[], Any],
    config: SchedulerConfig,
    name: Any = None,
    executor: Optional[Executor] = None,
) -> Engine:
    """
    Build (but do not start) the engine for ``interval``.

    Raises:
        ConfigurationError: If the interval is unsupported or invalid. Nothing
            has been scheduled when this is raised.
    """
    if not callable(body):
        raise ConfigurationError(f"Job body must be callable, got {body!r}")

    schedule = classify(interval)
    isolator = ExecutionIsolator(body, config, name=name)

    if isinstance(schedule, FixedSeconds):
        return FixedIntervalEngine(schedule, isolator, config, executor)
    if isinstance(schedule, CronExpression):
        return CronEngine(schedule, isolator, config, executor)
    if isinstance(schedule, Predicate):
        return PredicateEngine(schedule, isolator, config, executor)

    raise ConfigurationError(f"Unsupported value for interval: {interval!r}")
