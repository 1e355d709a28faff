"""
Scheduling engines.

The resolver classifies an interval and builds one of three engines; each
engine runs job invocations through an ``ExecutionIsolator``.
"""

from scheduled.engine.base import Engine
from scheduled.engine.cron import CronEngine
from scheduled.engine.fixed import FixedIntervalEngine
from scheduled.engine.isolator import (
    ExecutionIsolator,
    RunContext,
    RunResult,
    current_context,
)
from scheduled.engine.predicate import PollState, PredicateEngine
from scheduled.engine.resolver import resolve

__all__ = [
    "Engine",
    "CronEngine",
    "FixedIntervalEngine",
    "PredicateEngine",
    "PollState",
    "ExecutionIsolator",
    "RunContext",
    "RunResult",
    "current_context",
    "resolve",
]
