"""Runtime configuration shared by every engine of one scheduler."""

from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import Any, Optional

from loguru import logger

from scheduled.clock import Clock
from scheduled.config.schema import SchedulerSettings
from scheduled.cron.evaluator import CronEvaluator, CroniterEvaluator
from scheduled.errors import ConfigurationError
from scheduled.instrumenters import Instrumenter, NoopInstrumenter
from scheduled.notifiers import ErrorNotifier, print_error
from scheduled.utils.log import TaskLogger, default_task_logger


@dataclass
class SchedulerConfig:
    """
    Collaborators and tuning for a scheduler.

    Built once before any job starts and held by reference by all engines.
    Nothing here is locked: replacing fields while jobs run is unsupported.
    """

    logger: Any = field(default_factory=lambda: logger)
    """Base logger (loguru-compatible: ``bind``, ``opt``, ``debug``, ``info``)"""

    task_logger: TaskLogger = default_task_logger
    """Builds a job's logger from the base logger and the job name"""

    instrumenter: Instrumenter = field(default_factory=NoopInstrumenter)
    error_notifier: ErrorNotifier = print_error
    cron_evaluator: CronEvaluator = field(default_factory=CroniterEvaluator)
    clock: Clock = field(default_factory=Clock)

    max_workers: int = 8
    poll_interval_s: float = 1.0
    min_cron_delay_s: int = 1

    executor: Optional[Executor] = None
    """Worker pool to use instead of the scheduler's own thread pool"""

    def __post_init__(self):
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.poll_interval_s <= 0:
            raise ConfigurationError(f"poll_interval_s must be positive, got {self.poll_interval_s}")
        if self.min_cron_delay_s < 1:
            raise ConfigurationError(f"min_cron_delay_s must be at least 1, got {self.min_cron_delay_s}")

    @classmethod
    def from_settings(cls, settings: SchedulerSettings, **overrides: Any) -> "SchedulerConfig":
        """Build a config from loaded settings; keyword overrides win."""
        tz = settings.timezone or None
        values: dict[str, Any] = {
            "cron_evaluator": CroniterEvaluator(tz),
            "clock": Clock(tz),
            "max_workers": settings.max_workers,
            "poll_interval_s": settings.poll_interval_s,
            "min_cron_delay_s": settings.min_cron_delay_s,
        }
        values.update(overrides)
        return cls(**values)
