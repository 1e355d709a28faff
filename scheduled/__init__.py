"""scheduled - run recurring jobs in the background.

Jobs repeat every N seconds, at cron-expression instants, or whenever a
predicate says so:

    import scheduled

    scheduled.every(60, lambda: print("every minute"))
    scheduled.every("10 9 * * *", send_bills, name="billing")
    scheduled.every(lambda job: job.last_run is None, warm_cache)

    scheduled.wait()
"""

__version__ = "0.1.0"

from scheduled.config import SchedulerConfig, SchedulerSettings, load_settings
from scheduled.engine import RunContext, RunResult, current_context
from scheduled.errors import ConfigurationError, JobFatalError, RuntimeJobError, SchedulerError
from scheduled.instrumenters import LoggingInstrumenter, NoopInstrumenter
from scheduled.notifiers import log_error, print_error
from scheduled.scheduler import Scheduler, every, get_default_scheduler, wait
from scheduled.types import (
    CANCEL,
    NO_NAME,
    CronExpression,
    FixedSeconds,
    IntervalKind,
    JobState,
    Predicate,
)

__all__ = [
    "__version__",
    "Scheduler",
    "SchedulerConfig",
    "SchedulerSettings",
    "load_settings",
    "every",
    "wait",
    "get_default_scheduler",
    "current_context",
    "RunContext",
    "RunResult",
    "CANCEL",
    "NO_NAME",
    "IntervalKind",
    "FixedSeconds",
    "CronExpression",
    "Predicate",
    "JobState",
    "NoopInstrumenter",
    "LoggingInstrumenter",
    "print_error",
    "log_error",
    "SchedulerError",
    "ConfigurationError",
    "JobFatalError",
    "RuntimeJobError",
]
