"""Error types for scheduled."""

from typing import Optional


class SchedulerError(Exception):
    """Base class for scheduler errors."""


class ConfigurationError(SchedulerError, ValueError):
    """
    Raised when a job cannot be registered.

    Covers unsupported interval types, non-positive periods and malformed
    cron expressions. Always raised synchronously, before any timer exists.
    """


class RuntimeJobError(SchedulerError):
    """A job body raised an ordinary error during one invocation."""

    def __init__(self, message: str, job_name: Optional[str] = None):
        super().__init__(message)
        self.job_name = job_name


class JobFatalError(SchedulerError):
    """
    Carries a fatal error (``MemoryError``, ``KeyboardInterrupt``, ``SystemExit``...)
    out of an engine task. The original error is the ``__cause__``.
    """

    def __init__(self, message: str, job_name: Optional[str] = None):
        super().__init__(message)
        self.job_name = job_name
