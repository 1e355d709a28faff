"""Execution isolator: runs one job invocation without letting it hurt the scheduler."""

from __future__ import annotations

import asyncio
import contextvars
import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional

from scheduled.config.runtime import SchedulerConfig
from scheduled.errors import RuntimeJobError
from scheduled.types import NO_NAME

RUN_EVENT = "scheduled.run"

# Errors that mean the process itself is in trouble; never contained.
FATAL_ERRORS = (MemoryError,)


def is_fatal(error: BaseException) -> bool:
    """True for errors that must end the process rather than be contained."""
    return isinstance(error, FATAL_ERRORS) or not isinstance(error, Exception)


_current: contextvars.ContextVar[Optional["RunContext"]] = contextvars.ContextVar(
    "scheduled_run_context", default=None
)


@dataclass(frozen=True)
class RunContext:
    """Per-invocation context: the job name and the logger derived for it."""

    name: Optional[str]
    logger: Any


@dataclass(frozen=True)
class RunResult:
    """Outcome of one invocation: a value, or a ``RuntimeJobError``."""

    name: Optional[str]
    value: Any = None
    error: Optional[RuntimeJobError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def current_context() -> Optional[RunContext]:
    """The ``RunContext`` of the job running on this thread, if any."""
    return _current.get()


def block_name(body: Callable[..., Any]) -> str:
    """Name a job after where its body is defined, as ``file:line``."""
    target = inspect.unwrap(body)
    code = getattr(target, "__code__", None)
    if code is None:
        code = getattr(getattr(target, "__call__", None), "__code__", None)
    if code is not None:
        return f"{code.co_filename}:{code.co_firstlineno}"
    return getattr(target, "__qualname__", None) or repr(target)


def resolve_name(name: Any, body: Callable[..., Any]) -> Optional[str]:
    """Explicit name wins; ``NO_NAME`` disables naming; otherwise derive one."""
    if name is NO_NAME:
        return None
    if name:
        return str(name)
    return block_name(body)


class ExecutionIsolator:
    """
    Wraps each invocation of a job body.

    For every run it derives the job logger, instruments the call under
    ``scheduled.run`` and contains ordinary errors: they are recorded in the
    instrumentation payload, handed to the error notifier and returned as a
    failed ``RunResult``. Fatal errors (``MemoryError`` and anything that is
    not an ``Exception``) propagate.
    """

    def __init__(self, body: Callable[[], Any], config: SchedulerConfig, name: Any = None):
        self.body = body
        self.config = config
        self.name = resolve_name(name, body)

    def task_logger(self) -> Any:
        """The logger for this job; the base logger itself when naming is disabled."""
        if self.name is None:
            return self.config.logger
        return self.config.task_logger(self.config.logger, self.name)

    def run(self) -> RunResult:
        payload: dict[str, Any] = {"name": self.name}
        caught: list[Exception] = []

        try:
            log = self.task_logger()
        except FATAL_ERRORS:
            raise
        except Exception as e:
            caught.append(e)
            log = self.config.logger
        context = RunContext(name=self.name, logger=log)

        def measured(payload: dict[str, Any]) -> Any:
            try:
                result = self._call_body()
            except FATAL_ERRORS:
                raise
            except Exception as e:
                payload["exception_class"] = type(e).__name__
                payload["exception_message"] = str(e)
                caught.append(e)
                return None
            payload["result"] = result
            return result

        value = None
        token = _current.set(context)
        try:
            value = self.config.instrumenter.instrument(RUN_EVENT, payload, measured)
        except FATAL_ERRORS:
            raise
        except Exception as e:
            # raised by the instrumenter itself, not by the body
            caught.append(e)
        finally:
            _current.reset(token)

        if not caught:
            return RunResult(name=self.name, value=value)

        error = caught[0]
        context.logger.opt(lazy=True).debug(
            "Run failed with {}: {}", lambda: type(error).__name__, lambda: error
        )
        for each in caught:
            self.notify(each)
        failure = RuntimeJobError(f"{type(error).__name__}: {error}", job_name=self.name)
        failure.__cause__ = error
        return RunResult(name=self.name, error=failure)

    def notify(self, error: Exception) -> None:
        """Deliver ``error`` to the error notifier; a failing notifier is only logged."""
        try:
            self.config.error_notifier(error)
        except FATAL_ERRORS:
            raise
        except Exception as e:
            self.config.logger.opt(exception=e).error(
                f"Error notifier failed while reporting {type(error).__name__}: {e}"
            )

    def _call_body(self) -> Any:
        result = self.body()
        if inspect.isawaitable(result):
            return asyncio.run(_await(result))
        return result


async def _await(awaitable: Any) -> Any:
    return await awaitable
