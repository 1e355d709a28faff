"""Common machinery for the scheduling engines."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from concurrent.futures import Executor
from typing import Any, Callable, Optional

from scheduled.config.runtime import SchedulerConfig
from scheduled.engine.isolator import ExecutionIsolator, is_fatal
from scheduled.errors import JobFatalError
from scheduled.types import IntervalKind


class Engine(ABC):
    """
    Drives one registered job.

    ``run`` is a coroutine executed as a task on the scheduler's event loop.
    Blocking work (job bodies, predicates) is handed to ``executor``; the loop
    itself only sleeps and dispatches.
    """

    kind: IntervalKind

    def __init__(
        self,
        isolator: ExecutionIsolator,
        config: SchedulerConfig,
        executor: Optional[Executor] = None,
    ):
        self.isolator = isolator
        self.config = config
        self.executor = executor
        self.clock = config.clock
        self.logger = isolator.task_logger()
        self._pending: set[asyncio.Future] = set()
        self._fatal: Optional[BaseException] = None

    @property
    def name(self) -> Optional[str]:
        return self.isolator.name

    @abstractmethod
    async def run(self) -> None:
        """Run until cancelled (or, for predicates, until ``CANCEL``)."""

    async def _call(self, func: Callable[..., Any], *args: Any) -> Any:
        """Run ``func`` on the worker pool and wait for it."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self.executor, func, *args)
        except asyncio.CancelledError:
            raise
        except BaseException as e:
            if not is_fatal(e):
                raise
            raise self._fatal_error(e) from e

    def _spawn(self, func: Callable[..., Any], *args: Any) -> None:
        """Run ``func`` on the worker pool without waiting for it."""
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(self.executor, func, *args)
        self._pending.add(future)
        future.add_done_callback(self._on_spawned_done)

    def _on_spawned_done(self, future: asyncio.Future) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        error = future.exception()
        if error is None:
            return
        if not is_fatal(error):
            self.isolator.notify(error)
        elif self._fatal is None:
            self._fatal = error

    def cancel_pending(self) -> None:
        """Stop waiting for dispatched runs; bodies already running keep going."""
        for future in list(self._pending):
            future.cancel()

    def _raise_fatal(self) -> None:
        """Re-raise a fatal error that escaped a spawned invocation."""
        if self._fatal is not None:
            raise self._fatal_error(self._fatal) from self._fatal

    def _fatal_error(self, error: BaseException) -> JobFatalError:
        # KeyboardInterrupt / SystemExit raised inside a task would tear down the loop
        return JobFatalError(f"{type(error).__name__}: {error}", job_name=self.name)
