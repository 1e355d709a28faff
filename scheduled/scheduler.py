"""Scheduler: registers jobs and runs their engines in the background."""

from __future__ import annotations

import asyncio
import signal
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional

from scheduled.config.loader import load_settings
from scheduled.config.runtime import SchedulerConfig
from scheduled.config.schema import SchedulerSettings
from scheduled.engine.base import Engine
from scheduled.engine.resolver import resolve
from scheduled.errors import JobFatalError
from scheduled.utils.log import setup_logging


@dataclass
class ScheduledJob:
    """A registered job: its engine and the handle of the task driving it."""

    engine: Engine
    handle: Future

    @property
    def name(self) -> Optional[str]:
        return self.engine.name

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "kind": self.engine.kind.value,
            "done": self.handle.done(),
        }


class Scheduler:
    """
    Runs recurring jobs without blocking the caller.

    Engines run as tasks on a private asyncio event loop living on a daemon
    thread; job bodies run on a shared thread pool. ``every`` returns as soon
    as the job is registered, ``wait`` parks the calling thread until SIGINT.

    Usage:
        scheduler = Scheduler()

        @scheduler.every(60)
        def refresh():
            ...

        scheduler.every("10 9 * * *", send_report, name="billing")
        scheduler.wait()
    """

    def __init__(self, config: Optional[SchedulerConfig] = None):
        self.config = config or SchedulerConfig()
        self.logger = self.config.logger
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._owns_executor = False
        self._jobs: list[ScheduledJob] = []
        self._fatal: list[BaseException] = []
        self._lock = threading.Lock()
        self._running = False

    @classmethod
    def from_settings(
        cls,
        settings: Optional[SchedulerSettings] = None,
        config_path: Optional[Path] = None,
        **overrides: Any,
    ) -> "Scheduler":
        """Build a scheduler from settings (loaded from ``config_path`` if not given)."""
        if settings is None:
            settings = load_settings(config_path)
        setup_logging(settings.log_level, settings.log_file)
        return cls(SchedulerConfig.from_settings(settings, **overrides))

    # ========== Lifecycle ==========

    def start(self) -> None:
        """Start the event loop thread and the worker pool; no-op if running."""
        with self._lock:
            if self._running:
                return

            if self.config.executor is not None:
                self._executor = self.config.executor
                self._owns_executor = False
            else:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.config.max_workers,
                    thread_name_prefix="scheduled-worker",
                )
                self._owns_executor = True

            self._loop = asyncio.new_event_loop()
            ready = threading.Event()
            self._thread = threading.Thread(
                target=self._run_loop,
                args=(self._loop, ready),
                name="scheduled-loop",
                daemon=True,
            )
            self._thread.start()
            ready.wait()
            self._running = True

        self.logger.info(f"Scheduler started (workers: {self.config.max_workers})")

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop, ready: threading.Event) -> None:
        asyncio.set_event_loop(loop)
        loop.call_soon(ready.set)
        try:
            loop.run_forever()
        finally:
            loop.close()

    def shutdown(self, wait: bool = True, timeout: float = 5.0) -> None:
        """
        Stop every engine, the event loop and (if owned) the worker pool.

        Args:
            wait: Wait for job bodies that are still running.
            timeout: Seconds to wait for the engines to unwind.
        """
        with self._lock:
            if not self._running:
                return
            self._running = False
            loop, thread, executor = self._loop, self._thread, self._executor
            jobs, self._jobs = self._jobs, []

        try:
            asyncio.run_coroutine_threadsafe(self._cancel_engines(jobs), loop).result(timeout)
        except TimeoutError:
            self.logger.warning("Scheduler engines did not stop in time")
        loop.call_soon_threadsafe(loop.stop)
        if thread is not threading.current_thread():
            thread.join(timeout)

        if self._owns_executor:
            executor.shutdown(wait=wait, cancel_futures=True)

        self.logger.info("Scheduler stopped")

    @staticmethod
    async def _cancel_engines(jobs: list[ScheduledJob]) -> None:
        for job in jobs:
            job.engine.cancel_pending()
        current = asyncio.current_task()
        tasks = [t for t in asyncio.all_tasks() if t is not current]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def is_running(self) -> bool:
        return self._running and self._thread is not None and self._thread.is_alive()

    # ========== Public API ==========

    def every(
        self,
        interval: Any,
        body: Optional[Callable[[], Any]] = None,
        *,
        name: Any = None,
    ) -> Any:
        """
        Run ``body`` every ``interval``.

        Args:
            interval: Seconds (``int``, ``float`` or ``timedelta``) between
                runs, a cron line (``str``), or a callable taking the job state
                and returning truthy to run, falsy to skip, ``CANCEL`` to stop.
            body: The job; called with no arguments. When omitted, returns a
                decorator.
            name: Used in logs. Defaults to the body's ``file:line``; pass
                ``NO_NAME`` to log through the base logger unchanged.

        Returns:
            ``body``, unchanged.

        Raises:
            ConfigurationError: If the interval is unsupported or invalid.
        """
        if body is None:
            def decorator(func: Callable[[], Any]) -> Callable[[], Any]:
                return self.every(interval, func, name=name)
            return decorator

        # Raises before any thread or timer exists
        engine = resolve(interval, body, self.config, name=name)

        self.start()
        engine.executor = self._executor
        handle = asyncio.run_coroutine_threadsafe(engine.run(), self._loop)
        job = ScheduledJob(engine=engine, handle=handle)
        with self._lock:
            self._jobs.append(job)
        handle.add_done_callback(partial(self._on_job_done, job))

        self.logger.info(f"Scheduled {engine.kind.value} job '{job.name or '-'}'")
        return body

    def wait(self, tick: float = 1.0) -> None:
        """
        Block the calling thread until SIGINT ends the process.

        A fatal error that stopped a job is re-raised here.
        """
        previous = signal.signal(signal.SIGINT, self._on_interrupt)
        try:
            while True:
                self._raise_fatal()
                time.sleep(tick)
        finally:
            signal.signal(signal.SIGINT, previous)
            self.shutdown(wait=False)

    def status(self) -> dict:
        """Get scheduler status."""
        with self._lock:
            jobs = [job.to_dict() for job in self._jobs]
        return {
            "running": self.is_running(),
            "jobs": jobs,
        }

    # ========== Internals ==========

    def _on_interrupt(self, signum: int, frame: Any) -> None:
        self.logger.info("Interrupted, exiting")
        raise SystemExit(0)

    def _on_job_done(self, job: ScheduledJob, handle: Future) -> None:
        if handle.cancelled():
            return
        error = handle.exception()
        if error is None:
            self.logger.debug(f"Job '{job.name or '-'}' finished")
            return
        self.logger.opt(exception=error).critical(
            f"Job '{job.name or '-'}' stopped by fatal error: {type(error.__cause__ or error).__name__}"
        )
        self._fatal.append(error)

    def _raise_fatal(self) -> None:
        if self._fatal:
            error = self._fatal[0]
            if isinstance(error, JobFatalError) and error.__cause__ is not None:
                raise error.__cause__
            raise error


_default: Optional[Scheduler] = None
_default_lock = threading.Lock()


def get_default_scheduler() -> Scheduler:
    """The process-wide scheduler used by the module-level ``every`` and ``wait``."""
    global _default
    with _default_lock:
        if _default is None:
            _default = Scheduler()
        return _default


def every(interval: Any, body: Optional[Callable[[], Any]] = None, *, name: Any = None) -> Any:
    """Register a job on the default scheduler. See ``Scheduler.every``."""
    return get_default_scheduler().every(interval, body, name=name)


def wait() -> None:
    """Block until interrupted, running the default scheduler's jobs."""
    get_default_scheduler().wait()
