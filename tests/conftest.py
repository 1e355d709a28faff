"""Shared fixtures: a simulated clock and an executor that runs work inline."""

import asyncio
from concurrent.futures import Executor, Future
from datetime import datetime, timedelta, timezone

import pytest

from scheduled.config import SchedulerConfig


START = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """
    Simulated clock: ``sleep`` advances time instantly.

    Once a sleep would move past ``until`` seconds, the sleeper parks forever
    and ``parked`` is set, so the test can stop the engine.
    """

    def __init__(self, start: datetime = START, until: float = 60.0):
        self.start = start
        self.until = until
        self.elapsed = 0.0
        self.sleeps: list[float] = []
        self.parked = asyncio.Event()

    def now(self) -> datetime:
        return self.start + timedelta(seconds=self.elapsed)

    def time(self) -> float:
        return self.elapsed

    def advance(self, seconds: float) -> None:
        self.elapsed += seconds

    async def sleep(self, seconds: float) -> None:
        seconds = max(0.0, seconds)
        self.sleeps.append(seconds)
        if self.elapsed + seconds > self.until:
            self.parked.set()
            await asyncio.Event().wait()
        self.elapsed += seconds
        await asyncio.sleep(0)


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, /, *args, **kwargs):
        future: Future = Future()
        try:
            result = fn(*args, **kwargs)
        except BaseException as e:
            future.set_exception(e)
        else:
            future.set_result(result)
        return future


async def _drive(engine, clock: FakeClock, timeout: float) -> None:
    task = asyncio.create_task(engine.run())
    parked = asyncio.create_task(clock.parked.wait())
    try:
        await asyncio.wait({task, parked}, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
    finally:
        parked.cancel()
        if not task.done():
            task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


def drive(engine, clock: FakeClock, timeout: float = 30.0) -> None:
    """Run ``engine`` until it finishes or its clock passes ``clock.until``."""
    asyncio.run(_drive(engine, clock, timeout))


class RecordingNotifier:
    def __init__(self):
        self.errors: list[BaseException] = []

    def __call__(self, error: BaseException) -> None:
        self.errors.append(error)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_config(notifier):
    def factory(clock=None, **kwargs):
        kwargs.setdefault("error_notifier", notifier)
        if clock is not None:
            kwargs["clock"] = clock
        return SchedulerConfig(**kwargs)
    return factory


@pytest.fixture
def inline():
    return InlineExecutor()


@pytest.fixture
def make_clock():
    return FakeClock


@pytest.fixture
def run_engine():
    return drive
