"""Fixed-interval engine."""

from __future__ import annotations

import math
from concurrent.futures import Executor
from typing import Optional

from scheduled.config.runtime import SchedulerConfig
from scheduled.engine.base import Engine
from scheduled.engine.isolator import ExecutionIsolator
from scheduled.types import FixedSeconds, IntervalKind


class FixedIntervalEngine(Engine):
    """
    Runs a job immediately, then every ``period`` seconds.

    Ticks are measured from the previous scheduled instant, not from when the
    previous run finished. Runs are not serialized: a run slower than the
    period overlaps the next one.
    """

    kind = IntervalKind.FIXED

    def __init__(
        self,
        interval: FixedSeconds,
        isolator: ExecutionIsolator,
        config: SchedulerConfig,
        executor: Optional[Executor] = None,
    ):
        super().__init__(isolator, config, executor)
        self.period = interval.seconds

    async def run(self) -> None:
        self.logger.opt(lazy=True).debug("Running every {} seconds", lambda: self.period)

        next_at = self.clock.time()
        while True:
            self._spawn(self.isolator.run)
            next_at += self.period
            now = self.clock.time()
            if next_at < now:
                missed = math.ceil((now - next_at) / self.period)
                next_at += missed * self.period
                self.logger.opt(lazy=True).debug("Skipped {} missed runs", lambda: missed)
            await self.clock.sleep(next_at - now)
            self._raise_fatal()
