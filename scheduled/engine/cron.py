"""Cron engine: one run at a time, rescheduled from the current time after each run."""

from __future__ import annotations

import math
from concurrent.futures import Executor
from typing import Optional

from scheduled.config.runtime import SchedulerConfig
from scheduled.engine.base import Engine
from scheduled.engine.isolator import ExecutionIsolator
from scheduled.types import CronExpression, IntervalKind


class CronEngine(Engine):
    """
    Runs a job at the instants matched by a cron expression.

    Each iteration asks the evaluator for the next trigger after *now*, sleeps
    at least ``min_cron_delay_s`` whole seconds, runs the job and waits for it
    to finish before computing the next trigger. Exactly one timer is pending
    per job and runs never overlap; a run that outlasts a trigger skips it.
    """

    kind = IntervalKind.CRON

    def __init__(
        self,
        interval: CronExpression,
        isolator: ExecutionIsolator,
        config: SchedulerConfig,
        executor: Optional[Executor] = None,
    ):
        super().__init__(isolator, config, executor)
        self.expression = interval.expression
        self.evaluator = config.cron_evaluator
        # Fail at registration on malformed expressions
        self.evaluator.next(self.expression, self.clock.now())

    def next_delay(self) -> int:
        """Whole seconds from now until the next trigger."""
        now = self.clock.now()
        next_trigger = self.evaluator.next(self.expression, now)
        delay = max(self.config.min_cron_delay_s, math.ceil((next_trigger - now).total_seconds()))

        self.logger.opt(lazy=True).debug(
            "Next run at {} (tick delay of {})",
            lambda: next_trigger.isoformat(),
            lambda: delay,
        )
        return delay

    async def run(self) -> None:
        while True:
            await self.clock.sleep(self.next_delay())
            await self._call(self.isolator.run)
