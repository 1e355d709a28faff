"""Predicate engine: polls a condition and runs the job while it holds."""

from __future__ import annotations

from concurrent.futures import Executor
from enum import Enum
from typing import Any, Optional

from scheduled.config.runtime import SchedulerConfig
from scheduled.engine.base import Engine
from scheduled.engine.isolator import ExecutionIsolator
from scheduled.errors import JobFatalError
from scheduled.types import CANCEL, IntervalKind, JobState, Predicate


class PollState(str, Enum):
    POLLING = "polling"
    CANCELLED = "cancelled"


class PredicateEngine(Engine):
    """
    Evaluates ``predicate(job_state)`` every ``poll_interval_s`` seconds.

    - ``CANCEL``: stop polling for good.
    - truthy: run the job, then set ``job_state.last_run`` (even if it failed).
    - falsy: nothing happens.

    A predicate that raises is reported like a failed run and counts as falsy.
    Runs are dispatched without waiting, so a slow run can overlap later ones.
    """

    kind = IntervalKind.PREDICATE

    def __init__(
        self,
        interval: Predicate,
        isolator: ExecutionIsolator,
        config: SchedulerConfig,
        executor: Optional[Executor] = None,
        state: Optional[JobState] = None,
    ):
        super().__init__(isolator, config, executor)
        self.predicate = interval.check
        self.job_state = state if state is not None else JobState()
        self.state = PollState.POLLING
        self.polls = 0

    async def run(self) -> None:
        while self.state is PollState.POLLING:
            verdict = await self._poll()

            if verdict is CANCEL:
                self.logger.debug("Received CANCEL. Shutting down.")
                self.state = PollState.CANCELLED
                return

            if verdict:
                self._spawn(self._fire)

            await self.clock.sleep(self.config.poll_interval_s)
            self._raise_fatal()

    async def _poll(self) -> Any:
        self.polls += 1
        try:
            return await self._call(self.predicate, self.job_state)
        except JobFatalError:
            raise
        except Exception as e:
            self.isolator.notify(e)
            return False

    def _fire(self) -> None:
        self.isolator.run()
        self.job_state.last_run = self.clock.now()
