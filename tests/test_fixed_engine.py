"""Tests for the fixed-interval engine."""

import asyncio
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from scheduled.clock import Clock
from scheduled.engine.fixed import FixedIntervalEngine
from scheduled.engine.isolator import ExecutionIsolator
from scheduled.engine.resolver import resolve
from scheduled.errors import JobFatalError
from scheduled.types import NO_NAME, FixedSeconds


class TestFixedIntervalEngine:
    def test_fires_immediately_then_every_period(self, make_clock, make_config, inline, run_engine):
        clock = make_clock(until=11)
        fired = []
        engine = resolve(5, lambda: fired.append(clock.time()), make_config(clock), executor=inline)

        run_engine(engine, clock)

        assert isinstance(engine, FixedIntervalEngine)
        assert fired == [0, 5, 10]

    @pytest.mark.parametrize("period", [1, 7, 30])
    def test_at_least_one_run_per_period(self, period, make_clock, make_config, inline, run_engine):
        horizon = period * 10
        clock = make_clock(until=horizon)
        fired = []
        engine = resolve(period, lambda: fired.append(clock.time()), make_config(clock), executor=inline)

        run_engine(engine, clock)

        assert fired[0] == 0
        assert len(fired) == horizon // period + 1
        gaps = [b - a for a, b in zip(fired, fired[1:])]
        assert all(gap <= period for gap in gaps)

    def test_period_measured_from_scheduled_instant(self, make_clock, make_config, inline, run_engine):
        clock = make_clock(until=11)
        fired = []

        def slow_body():
            fired.append(clock.time())
            clock.advance(2)

        engine = resolve(5, slow_body, make_config(clock), executor=inline)
        run_engine(engine, clock)

        assert fired == [0, 5, 10]

    def test_failure_does_not_stop_the_schedule(self, make_clock, make_config, inline, run_engine, notifier):
        clock = make_clock(until=130)
        fired = []

        def body():
            fired.append(clock.time())
            raise RuntimeError("boom")

        engine = resolve(60, body, make_config(clock), name=NO_NAME, executor=inline)
        run_engine(engine, clock)

        assert fired == [0, 60, 120]
        assert len(notifier.errors) == 3
        assert str(notifier.errors[0]) == "boom"

    def test_fatal_error_stops_the_engine(self, make_clock, make_config, inline, run_engine):
        clock = make_clock(until=100)

        def body():
            raise MemoryError()

        engine = resolve(5, body, make_config(clock), executor=inline)
        with pytest.raises(JobFatalError) as info:
            run_engine(engine, clock)
        assert isinstance(info.value.__cause__, MemoryError)

    def test_keyboard_interrupt_is_carried_not_raised(self, make_clock, make_config, inline, run_engine):
        clock = make_clock(until=100)

        def body():
            raise KeyboardInterrupt()

        engine = resolve(5, body, make_config(clock), name="doomed", executor=inline)
        with pytest.raises(JobFatalError) as info:
            run_engine(engine, clock)
        assert isinstance(info.value.__cause__, KeyboardInterrupt)
        assert info.value.job_name == "doomed"

    def test_stall_skips_missed_ticks(self, make_clock, make_config, inline, run_engine):
        clock = make_clock(until=21)
        fired = []

        def body():
            fired.append(clock.time())
            if len(fired) == 1:
                clock.advance(12)

        engine = resolve(5, body, make_config(clock), executor=inline)
        run_engine(engine, clock)

        assert fired == [0, 15, 20]
        assert all(delay > 0 for delay in clock.sleeps)

    def test_failing_instrumenter_keeps_the_schedule(self, make_clock, make_config, inline, run_engine, notifier):
        clock = make_clock(until=11)
        attempts = []

        class BrokenInstrumenter:
            def instrument(self, name, payload, body):
                attempts.append(clock.time())
                raise RuntimeError("metrics backend down")

        config = make_config(clock, instrumenter=BrokenInstrumenter())
        run_engine(resolve(5, lambda: None, config, executor=inline), clock)

        assert attempts == [0, 5, 10]
        assert len(notifier.errors) == 3

    def test_slow_runs_overlap(self, make_config):
        in_flight = 0
        peak = 0
        lock = threading.Lock()

        def slow_body():
            nonlocal in_flight, peak
            with lock:
                in_flight += 1
                peak = max(peak, in_flight)
            time.sleep(0.2)
            with lock:
                in_flight -= 1

        config = make_config(Clock())
        with ThreadPoolExecutor(max_workers=4) as pool:
            engine = FixedIntervalEngine(
                FixedSeconds(0.05), ExecutionIsolator(slow_body, config, name="slow"), config, pool
            )

            async def main():
                task = asyncio.create_task(engine.run())
                await asyncio.sleep(0.3)
                task.cancel()
                engine.cancel_pending()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

            asyncio.run(main())

        assert peak >= 2
