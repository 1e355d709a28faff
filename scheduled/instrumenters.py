"""Instrumentation hooks wrapped around every job invocation."""

import time
from typing import Any, Callable, Protocol, TypeVar

from loguru import logger


T = TypeVar("T")

Payload = dict[str, Any]


class Instrumenter(Protocol):
    """
    Observability hook.

    ``instrument`` must call ``body`` exactly once with the mutable
    ``payload`` and return whatever ``body`` returns.
    """

    def instrument(self, name: str, payload: Payload, body: Callable[[Payload], T]) -> T:
        ...


class NoopInstrumenter:
    """An instrumenter that performs work without measurement."""

    def instrument(self, name: str, payload: Payload, body: Callable[[Payload], T]) -> T:
        return body(payload)


class LoggingInstrumenter:
    """
    Times each invocation, stores ``duration`` (seconds) in the payload and
    logs it at debug level.
    """

    def __init__(self, log: Any = None):
        self.logger = log if log is not None else logger

    def instrument(self, name: str, payload: Payload, body: Callable[[Payload], T]) -> T:
        started = time.perf_counter()
        try:
            return body(payload)
        finally:
            payload["duration"] = time.perf_counter() - started
            self.logger.debug(
                f"{name} {payload.get('name')} took {payload['duration']:.3f}s"
                + (f" ({payload['exception_class']})" if "exception_class" in payload else "")
            )
