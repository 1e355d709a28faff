"""Time source used by the engines."""

import asyncio
import time
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo


class Clock:
    """
    Wall clock, monotonic clock and sleeping, in one place.

    Engines never call ``time`` or ``asyncio.sleep`` directly, so a simulated
    clock can stand in for this one.
    """

    def __init__(self, tz: Optional[str] = None):
        self.tz = ZoneInfo(tz) if tz else None

    def now(self) -> datetime:
        """Current wall-clock time as an aware datetime."""
        if self.tz is not None:
            return datetime.now(self.tz)
        return datetime.now().astimezone()

    def time(self) -> float:
        """Monotonic seconds, for measuring periods."""
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(max(0.0, seconds))
