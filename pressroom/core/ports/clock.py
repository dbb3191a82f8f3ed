"""Time ports: wall clock, monotonic clock and sleeping."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class ClockPort(Protocol):
    """Clock used for timestamps and deadlines."""

    def now_utc(self) -> datetime:
        """Current UTC time (timestamps)."""
        ...

    def monotonic(self) -> float:
        """Monotonic seconds (deadlines)."""
        ...


class SleeperPort(Protocol):
    """Blocking sleep used between retry attempts."""

    def sleep(self, seconds: float) -> None:
        """Sleep for the given number of seconds."""
        ...
