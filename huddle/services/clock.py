"""Clock collaborators. Protocol time is integer seconds."""

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Source of the current timestamp."""

    @abstractmethod
    def now(self) -> int:
        """Current time in seconds."""


class SystemClock(Clock):
    """Wall clock."""

    def now(self) -> int:
        return int(time.time())


class ManualClock(Clock):
    """Clock moved explicitly, for tests and demos."""

    def __init__(self, start: int = 0):
        self._now = start

    def now(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        self._now = timestamp

    def advance(self, seconds: int) -> int:
        self._now += seconds
        return self._now
