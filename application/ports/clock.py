# application/ports/clock.py
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class ClockPort(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Wall-clock timestamp (UTC) used on outcomes and records."""
        ...

    @abstractmethod
    def monotonic_ms(self) -> float:
        """Monotonic milliseconds used for durations and deadlines."""
        ...

    @abstractmethod
    async def sleep(self, ms: float) -> None:
        ...
