# application/ports/batch_scheduler.py
from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Callable, Optional


class BatchSchedulerPort(ABC):
    """Runs whole batches in the background, keyed by batch id."""

    @abstractmethod
    def submit(self, batch_id: str, task: Callable[[], object]) -> Future:
        ...

    @abstractmethod
    def wait(self, batch_id: str, timeout_sec: float) -> bool:
        ...

    @abstractmethod
    def get_future(self, batch_id: str) -> Optional[Future]:
        ...
