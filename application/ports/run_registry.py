# application/ports/run_registry.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from domain.run_record import RunRecord, RunStatus


class RunRegistryPort(ABC):
    """Tracks the status of every execution of a (test, flavor) pairing and cooperative stop requests."""

    @abstractmethod
    def create(self, record: RunRecord) -> None:
        ...

    @abstractmethod
    def get(self, run_id: str) -> Optional[RunRecord]:
        ...

    @abstractmethod
    def list(self) -> List[RunRecord]:
        ...

    @abstractmethod
    def transition_status(
        self,
        run_id: str,
        expected: RunStatus,
        new_status: RunStatus,
        error: Optional[str] = None,
    ) -> RunRecord:
        ...

    @abstractmethod
    def request_stop(self, test_id: str) -> None:
        ...

    @abstractmethod
    def is_stop_requested(self, test_id: str) -> bool:
        ...
