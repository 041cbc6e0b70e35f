# infrastructure/run/in_memory_run_registry.py
from __future__ import annotations

from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional, Set

from application.ports.run_registry import RunRegistryPort
from domain.exceptions import RunStateError
from domain.run_record import TERMINAL_STATUSES, RunRecord, RunStatus


class InMemoryRunRegistry(RunRegistryPort):
    """
    Thread-safe: the API thread reads records and files stop requests while
    the event loop thread drives the runs.
    """

    def __init__(self) -> None:
        self._runs: Dict[str, RunRecord] = {}
        self._stop_requested: Set[str] = set()
        self._lock = Lock()

    def create(self, record: RunRecord) -> None:
        with self._lock:
            existing = self._runs.get(record.run_id)
            if existing is not None and existing.status not in TERMINAL_STATUSES:
                raise RunStateError(f"Run already active: {record.run_id}")
            # a stop only targets in-flight runs; a fresh run starts unstopped
            if not self._has_active_run(record.test_id):
                self._stop_requested.discard(record.test_id)
            self._runs[record.run_id] = record

    def get(self, run_id: str) -> Optional[RunRecord]:
        with self._lock:
            return self._runs.get(run_id)

    def list(self) -> List[RunRecord]:
        with self._lock:
            return sorted(self._runs.values(), key=lambda r: r.created_at)

    def transition_status(
        self,
        run_id: str,
        expected: RunStatus,
        new_status: RunStatus,
        error: Optional[str] = None,
    ) -> RunRecord:
        with self._lock:
            record = self._runs.get(run_id)
            if record is None:
                raise RunStateError(f"Run not found: {run_id}")
            if record.status != expected:
                raise RunStateError(
                    f"Invalid run transition: {run_id} {record.status.value} -> {new_status.value}"
                )
            updated = record.with_status(
                status=new_status,
                updated_at=datetime.now(timezone.utc),
                error=error,
            )
            self._runs[run_id] = updated
            return updated

    def request_stop(self, test_id: str) -> None:
        with self._lock:
            self._stop_requested.add(test_id)

    def is_stop_requested(self, test_id: str) -> bool:
        with self._lock:
            return test_id in self._stop_requested

    def _has_active_run(self, test_id: str) -> bool:
        return any(
            r.test_id == test_id and r.status not in TERMINAL_STATUSES
            for r in self._runs.values()
        )
