# infrastructure/run/in_memory_batch_store.py
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional

from application.outcome import BatchResult
from domain.exceptions import RunStateError

BATCH_RUNNING = "running"
BATCH_COMPLETED = "completed"
BATCH_ERROR = "error"


@dataclass(frozen=True)
class BatchRecord:
    batch_id: str
    test_ids: List[str]
    status: str
    created_at: datetime
    updated_at: datetime
    result: Optional[BatchResult] = None
    error: Optional[str] = None


class InMemoryBatchStore:
    def __init__(self) -> None:
        self._batches: Dict[str, BatchRecord] = {}
        self._lock = Lock()

    def create(self, batch_id: str, test_ids: List[str]) -> BatchRecord:
        now = datetime.now(timezone.utc)
        record = BatchRecord(
            batch_id=batch_id,
            test_ids=list(test_ids),
            status=BATCH_RUNNING,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            if batch_id in self._batches:
                raise RunStateError(f"Batch already exists: {batch_id}")
            self._batches[batch_id] = record
        return record

    def get(self, batch_id: str) -> Optional[BatchRecord]:
        with self._lock:
            return self._batches.get(batch_id)

    def complete(self, batch_id: str, result: BatchResult) -> BatchRecord:
        return self._finish(batch_id, BATCH_COMPLETED, result=result)

    def fail(self, batch_id: str, error: str) -> BatchRecord:
        return self._finish(batch_id, BATCH_ERROR, error=error)

    def _finish(
        self,
        batch_id: str,
        status: str,
        result: Optional[BatchResult] = None,
        error: Optional[str] = None,
    ) -> BatchRecord:
        with self._lock:
            record = self._batches.get(batch_id)
            if record is None:
                raise RunStateError(f"Batch not found: {batch_id}")
            if record.status != BATCH_RUNNING:
                raise RunStateError(f"Batch already finished: {batch_id}")
            updated = replace(
                record,
                status=status,
                result=result,
                error=error,
                updated_at=datetime.now(timezone.utc),
            )
            self._batches[batch_id] = updated
            return updated
