from __future__ import annotations

import pytest

from application.outcome import BatchResult, BatchSummary
from domain.exceptions import RunStateError
from infrastructure.run.in_memory_batch_scheduler import InMemoryBatchScheduler
from infrastructure.run.in_memory_batch_store import (
    BATCH_COMPLETED,
    BATCH_ERROR,
    BATCH_RUNNING,
    InMemoryBatchStore,
)


def test_batch_completes_once() -> None:
    store = InMemoryBatchStore()
    record = store.create("b1", ["a", "b"])
    assert record.status == BATCH_RUNNING

    result = BatchResult(outcomes=[], summary=BatchSummary())
    done = store.complete("b1", result)

    assert done.status == BATCH_COMPLETED
    assert store.get("b1").result is result
    with pytest.raises(RunStateError, match="already finished"):
        store.fail("b1", "late")


def test_failed_batch_keeps_error() -> None:
    store = InMemoryBatchStore()
    store.create("b1", ["a"])

    assert store.fail("b1", "loader exploded").status == BATCH_ERROR
    assert store.get("b1").error == "loader exploded"


def test_duplicate_and_unknown_batches() -> None:
    store = InMemoryBatchStore()
    store.create("b1", [])

    with pytest.raises(RunStateError):
        store.create("b1", [])
    with pytest.raises(RunStateError, match="Batch not found"):
        store.complete("missing", BatchResult(outcomes=[], summary=BatchSummary()))


def test_scheduler_runs_task_and_waits() -> None:
    scheduler = InMemoryBatchScheduler(max_workers=1)
    seen = []

    scheduler.submit("b1", lambda: seen.append("ran"))

    assert scheduler.wait("b1", timeout_sec=5) is True
    assert seen == ["ran"]
    assert scheduler.wait("unknown", timeout_sec=0) is False
    scheduler.shutdown()
