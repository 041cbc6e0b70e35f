# infrastructure/run/in_memory_result_sink.py
from __future__ import annotations

from threading import Lock
from typing import Any, Dict, List, Optional

from application.outcome import BatchSummary, OutcomeStatus, TestOutcome
from application.ports.result_sink import ResultSink
from domain.load_test import LoadTestResult
from domain.run_record import pairing_run_id


class InMemoryResultSink(ResultSink):
    """Keeps every event it is told about; backs the results endpoints."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._outcomes: List[TestOutcome] = []
        self._progress: Dict[str, Dict[str, Any]] = {}
        self._load_results: List[LoadTestResult] = []
        self.batches: List[BatchSummary] = []

    def on_test_started(self, metadata: Dict[str, Any]) -> None:
        with self._lock:
            self._progress[pairing_run_id(metadata["id"], metadata.get("flavor", ""))] = {"completed": 0}

    def on_test_progress(self, test_id: str, progress: Dict[str, Any]) -> None:
        with self._lock:
            self._progress[pairing_run_id(test_id, progress.get("flavor", ""))] = dict(progress)

    def on_test_completed(self, outcome: TestOutcome) -> None:
        with self._lock:
            self._outcomes.append(outcome)
            self._progress.pop(pairing_run_id(outcome.id, outcome.flavor), None)

    def on_batch_completed(self, outcomes: List[TestOutcome], summary: BatchSummary) -> None:
        with self._lock:
            self.batches.append(summary)

    def on_load_test_completed(self, result: LoadTestResult) -> None:
        with self._lock:
            self._load_results.append(result)

    def outcomes(
        self,
        status: Optional[OutcomeStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[TestOutcome]:
        """Newest first."""
        with self._lock:
            items = list(reversed(self._outcomes))
        if status is not None:
            items = [o for o in items if o.status == status]
        return items[offset:offset + limit]

    def in_progress(self) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            return {k: dict(v) for k, v in self._progress.items()}

    def load_results(self) -> List[LoadTestResult]:
        with self._lock:
            return list(self._load_results)

    def count(self, status: Optional[OutcomeStatus] = None) -> int:
        with self._lock:
            return sum(1 for o in self._outcomes if status is None or o.status == status)
