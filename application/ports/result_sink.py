# application/ports/result_sink.py
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

if TYPE_CHECKING:
    from application.outcome import BatchSummary, TestOutcome
    from domain.load_test import LoadTestResult


class ResultSink:
    """
    Observer for execution events. All calls are fire-and-forget; the engine
    never waits for acknowledgment. The base class ignores everything.
    """

    def on_test_started(self, metadata: Dict[str, Any]) -> None:
        return None

    def on_test_progress(self, test_id: str, progress: Dict[str, Any]) -> None:
        return None

    def on_test_completed(self, outcome: "TestOutcome") -> None:
        return None

    def on_batch_completed(self, outcomes: List["TestOutcome"], summary: "BatchSummary") -> None:
        return None

    def on_load_test_completed(self, result: "LoadTestResult") -> None:
        return None
