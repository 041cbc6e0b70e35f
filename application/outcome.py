# application/outcome.py
from __future__ import annotations

import base64
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

if TYPE_CHECKING:
    from domain.load_test import LoadTestResult


class OutcomeStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class StepOutcome:
    name: str
    action: str
    status: OutcomeStatus
    start_time: datetime
    end_time: datetime
    error: Optional[str] = None
    screenshot: Optional[bytes] = None
    fatal: bool = False  # ConfigurationError: stops the test even with continue_on_failure

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.PASSED


@dataclass(frozen=True)
class Screenshot:
    type: str
    data: bytes
    timestamp: datetime


@dataclass(frozen=True)
class TestOutcome:
    __test__ = False

    id: str
    name: str
    status: OutcomeStatus
    start_time: datetime
    end_time: datetime
    flavor: str = ""
    steps: List[StepOutcome] = field(default_factory=list)
    cleanup: List[StepOutcome] = field(default_factory=list)
    error: Optional[str] = None
    screenshots: List[Screenshot] = field(default_factory=list)

    @property
    def duration_ms(self) -> float:
        return (self.end_time - self.start_time).total_seconds() * 1000


@dataclass(frozen=True)
class BatchSummary:
    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    pass_rate: float = 0.0
    duration_ms: float = 0.0

    @classmethod
    def from_outcomes(cls, outcomes: Sequence[TestOutcome], duration_ms: float = 0.0) -> "BatchSummary":
        total = len(outcomes)
        passed = sum(1 for o in outcomes if o.status == OutcomeStatus.PASSED)
        failed = sum(1 for o in outcomes if o.status == OutcomeStatus.FAILED)
        skipped = sum(1 for o in outcomes if o.status == OutcomeStatus.SKIPPED)
        return cls(
            total=total,
            passed=passed,
            failed=failed,
            skipped=skipped,
            pass_rate=round(passed / total * 100, 2) if total else 0.0,
            duration_ms=duration_ms,
        )


@dataclass(frozen=True)
class BatchResult:
    outcomes: List[TestOutcome]
    summary: BatchSummary


def outcome_to_dict(outcome: TestOutcome, include_screenshots: bool = False) -> Dict[str, Any]:
    """JSON-friendly view of a TestOutcome (screenshots as base64 when requested)."""

    def step_dict(s: StepOutcome) -> Dict[str, Any]:
        return {
            "name": s.name,
            "action": s.action,
            "status": s.status.value,
            "start_time": s.start_time.isoformat(),
            "end_time": s.end_time.isoformat(),
            "error": s.error,
            "has_screenshot": s.screenshot is not None,
        }

    payload: Dict[str, Any] = {
        "id": outcome.id,
        "name": outcome.name,
        "flavor": outcome.flavor,
        "status": outcome.status.value,
        "start_time": outcome.start_time.isoformat(),
        "end_time": outcome.end_time.isoformat(),
        "duration_ms": outcome.duration_ms,
        "error": outcome.error,
        "steps": [step_dict(s) for s in outcome.steps],
        "cleanup": [step_dict(s) for s in outcome.cleanup],
        "screenshots": [
            {
                "type": shot.type,
                "timestamp": shot.timestamp.isoformat(),
                **({"data": base64.b64encode(shot.data).decode("ascii")} if include_screenshots else {}),
            }
            for shot in outcome.screenshots
        ],
    }
    return payload


def summary_to_dict(summary: BatchSummary) -> Dict[str, Any]:
    return asdict(summary)


def load_result_to_dict(result: "LoadTestResult", include_requests: bool = False) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "test_name": result.test_name,
        "start_time": result.start_time.isoformat(),
        "end_time": result.end_time.isoformat(),
        "concurrency": result.concurrency,
        "duration_ms": result.duration_ms,
        "ramp_up_ms": result.ramp_up_ms,
        "actual_duration_ms": result.actual_duration_ms,
        "summary": asdict(result.summary),
    }
    if include_requests:
        payload["requests"] = [
            {
                "timestamp": r.timestamp.isoformat(),
                "status": r.status,
                "duration_ms": r.duration_ms,
                "success": r.success,
                "error": r.error,
            }
            for r in result.requests
        ]
    return payload
