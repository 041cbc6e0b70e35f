from __future__ import annotations

from datetime import timedelta

from application.outcome import (
    BatchSummary,
    OutcomeStatus,
    Screenshot,
    StepOutcome,
    TestOutcome,
    outcome_to_dict,
)
from tests.fakes import EPOCH


def _outcome(status, **kwargs):
    return TestOutcome(
        id="t",
        name="T",
        status=status,
        start_time=EPOCH,
        end_time=EPOCH + timedelta(milliseconds=1500),
        **kwargs,
    )


def test_duration_ms() -> None:
    assert _outcome(OutcomeStatus.PASSED).duration_ms == 1500


def test_batch_summary_counts_and_rate() -> None:
    outcomes = [
        _outcome(OutcomeStatus.PASSED),
        _outcome(OutcomeStatus.PASSED),
        _outcome(OutcomeStatus.FAILED),
    ]

    summary = BatchSummary.from_outcomes(outcomes, duration_ms=10)

    assert summary.total == 3
    assert summary.passed == 2
    assert summary.failed == 1
    assert summary.skipped == 0
    assert summary.pass_rate == 66.67
    assert summary.duration_ms == 10


def test_batch_summary_of_nothing() -> None:
    summary = BatchSummary.from_outcomes([])
    assert summary.total == 0
    assert summary.pass_rate == 0.0


def test_outcome_to_dict_hides_screenshot_bytes_by_default() -> None:
    step = StepOutcome(
        name="shot",
        action="screenshot",
        status=OutcomeStatus.PASSED,
        start_time=EPOCH,
        end_time=EPOCH,
        screenshot=b"png",
    )
    outcome = _outcome(
        OutcomeStatus.FAILED,
        steps=[step],
        error="boom",
        screenshots=[Screenshot(type="failure", data=b"png", timestamp=EPOCH)],
    )

    payload = outcome_to_dict(outcome)
    with_data = outcome_to_dict(outcome, include_screenshots=True)

    assert payload["status"] == "failed"
    assert payload["error"] == "boom"
    assert payload["steps"][0]["has_screenshot"] is True
    assert "data" not in payload["screenshots"][0]
    assert with_data["screenshots"][0]["data"] == "cG5n"
