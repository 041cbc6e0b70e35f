from __future__ import annotations

from datetime import datetime, timezone

import pytest

from domain.exceptions import ConfigurationError
from domain.load_test import (
    LoadTestOptions,
    LoadTestSummary,
    RequestRecord,
    is_success_status,
    ramp_up_offsets,
)

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _record(status, duration):
    return RequestRecord(timestamp=NOW, status=status, duration_ms=duration, success=is_success_status(status))


def test_ramp_up_offsets_are_evenly_spaced() -> None:
    assert ramp_up_offsets(5, 5000) == [0, 1000, 2000, 3000, 4000]


def test_ramp_up_zero_starts_everyone_at_once() -> None:
    assert ramp_up_offsets(3, 0) == [0, 0, 0]


@pytest.mark.parametrize("status, ok", [(199, False), (200, True), (302, True), (399, True), (400, False), (0, False)])
def test_success_status_range(status, ok) -> None:
    assert is_success_status(status) is ok


def test_summary_of_empty_log_is_all_zero() -> None:
    summary = LoadTestSummary.from_records([], actual_duration_ms=1000)
    assert summary == LoadTestSummary()
    assert summary.requests_per_second == 0.0


def test_summary_aggregates() -> None:
    records = [_record(200, 10), _record(500, 30), _record(201, 20), _record(0, 0)]

    summary = LoadTestSummary.from_records(records, actual_duration_ms=2000)

    assert summary.total_requests == 4
    assert summary.successful_requests == 2
    assert summary.failed_requests == 2
    assert summary.average_response_time_ms == 15
    assert summary.min_response_time_ms == 0
    assert summary.max_response_time_ms == 30
    assert summary.requests_per_second == 2.0


def test_options_are_validated() -> None:
    with pytest.raises(ConfigurationError):
        LoadTestOptions(concurrency=0)
    with pytest.raises(ConfigurationError):
        LoadTestOptions(duration_ms=-1)
