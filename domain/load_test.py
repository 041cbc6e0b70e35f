# domain/load_test.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

from domain.exceptions import ConfigurationError


@dataclass(frozen=True)
class LoadTestOptions:
    concurrency: int = 10
    duration_ms: int = 60000
    ramp_up_ms: int = 5000

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ConfigurationError("load test concurrency must be at least 1")
        if self.duration_ms < 0 or self.ramp_up_ms < 0:
            raise ConfigurationError("load test durations must not be negative")


@dataclass(frozen=True)
class RequestRecord:
    timestamp: datetime
    status: int
    duration_ms: float
    success: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class LoadTestSummary:
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    average_response_time_ms: float = 0.0
    min_response_time_ms: float = 0.0
    max_response_time_ms: float = 0.0
    requests_per_second: float = 0.0

    @classmethod
    def from_records(cls, records: Sequence[RequestRecord], actual_duration_ms: float) -> "LoadTestSummary":
        if not records:
            return cls()

        durations = [r.duration_ms for r in records]
        successful = sum(1 for r in records if r.success)
        seconds = actual_duration_ms / 1000.0
        return cls(
            total_requests=len(records),
            successful_requests=successful,
            failed_requests=len(records) - successful,
            average_response_time_ms=sum(durations) / len(durations),
            min_response_time_ms=min(durations),
            max_response_time_ms=max(durations),
            requests_per_second=(len(records) / seconds) if seconds > 0 else 0.0,
        )


@dataclass(frozen=True)
class LoadTestResult:
    test_name: str
    start_time: datetime
    end_time: datetime
    concurrency: int
    duration_ms: int
    ramp_up_ms: int
    actual_duration_ms: float
    requests: List[RequestRecord] = field(default_factory=list)
    summary: LoadTestSummary = field(default_factory=LoadTestSummary)


def ramp_up_offsets(concurrency: int, ramp_up_ms: float) -> List[float]:
    """Start offset of each worker, spaced evenly so load grows linearly."""
    return [i * ramp_up_ms / concurrency for i in range(concurrency)]


def is_success_status(status: int) -> bool:
    return 200 <= status < 400
