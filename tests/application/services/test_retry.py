from __future__ import annotations

import asyncio

import pytest

from application.services.retry import RetryController, backoff_delay_ms
from domain.exceptions import AssertionFailedError, RetryableResponseError, TransportError
from tests.fakes import DummyLogger, FakeClock


def _flaky(failures, result="ok", error=TransportError("connection reset")):
    calls = {"n": 0}

    async def work():
        calls["n"] += 1
        if calls["n"] <= failures:
            raise error
        return result

    return work, calls


def test_backoff_delay_doubles_from_second_attempt() -> None:
    assert backoff_delay_ms(1, 1000) == 0
    assert backoff_delay_ms(2, 1000) == 2000
    assert backoff_delay_ms(3, 1000) == 4000
    assert backoff_delay_ms(4, 500) == 4000


def test_success_on_first_attempt_does_not_sleep() -> None:
    clock = FakeClock()
    work, calls = _flaky(failures=0)

    result = asyncio.run(RetryController(clock).run(work))

    assert result == "ok"
    assert calls["n"] == 1
    assert clock.sleeps == []


def test_retries_until_success_with_exponential_delays() -> None:
    clock = FakeClock()
    logger = DummyLogger()
    work, calls = _flaky(failures=2)

    result = asyncio.run(RetryController(clock, attempts=3, base_delay_ms=1000).run(work, logger=logger))

    assert result == "ok"
    assert calls["n"] == 3
    assert clock.sleeps == [2000, 4000]
    assert [e["attempt"] for e in logger.of_type("request.retry")] == [2, 3]


def test_exhausted_budget_raises_last_error_after_exact_attempts() -> None:
    clock = FakeClock()
    work, calls = _flaky(failures=10)

    with pytest.raises(TransportError, match="connection reset"):
        asyncio.run(RetryController(clock, attempts=3, base_delay_ms=100).run(work))

    assert calls["n"] == 3
    assert sum(clock.sleeps) == 200 + 400


def test_per_call_attempts_override() -> None:
    clock = FakeClock()
    work, calls = _flaky(failures=10)

    with pytest.raises(TransportError):
        asyncio.run(RetryController(clock, attempts=3).run(work, attempts=1))

    assert calls["n"] == 1
    assert clock.sleeps == []


def test_retryable_response_errors_are_retried() -> None:
    clock = FakeClock()
    work, calls = _flaky(failures=1, error=RetryableResponseError("HTTP 503"))

    assert asyncio.run(RetryController(clock, base_delay_ms=10).run(work)) == "ok"
    assert calls["n"] == 2


def test_other_errors_propagate_immediately() -> None:
    clock = FakeClock()
    work, calls = _flaky(failures=5, error=AssertionFailedError("nope"))

    with pytest.raises(AssertionFailedError):
        asyncio.run(RetryController(clock, attempts=5).run(work))

    assert calls["n"] == 1
