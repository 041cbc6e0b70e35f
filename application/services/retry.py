# application/services/retry.py
from __future__ import annotations

from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from application.ports.clock import ClockPort
from application.ports.logger import LoggerPort
from domain.exceptions import RetryableResponseError, TransportError

T = TypeVar("T")

RETRYABLE_ERRORS: Tuple[Type[BaseException], ...] = (TransportError, RetryableResponseError)


def backoff_delay_ms(attempt: int, base_delay_ms: float) -> float:
    """
    Delay slept before `attempt` (1-indexed). The first attempt runs
    immediately; attempt k waits 2^(k-1) * base.
    """
    if attempt <= 1:
        return 0.0
    return (2 ** (attempt - 1)) * base_delay_ms


class RetryController:
    """
    Bounded exponential backoff without jitter. Only the errors listed in
    `retry_on` are retried; anything else propagates on the first raise.
    After the last attempt the final error propagates unchanged.
    """

    def __init__(
        self,
        clock: ClockPort,
        attempts: int = 3,
        base_delay_ms: float = 1000,
        retry_on: Tuple[Type[BaseException], ...] = RETRYABLE_ERRORS,
    ):
        self._clock = clock
        self._attempts = attempts
        self._base_delay_ms = base_delay_ms
        self._retry_on = retry_on

    async def run(
        self,
        work: Callable[[], Awaitable[T]],
        attempts: Optional[int] = None,
        logger: Optional[LoggerPort] = None,
    ) -> T:
        budget = max(1, attempts if attempts is not None else self._attempts)

        attempt = 1
        while True:
            try:
                return await work()
            except self._retry_on as exc:
                if attempt >= budget:
                    raise
                attempt += 1
                delay = backoff_delay_ms(attempt, self._base_delay_ms)
                if logger is not None:
                    logger.warning(
                        "request.retry",
                        attempt=attempt,
                        max_attempts=budget,
                        delay_ms=delay,
                        error=str(exc),
                    )
            await self._clock.sleep(delay)
