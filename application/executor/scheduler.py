# application/executor/scheduler.py
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from application.executor.test_runner import TestRunner, notify
from application.handlers.request_handler import RequestStepHandler
from application.outcome import BatchResult, BatchSummary, OutcomeStatus, TestOutcome
from application.ports.execution_context import ContextProviderPort
from application.ports.result_sink import ResultSink
from application.ports.run_registry import RunRegistryPort
from application.services.execution_deps import ExecutionDeps
from application.services.request_log import RequestLog
from domain.definition import TestDefinition
from domain.exceptions import ConfigurationError, RetryableResponseError
from domain.load_test import (
    LoadTestOptions,
    LoadTestResult,
    LoadTestSummary,
    RequestRecord,
    is_success_status,
    ramp_up_offsets,
)
from domain.run_record import API_FLAVOR
from domain.steps.http import RequestStep
from domain.variables import VariableStore


class ExecutionMatrixScheduler:
    """
    Fans test batches out over execution-context flavors and runs load tests.

    Every (flavor x test) pairing runs concurrently and independently: a
    failing pairing, including one whose context could not be acquired,
    only affects its own outcome.
    """

    def __init__(
        self,
        runner: TestRunner,
        deps: ExecutionDeps,
        registry: RunRegistryPort,
        sink: Optional[ResultSink] = None,
        request_handler: Optional[RequestStepHandler] = None,
    ):
        self._runner = runner
        self._deps = deps
        self._registry = registry
        self._sink = sink or ResultSink()
        self._request_handler = request_handler

    @property
    def registry(self) -> RunRegistryPort:
        return self._registry

    def stop(self, test_id: str) -> None:
        self._registry.request_stop(test_id)
        self._deps.logger.info("test.stop_requested", test_id=test_id)

    async def run_batch(
        self,
        tests: Sequence[TestDefinition],
        providers: Mapping[str, ContextProviderPort],
        variables: Optional[Dict[str, Any]] = None,
        api_provider: Optional[ContextProviderPort] = None,
    ) -> BatchResult:
        """
        Run every test in every flavor of `providers`. When `api_provider` is
        given, tests that never touch a page run once under the `api` flavor
        instead, and page tests fall back to it when no browser is available.
        """
        clock = self._deps.clock
        t0 = clock.monotonic_ms()
        self._deps.logger.info("batch.start", tests=len(tests), flavors=list(providers))

        pairings = [
            self._run_pairing(test, provider, flavor, variables)
            for test in tests
            for flavor, provider in self._targets(test, providers, api_provider)
        ]
        outcomes: List[TestOutcome] = list(await asyncio.gather(*pairings))

        summary = BatchSummary.from_outcomes(outcomes, duration_ms=clock.monotonic_ms() - t0)
        self._deps.logger.info(
            "batch.end",
            total=summary.total,
            passed=summary.passed,
            failed=summary.failed,
            pass_rate=summary.pass_rate,
            duration_ms=int(summary.duration_ms),
        )
        notify(self._sink.on_batch_completed, self._deps, outcomes, summary)
        return BatchResult(outcomes=outcomes, summary=summary)

    @staticmethod
    def _targets(
        test: TestDefinition,
        providers: Mapping[str, ContextProviderPort],
        api_provider: Optional[ContextProviderPort],
    ) -> List[Tuple[str, ContextProviderPort]]:
        if api_provider is None:
            return list(providers.items())
        if test.needs_page() and providers:
            return list(providers.items())
        return [(API_FLAVOR, api_provider)]

    async def _run_pairing(
        self,
        test: TestDefinition,
        provider: ContextProviderPort,
        flavor: str,
        variables: Optional[Dict[str, Any]],
    ) -> TestOutcome:
        start = self._deps.clock.now()
        try:
            return await self._runner.run(test, provider, flavor, self._deps, variables)
        except Exception as exc:
            # ContextAcquisitionError, or anything else that escaped the runner
            message = str(exc) or type(exc).__name__
            self._deps.logger.error("batch.pairing_failed", test_id=test.id, flavor=flavor, error=message)
            end = self._deps.clock.now()
            outcome = TestOutcome(
                id=test.id,
                name=test.name,
                status=OutcomeStatus.FAILED,
                start_time=start,
                end_time=end if end >= start else start,
                flavor=flavor,
                error=message,
            )
            notify(self._sink.on_test_completed, self._deps, outcome)
            return outcome

    async def run_load_test(self, test: TestDefinition, options: Optional[LoadTestOptions] = None) -> LoadTestResult:
        options = options or LoadTestOptions()
        if self._request_handler is None:
            raise ConfigurationError("load testing requires a request handler")
        step = next((s for s in test.steps if isinstance(s, RequestStep)), None)
        if step is None:
            raise ConfigurationError(f"load test '{test.id}' has no request step")

        clock = self._deps.clock
        logger = self._deps.logger.bind(test_id=test.id, mode="load")
        log = RequestLog()
        start = clock.now()
        t0 = clock.monotonic_ms()
        deadline = t0 + options.duration_ms

        logger.info(
            "load_test.start",
            name=test.name,
            concurrency=options.concurrency,
            duration_ms=options.duration_ms,
            ramp_up_ms=options.ramp_up_ms,
        )

        offsets = ramp_up_offsets(options.concurrency, options.ramp_up_ms)
        deps = self._deps.with_logger(logger)
        await asyncio.gather(*(self._load_worker(step, offset, deadline, log, deps) for offset in offsets))

        actual_ms = clock.monotonic_ms() - t0
        records = log.list()
        summary = LoadTestSummary.from_records(records, actual_ms)
        result = LoadTestResult(
            test_name=test.name,
            start_time=start,
            end_time=clock.now(),
            concurrency=options.concurrency,
            duration_ms=options.duration_ms,
            ramp_up_ms=options.ramp_up_ms,
            actual_duration_ms=actual_ms,
            requests=records,
            summary=summary,
        )

        logger.info(
            "load_test.end",
            total=summary.total_requests,
            failed=summary.failed_requests,
            rps=round(summary.requests_per_second, 2),
        )
        notify(self._sink.on_load_test_completed, self._deps, result)
        return result

    async def _load_worker(
        self,
        step: RequestStep,
        offset_ms: float,
        deadline_ms: float,
        log: RequestLog,
        deps: ExecutionDeps,
    ) -> None:
        clock = self._deps.clock
        if offset_ms > 0:
            await clock.sleep(offset_ms)

        while clock.monotonic_ms() < deadline_ms:
            timestamp = clock.now()
            try:
                response = await self._request_handler.send(step, VariableStore(), deps)
                log.append(RequestRecord(
                    timestamp=timestamp,
                    status=response.status,
                    duration_ms=response.duration_ms,
                    success=is_success_status(response.status),
                ))
            except RetryableResponseError as exc:
                status = getattr(exc.response, "status", 0)
                duration = getattr(exc.response, "duration_ms", 0.0)
                log.append(RequestRecord(timestamp=timestamp, status=status, duration_ms=duration, success=False, error=str(exc)))
            except Exception as exc:
                log.append(RequestRecord(timestamp=timestamp, status=0, duration_ms=0.0, success=False, error=str(exc)))

            await clock.sleep(self._deps.config.load_test_request_delay_ms)
