# infrastructure/bootstrap.py
"""
Wires the engine together for the CLI and the HTTP API.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from application.config import EngineConfig
from application.executor.handler_registry import HandlerRegistry
from application.executor.scheduler import ExecutionMatrixScheduler
from application.executor.step_interpreter import StepInterpreter
from application.executor.test_runner import TestRunner
from application.handlers.assert_handler import AssertionStepHandler, AssertStepHandler
from application.handlers.hook_handler import HookStepHandler
from application.handlers.page_handler import PageActionHandler, WaitStepHandler
from application.handlers.request_handler import RequestStepHandler
from application.outcome import BatchResult
from application.ports.clock import ClockPort
from application.ports.execution_context import ContextProviderPort
from application.ports.http_client import HttpClientPort
from application.ports.logger import LoggerPort
from application.ports.result_sink import ResultSink
from application.ports.run_registry import RunRegistryPort
from application.services.assertion_evaluator import AssertionEvaluator
from application.services.execution_deps import ExecutionDeps
from application.services.interpolator import Interpolator
from application.services.retry import RetryController
from domain.definition import TestDefinition
from domain.exceptions import ContextAcquisitionError
from domain.load_test import LoadTestOptions, LoadTestResult
from infrastructure.browser.playwright_provider import PlaywrightBrowserPool
from infrastructure.clock.system_clock import SystemClock
from infrastructure.context.bare_context import BareContextProvider, UnavailableContextProvider
from infrastructure.http.requests_http_client import RequestsHttpClient
from infrastructure.logging.loguru_logger import LoguruLogger
from infrastructure.run.in_memory_run_registry import InMemoryRunRegistry
from infrastructure.schema.jsonschema_validator import JsonSchemaValidator


@dataclass
class Engine:
    config: EngineConfig
    deps: ExecutionDeps
    scheduler: ExecutionMatrixScheduler
    registry: RunRegistryPort
    http_client: HttpClientPort

    async def run_tests(
        self,
        tests: Sequence[TestDefinition],
        variables: Optional[Dict[str, Any]] = None,
    ) -> BatchResult:
        """
        Run a batch. Browsers are launched only when some test drives a page,
        and closed again once the batch is done.
        """
        pool: Optional[PlaywrightBrowserPool] = None
        providers: Dict[str, ContextProviderPort] = {}
        if any(test.needs_page() for test in tests):
            pool = PlaywrightBrowserPool(self.deps.logger, headless=self.config.headless)
            try:
                providers = await pool.start(self.config.browsers)
            except ContextAcquisitionError as exc:
                pool = None
                providers = {name: UnavailableContextProvider(str(exc)) for name in self.config.browsers}

        try:
            return await self.scheduler.run_batch(
                tests,
                providers,
                variables,
                api_provider=BareContextProvider(),
            )
        finally:
            if pool is not None:
                await pool.close()

    async def run_load_test(self, test: TestDefinition, options: Optional[LoadTestOptions] = None) -> LoadTestResult:
        return await self.scheduler.run_load_test(test, options)

    def stop(self, test_id: str) -> None:
        self.scheduler.stop(test_id)

    def close(self) -> None:
        self.http_client.close()


def build_engine(
    config: Optional[EngineConfig] = None,
    logger: Optional[LoggerPort] = None,
    sink: Optional[ResultSink] = None,
    http_client: Optional[HttpClientPort] = None,
    registry: Optional[RunRegistryPort] = None,
    clock: Optional[ClockPort] = None,
) -> Engine:
    config = config or EngineConfig()
    clock = clock or SystemClock()
    deps = ExecutionDeps(config=config, clock=clock, logger=logger or LoguruLogger())
    registry = registry or InMemoryRunRegistry()
    http_client = http_client or RequestsHttpClient(timeout_ms=config.http_timeout_ms)

    interpolator = Interpolator()
    schema_validator = JsonSchemaValidator()
    evaluator = AssertionEvaluator(schema_validator)
    retry = RetryController(clock, attempts=config.retries, base_delay_ms=config.retry_base_delay_ms)
    request_handler = RequestStepHandler(http_client, retry, schema_validator, interpolator)

    handlers = HandlerRegistry([
        PageActionHandler(interpolator),
        WaitStepHandler(),
        AssertStepHandler(evaluator),
        request_handler,
        AssertionStepHandler(evaluator),
        HookStepHandler(),
    ])
    runner = TestRunner(StepInterpreter(handlers), registry, sink)
    scheduler = ExecutionMatrixScheduler(runner, deps, registry, sink, request_handler)
    return Engine(config=config, deps=deps, scheduler=scheduler, registry=registry, http_client=http_client)
