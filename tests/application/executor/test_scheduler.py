from __future__ import annotations

import asyncio

import pytest

from application.config import EngineConfig
from application.executor.scheduler import ExecutionMatrixScheduler
from application.outcome import OutcomeStatus
from domain.definition import TestDefinition
from domain.exceptions import ConfigurationError, TransportError
from domain.load_test import LoadTestOptions
from domain.steps import ClickStep, CustomStep, HttpRequestSpec, NavigateStep, RequestStep, WaitStep
from infrastructure.context.bare_context import BareContextProvider
from infrastructure.run.in_memory_run_registry import InMemoryRunRegistry
from tests.fakes import (
    FakeProvider,
    RecordingSink,
    ScriptedHttpClient,
    build_request_handler,
    build_runner,
    make_deps,
    response,
)


def _scheduler(deps=None, http=None, sink=None):
    deps = deps or make_deps()
    registry = InMemoryRunRegistry()
    sink = sink or RecordingSink()
    handler = build_request_handler(http, deps) if http is not None else None
    runner = build_runner(deps, http=http, sink=sink, registry=registry)
    return ExecutionMatrixScheduler(runner, deps, registry, sink, handler), sink


def _page_test(test_id, *steps):
    return TestDefinition(id=test_id, name=test_id, steps=steps or (ClickStep("click", selector="a"),))


def _api_test(test_id="api"):
    return TestDefinition(
        id=test_id,
        name=test_id,
        steps=(RequestStep("ping", request=HttpRequestSpec(url="https://api.test/ping")),),
    )


def test_every_test_runs_in_every_flavor() -> None:
    scheduler, _ = _scheduler()
    providers = {"chromium": FakeProvider(), "firefox": FakeProvider()}

    result = asyncio.run(scheduler.run_batch([_page_test("a"), _page_test("b")], providers))

    pairs = sorted((o.id, o.flavor) for o in result.outcomes)
    assert pairs == [("a", "chromium"), ("a", "firefox"), ("b", "chromium"), ("b", "firefox")]
    assert result.summary.total == 4
    assert result.summary.pass_rate == 100.0
    assert len(providers["chromium"].pages) == 2


def test_same_test_runs_in_concurrent_batches() -> None:
    async def pause(ctx, params):
        await asyncio.sleep(0.01)

    scheduler, _ = _scheduler()
    test = TestDefinition(id="dup", name="dup", steps=(CustomStep("pause", handler=pause),))

    async def both():
        return await asyncio.gather(
            scheduler.run_batch([test], {"chromium": FakeProvider()}),
            scheduler.run_batch([test, test], {"chromium": FakeProvider()}),
        )

    first, second = asyncio.run(both())

    assert [o.status for o in first.outcomes + second.outcomes] == [OutcomeStatus.PASSED] * 3
    assert [o.error for o in first.outcomes + second.outcomes] == [None] * 3
    run_ids = [r.run_id for r in scheduler.registry.list()]
    assert len(set(run_ids)) == 3
    assert all(run_id.startswith("dup@chromium#") for run_id in run_ids)


def test_failing_context_only_affects_its_own_pairings() -> None:
    scheduler, sink = _scheduler()
    providers = {"chromium": FakeProvider(), "webkit": FakeProvider(error="webkit did not start")}

    result = asyncio.run(scheduler.run_batch([_page_test("a")], providers))

    by_flavor = {o.flavor: o for o in result.outcomes}
    assert by_flavor["chromium"].status == OutcomeStatus.PASSED
    assert by_flavor["webkit"].status == OutcomeStatus.FAILED
    assert by_flavor["webkit"].error == "webkit did not start"
    assert result.summary.failed == 1
    assert sum(1 for name in sink.names() if name == "completed") == 2


def test_failing_test_does_not_affect_siblings() -> None:
    scheduler, _ = _scheduler()

    def boom(ctx, params):
        raise RuntimeError("nope")

    tests = [_page_test("bad", CustomStep("x", handler=boom), NavigateStep("n", url="https://x.test")), _page_test("good")]
    result = asyncio.run(scheduler.run_batch(tests, {"chromium": FakeProvider()}))

    statuses = {o.id: o.status for o in result.outcomes}
    assert statuses == {"bad": OutcomeStatus.FAILED, "good": OutcomeStatus.PASSED}


def test_api_only_tests_run_once_without_a_browser() -> None:
    http = ScriptedHttpClient([response(200)])
    scheduler, _ = _scheduler(http=http)
    chromium = FakeProvider()

    result = asyncio.run(
        scheduler.run_batch(
            [_api_test(), _page_test("ui")],
            {"chromium": chromium},
            api_provider=BareContextProvider(),
        )
    )

    pairs = sorted((o.id, o.flavor) for o in result.outcomes)
    assert pairs == [("api", "api"), ("ui", "chromium")]
    assert len(chromium.pages) == 1
    assert len(http.calls) == 1


def test_duration_wait_does_not_need_a_page() -> None:
    scheduler, _ = _scheduler()
    test = TestDefinition(id="w", name="w", steps=(WaitStep("pause", duration_ms=10),))

    result = asyncio.run(scheduler.run_batch([test], {"chromium": FakeProvider()}, api_provider=BareContextProvider()))

    assert [(o.flavor, o.status) for o in result.outcomes] == [("api", OutcomeStatus.PASSED)]


def test_batch_completion_is_reported_to_the_sink() -> None:
    scheduler, sink = _scheduler()

    asyncio.run(scheduler.run_batch([_page_test("a")], {"chromium": FakeProvider()}))

    assert sink.names()[-1] == "batch"
    _, outcomes, summary = sink.events[-1]
    assert len(outcomes) == 1
    assert summary.passed == 1


def test_stop_is_filed_with_the_registry() -> None:
    scheduler, _ = _scheduler()

    scheduler.stop("a")

    assert scheduler.registry.is_stop_requested("a")


def test_load_test_collects_every_request() -> None:
    http = ScriptedHttpClient([response(200, duration_ms=20)])
    scheduler, sink = _scheduler(http=http)

    result = asyncio.run(
        scheduler.run_load_test(_api_test(), LoadTestOptions(concurrency=3, duration_ms=1000, ramp_up_ms=300))
    )

    summary = result.summary
    assert summary.total_requests == len(result.requests) == len(http.calls)
    assert summary.total_requests > 0
    assert summary.failed_requests == 0
    assert summary.average_response_time_ms == 20
    assert result.concurrency == 3
    assert result.actual_duration_ms >= 1000
    assert sink.names() == ["load"]


def test_load_test_records_failures() -> None:
    deps = make_deps(config=EngineConfig(retries=1, retry_base_delay_ms=100))
    http = ScriptedHttpClient([response(200), response(500), TransportError("refused")])
    scheduler, _ = _scheduler(deps=deps, http=http)

    result = asyncio.run(
        scheduler.run_load_test(_api_test(), LoadTestOptions(concurrency=1, duration_ms=500, ramp_up_ms=0))
    )

    statuses = [r.status for r in result.requests]
    assert statuses[:3] == [200, 500, 0]
    assert [r.success for r in result.requests[:3]] == [True, False, False]
    assert result.requests[2].error == "refused"
    assert result.summary.failed_requests == result.summary.total_requests - 1


def test_load_test_needs_a_request_step() -> None:
    scheduler, _ = _scheduler(http=ScriptedHttpClient([response(200)]))

    with pytest.raises(ConfigurationError, match="has no request step"):
        asyncio.run(scheduler.run_load_test(_page_test("ui")))
