from __future__ import annotations

import asyncio

from application.outcome import OutcomeStatus
from domain.run import RunContext
from domain.steps import ClickStep, CustomStep, HttpRequestSpec, RequestStep, ScreenshotStep
from tests.fakes import DummyLogger, FakePage, build_interpreter, make_deps


def _execute(step, ctx=None, deps=None, http=None):
    deps = deps or make_deps()
    ctx = ctx or RunContext(test_id="t", context=FakePage())
    return asyncio.run(build_interpreter(http, deps).execute(step, ctx, deps)), ctx


def test_passing_step_saves_its_value() -> None:
    step = CustomStep("compute", handler=lambda ctx, params: 42, save_as="answer")

    outcome, ctx = _execute(step)

    assert outcome.status == OutcomeStatus.PASSED
    assert outcome.action == "custom"
    assert outcome.error is None
    assert ctx.variables.get("answer") == 42
    assert outcome.end_time >= outcome.start_time


def test_failing_step_saves_nothing() -> None:
    def boom(ctx, params):
        raise RuntimeError("exploded")

    outcome, ctx = _execute(CustomStep("compute", handler=boom, save_as="answer"))

    assert outcome.status == OutcomeStatus.FAILED
    assert outcome.error == "exploded"
    assert not outcome.fatal
    assert "answer" not in ctx.variables


def test_error_without_message_uses_exception_name() -> None:
    def boom(ctx, params):
        raise KeyError()

    outcome, _ = _execute(CustomStep("k", handler=boom))

    assert outcome.error == "KeyError"


def test_page_step_in_bare_context_is_fatal() -> None:
    outcome, _ = _execute(ClickStep("click", selector="a"), ctx=RunContext(test_id="t", context=None))

    assert outcome.status == OutcomeStatus.FAILED
    assert outcome.fatal
    assert outcome.error == "action 'click' requires an execution context"


def test_unregistered_action_is_fatal() -> None:
    step = RequestStep("call", request=HttpRequestSpec(url="https://x.test"))

    outcome, _ = _execute(step, http=None)

    assert outcome.fatal
    assert outcome.error == "unknown action: request (call)"


def test_screenshot_bytes_are_attached() -> None:
    outcome, _ = _execute(ScreenshotStep("shot"))

    assert outcome.screenshot == b"png-bytes"


def test_logs_start_and_end_events() -> None:
    logger = DummyLogger()

    _execute(CustomStep("noop", handler=lambda c, p: None), deps=make_deps(logger=logger))

    assert [e["type"] for e in logger.events] == ["step.start", "hook.invoke", "step.end"]
    assert logger.of_type("step.end")[0]["ok"] is True
