# application/handlers/assert_handler.py
from __future__ import annotations

from application.handlers.base import StepHandler, StepResult, require_context
from application.services.assertion_evaluator import AssertionEvaluator
from application.services.execution_deps import ExecutionDeps
from domain.exceptions import AssertionFailedError, StepExecutionError
from domain.run import RunContext
from domain.steps.assertion import AssertionStep
from domain.steps.browser import AssertStep


class AssertStepHandler(StepHandler):
    """`assert` steps: checks live page state (text, visibility, URL, element count)."""

    def __init__(self, evaluator: AssertionEvaluator):
        self._evaluator = evaluator

    def supports(self, step) -> bool:
        return isinstance(step, AssertStep)

    async def handle(self, step: AssertStep, ctx: RunContext, deps: ExecutionDeps) -> StepResult:
        page = require_context(ctx, step)
        result = await self._evaluator.evaluate_page(step.assertion, page, deps.config.selector_timeout_ms)
        if not result.passed:
            raise AssertionFailedError(result.message or "assertion failed")
        return StepResult(value=True)


class AssertionStepHandler(StepHandler):
    """
    `assertion` steps: checks a value captured earlier. The subject is the
    slot named by assertion.target, falling back to the last response.
    """

    def __init__(self, evaluator: AssertionEvaluator):
        self._evaluator = evaluator

    def supports(self, step) -> bool:
        return isinstance(step, AssertionStep)

    async def handle(self, step: AssertionStep, ctx: RunContext, deps: ExecutionDeps) -> StepResult:
        spec = step.assertion
        subject = None
        if spec.target and spec.target in ctx.variables:
            subject = ctx.variables.get(spec.target)
        if subject is None:
            subject = ctx.last_response
        if subject is None:
            raise StepExecutionError(f"No response found for assertion target: {spec.target or 'last response'}")

        result = await self._evaluator.evaluate(spec, subject, ctx)
        if not result.passed:
            raise AssertionFailedError(result.message or "assertion failed")
        return StepResult(value=True)
