# application/handlers/hook_handler.py
from __future__ import annotations

import inspect

from application.handlers.base import StepHandler, StepResult
from application.services.execution_deps import ExecutionDeps
from domain.run import RunContext
from domain.steps.hooks import HookStep


class HookStepHandler(StepHandler):
    """
    custom / setup / cleanup: calls handler(ctx, params). Sync and async
    handlers are both accepted; raising marks the step failed.
    """

    def supports(self, step) -> bool:
        return isinstance(step, HookStep)

    async def handle(self, step: HookStep, ctx: RunContext, deps: ExecutionDeps) -> StepResult:
        deps.logger.debug("hook.invoke", action=step.action.value, handler=step.handler_name)
        result = step.handler(ctx, dict(step.params))
        if inspect.isawaitable(result):
            result = await result
        return StepResult(value=result)
