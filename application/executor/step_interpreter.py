# application/executor/step_interpreter.py
from __future__ import annotations

from datetime import datetime

from application.executor.handler_registry import HandlerRegistry
from application.outcome import OutcomeStatus, StepOutcome
from application.services.execution_deps import ExecutionDeps
from domain.exceptions import ConfigurationError
from domain.run import RunContext
from domain.steps.base import Step


def _action_label(step: Step) -> str:
    action = getattr(step, "action", None)
    return action.value if action is not None else type(step).__name__


def interrupted_outcome(step: Step, start: datetime, end: datetime, error: str) -> StepOutcome:
    """Failed outcome for a step whose execution was cut off from outside."""
    return StepOutcome(
        name=step.name,
        action=_action_label(step),
        status=OutcomeStatus.FAILED,
        start_time=start,
        end_time=end if end >= start else start,
        error=error,
    )


class StepInterpreter:
    """
    Executes exactly one step and returns its StepOutcome. Every exception
    raised by a handler is converted to a failed outcome here; nothing but
    cancellation escapes.
    """

    def __init__(self, registry: HandlerRegistry):
        self._registry = registry

    async def execute(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        action = _action_label(step)
        start = deps.clock.now()
        t0 = deps.clock.monotonic_ms()
        deps.logger.info("step.start", step=step.name, action=action)

        error = None
        fatal = False
        screenshot = None
        try:
            handler = self._registry.get_handler(step)
            result = await handler.handle(step, ctx, deps)
            screenshot = result.screenshot
            # a failed step never populates its save_as slot
            if step.save_as:
                ctx.variables.set(step.save_as, result.value)
        except ConfigurationError as exc:
            error, fatal = str(exc), True
        except Exception as exc:
            error = str(exc) or type(exc).__name__

        end = self._not_before(deps.clock.now(), start)
        status = OutcomeStatus.FAILED if error is not None else OutcomeStatus.PASSED
        elapsed_ms = int(deps.clock.monotonic_ms() - t0)

        if error is None:
            deps.logger.info("step.end", step=step.name, action=action, ok=True, elapsed_ms=elapsed_ms)
        else:
            deps.logger.error("step.end", step=step.name, action=action, ok=False, elapsed_ms=elapsed_ms, error=error, fatal=fatal)

        return StepOutcome(
            name=step.name,
            action=action,
            status=status,
            start_time=start,
            end_time=end,
            error=error,
            screenshot=screenshot,
            fatal=fatal,
        )

    @staticmethod
    def _not_before(end: datetime, start: datetime) -> datetime:
        return end if end >= start else start
