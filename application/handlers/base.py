# application/handlers/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from domain.exceptions import ConfigurationError
from domain.steps.base import Step

if TYPE_CHECKING:
    from application.ports.execution_context import ExecutionContextPort
    from application.services.execution_deps import ExecutionDeps
    from domain.run import RunContext


@dataclass(frozen=True)
class StepResult:
    """What a handler produced; stored under save_as when the step passes."""
    value: Any = None
    screenshot: Optional[bytes] = None


class StepHandler(ABC):
    """
    Executes one kind of step. Handlers signal failure by raising; the
    interpreter turns the exception into a failed StepOutcome.
    """

    @abstractmethod
    def supports(self, step: Step) -> bool: ...

    @abstractmethod
    async def handle(self, step: Step, ctx: "RunContext", deps: "ExecutionDeps") -> StepResult: ...


def require_context(ctx: "RunContext", step: Step) -> "ExecutionContextPort":
    if ctx.context is None:
        raise ConfigurationError(f"action '{step.action.value}' requires an execution context")
    return ctx.context
