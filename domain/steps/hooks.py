# domain/steps/hooks.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict

from domain.exceptions import ConfigurationError
from domain.steps.base import Action, Step


@dataclass(frozen=True)
class HookStep(Step):
    """
    Runs an externally supplied handler. The engine only observes whether it
    raised; the return value is stored under save_as when one is set.
    """
    handler: Callable[..., Any]
    handler_name: str = ""
    params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not callable(self.handler):
            raise ConfigurationError(f"{self.action.value} step '{self.name}' has no callable handler")


@dataclass(frozen=True)
class CustomStep(HookStep):
    action = Action.CUSTOM


@dataclass(frozen=True)
class SetupStep(HookStep):
    action = Action.SETUP


@dataclass(frozen=True)
class CleanupStep(HookStep):
    action = Action.CLEANUP
