# domain/steps/browser.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from domain.exceptions import ConfigurationError
from domain.steps.assertion import AssertionSpec, PAGE_KINDS
from domain.steps.base import Action, Step


@dataclass(frozen=True)
class NavigateStep(Step):
    url: str
    wait_until: Optional[str] = None  # None => EngineConfig.default_wait_until
    timeout_ms: Optional[int] = None

    action = Action.NAVIGATE


@dataclass(frozen=True)
class ClickStep(Step):
    selector: str
    options: Dict[str, Any] = field(default_factory=dict)

    action = Action.CLICK


@dataclass(frozen=True)
class FillStep(Step):
    selector: str
    value: str = ""

    action = Action.FILL


@dataclass(frozen=True)
class TypeStep(Step):
    selector: str
    text: str = ""
    delay_ms: Optional[int] = None

    action = Action.TYPE


@dataclass(frozen=True)
class WaitStep(Step):
    """
    Waits for a selector to appear, or sleeps for a fixed duration.
    The two forms are mutually exclusive.
    """
    selector: Optional[str] = None
    duration_ms: Optional[int] = None
    timeout_ms: Optional[int] = None

    action = Action.WAIT

    def __post_init__(self) -> None:
        if self.selector and self.duration_ms is not None:
            raise ConfigurationError(f"wait step '{self.name}' sets both selector and duration")
        if not self.selector and self.duration_ms is None:
            raise ConfigurationError(f"wait step '{self.name}' needs a selector or a duration")

    def uses_page(self) -> bool:
        return bool(self.selector)


@dataclass(frozen=True)
class ScreenshotStep(Step):
    full_page: bool = False

    action = Action.SCREENSHOT


@dataclass(frozen=True)
class AssertStep(Step):
    assertion: AssertionSpec

    action = Action.ASSERT

    def __post_init__(self) -> None:
        if self.assertion.kind not in PAGE_KINDS:
            raise ConfigurationError(f"unknown assertion type for page assert: {self.assertion.kind.value}")
