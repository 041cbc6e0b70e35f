# domain/steps/base.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional


class Action(str, Enum):
    NAVIGATE = "navigate"
    CLICK = "click"
    FILL = "fill"
    TYPE = "type"
    WAIT = "wait"
    SCREENSHOT = "screenshot"
    ASSERT = "assert"
    REQUEST = "request"
    ASSERTION = "assertion"
    SETUP = "setup"
    CLEANUP = "cleanup"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Step:
    name: str
    continue_on_failure: bool = field(default=False, kw_only=True)
    save_as: Optional[str] = field(default=None, kw_only=True)

    action: ClassVar[Action]

    def uses_page(self) -> bool:
        return self.action in PAGE_ACTIONS


PAGE_ACTIONS = frozenset({
    Action.NAVIGATE,
    Action.CLICK,
    Action.FILL,
    Action.TYPE,
    Action.SCREENSHOT,
    Action.ASSERT,
})
