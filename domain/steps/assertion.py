# domain/steps/assertion.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from domain.exceptions import ConfigurationError
from domain.steps.base import Action, Step


class _Undefined:
    """Marker for a value that does not exist (missing body path, no expected value)."""

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False


UNDEFINED: Any = _Undefined()


class AssertionKind(str, Enum):
    # checked against a captured response
    STATUS = "status"
    HEADER = "header"
    BODY = "body"
    SCHEMA = "schema"
    PERFORMANCE = "performance"
    CUSTOM = "custom"
    # checked against live page state
    TEXT = "text"
    VISIBLE = "visible"
    URL = "url"
    COUNT = "count"


RESPONSE_KINDS = frozenset({
    AssertionKind.STATUS,
    AssertionKind.HEADER,
    AssertionKind.BODY,
    AssertionKind.SCHEMA,
    AssertionKind.PERFORMANCE,
    AssertionKind.CUSTOM,
})

PAGE_KINDS = frozenset({
    AssertionKind.TEXT,
    AssertionKind.VISIBLE,
    AssertionKind.URL,
    AssertionKind.COUNT,
})

_SELECTOR_KINDS = frozenset({AssertionKind.TEXT, AssertionKind.VISIBLE, AssertionKind.COUNT})


def parse_assertion_kind(value: Any) -> AssertionKind:
    if isinstance(value, AssertionKind):
        return value
    try:
        return AssertionKind(str(value).strip().lower())
    except ValueError:
        raise ConfigurationError(f"unknown assertion type: {value}") from None


@dataclass(frozen=True)
class AssertionSpec:
    kind: AssertionKind
    expected: Any = UNDEFINED
    target: Optional[str] = None  # VariableStore slot; None => last response
    selector: Optional[str] = None
    header: Optional[str] = None
    path: Optional[str] = None
    schema: Optional[Dict[str, Any]] = None
    max_duration_ms: Optional[float] = None
    validator: Optional[Callable[..., Any]] = None
    validator_name: Optional[str] = None

    def __post_init__(self) -> None:
        kind = parse_assertion_kind(self.kind)
        object.__setattr__(self, "kind", kind)

        if kind in _SELECTOR_KINDS and not self.selector:
            raise ConfigurationError(f"{kind.value} assertion requires selector")
        if kind == AssertionKind.HEADER and not self.header:
            raise ConfigurationError("header assertion requires header")
        if kind == AssertionKind.BODY and not self.path:
            raise ConfigurationError("body assertion requires path")
        if kind == AssertionKind.SCHEMA and self.schema is None:
            raise ConfigurationError("schema assertion requires schema")
        if kind == AssertionKind.PERFORMANCE and self.max_duration_ms is None:
            raise ConfigurationError("performance assertion requires max_duration_ms")
        if kind == AssertionKind.CUSTOM and not callable(self.validator):
            raise ConfigurationError("custom assertion requires a validator")


@dataclass(frozen=True)
class AssertionStep(Step):
    assertion: AssertionSpec

    action = Action.ASSERTION

    def __post_init__(self) -> None:
        if self.assertion.kind not in RESPONSE_KINDS:
            raise ConfigurationError(f"unknown assertion type for response assertion: {self.assertion.kind.value}")
