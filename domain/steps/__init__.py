from domain.steps.base import Action, Step
from domain.steps.assertion import (
    UNDEFINED,
    AssertionKind,
    AssertionSpec,
    AssertionStep,
    PAGE_KINDS,
    RESPONSE_KINDS,
    parse_assertion_kind,
)
from domain.steps.browser import (
    AssertStep,
    ClickStep,
    FillStep,
    NavigateStep,
    ScreenshotStep,
    TypeStep,
    WaitStep,
)
from domain.steps.hooks import CleanupStep, CustomStep, HookStep, SetupStep
from domain.steps.http import HttpRequestSpec, RequestStep

__all__ = [
    "Action",
    "Step",
    "UNDEFINED",
    "AssertionKind",
    "AssertionSpec",
    "AssertionStep",
    "PAGE_KINDS",
    "RESPONSE_KINDS",
    "parse_assertion_kind",
    "AssertStep",
    "ClickStep",
    "FillStep",
    "NavigateStep",
    "ScreenshotStep",
    "TypeStep",
    "WaitStep",
    "CleanupStep",
    "CustomStep",
    "HookStep",
    "SetupStep",
    "HttpRequestSpec",
    "RequestStep",
]
