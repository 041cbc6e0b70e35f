# infrastructure/definitions/step_builder.py
"""
dict -> Step construction.

UI steps name their kind with `action`; API steps may use `type` instead.
On an `assert` step, `type` names the assertion kind. Keys are accepted in
camelCase (as written in suite files) or snake_case.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

from application.services.hook_catalog import HookCatalog
from domain.exceptions import ConfigurationError
from domain.steps import (
    UNDEFINED,
    Action,
    AssertionKind,
    AssertionSpec,
    AssertionStep,
    AssertStep,
    CleanupStep,
    ClickStep,
    CustomStep,
    FillStep,
    HttpRequestSpec,
    NavigateStep,
    RequestStep,
    ScreenshotStep,
    SetupStep,
    Step,
    TypeStep,
    WaitStep,
    parse_assertion_kind,
)


def _get(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


def _options(data: Mapping[str, Any]) -> Dict[str, Any]:
    options = data.get("options") or {}
    if not isinstance(options, dict):
        raise ConfigurationError(f"step '{data.get('name')}' options must be a mapping")
    return dict(options)


def parse_action(data: Mapping[str, Any]) -> Action:
    raw = data.get("action")
    if raw is None:
        raw = data.get("type")
    if raw is None:
        raise ConfigurationError(f"step '{data.get('name', '?')}' has no action")
    try:
        return Action(str(raw).strip().lower())
    except ValueError:
        raise ConfigurationError(f"unknown action: {raw}") from None


class StepBuilder:
    def __init__(self, hooks: Optional[HookCatalog] = None):
        self._hooks = hooks or HookCatalog()
        self._builders: Dict[Action, Callable[[Mapping[str, Any], Dict[str, Any]], Step]] = {
            Action.NAVIGATE: self._navigate,
            Action.CLICK: self._click,
            Action.FILL: self._fill,
            Action.TYPE: self._type,
            Action.WAIT: self._wait,
            Action.SCREENSHOT: self._screenshot,
            Action.ASSERT: self._assert,
            Action.REQUEST: self._request,
            Action.ASSERTION: self._assertion,
            Action.SETUP: lambda d, c: self._hook(SetupStep, d, c),
            Action.CLEANUP: lambda d, c: self._hook(CleanupStep, d, c),
            Action.CUSTOM: lambda d, c: self._hook(CustomStep, d, c),
        }

    def build(self, data: Mapping[str, Any]) -> Step:
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"step must be a mapping, got {type(data).__name__}")
        action = parse_action(data)
        common = {
            "name": str(data.get("name") or action.value),
            "continue_on_failure": bool(_get(data, "continueOnFailure", "continue_on_failure", default=False)),
            "save_as": _get(data, "saveAs", "save_as"),
        }
        return self._builders[action](data, common)

    def _navigate(self, data, common) -> Step:
        options = _options(data)
        return NavigateStep(
            url=data.get("url", ""),
            wait_until=_get(data, "waitUntil", "wait_until", default=options.get("waitUntil")),
            timeout_ms=_get(data, "timeout_ms", default=options.get("timeout")),
            **common,
        )

    def _click(self, data, common) -> Step:
        return ClickStep(selector=_required(data, "selector"), options=_options(data), **common)

    def _fill(self, data, common) -> Step:
        return FillStep(selector=_required(data, "selector"), value=str(data.get("value", "")), **common)

    def _type(self, data, common) -> Step:
        options = _options(data)
        return TypeStep(
            selector=_required(data, "selector"),
            text=str(data.get("text", "")),
            delay_ms=_get(data, "delay_ms", default=options.get("delay")),
            **common,
        )

    def _wait(self, data, common) -> Step:
        options = _options(data)
        selector = data.get("selector")
        if selector:
            return WaitStep(selector=selector, timeout_ms=_get(data, "timeout_ms", default=options.get("timeout")), **common)
        # without a selector, `duration` (API files) or `timeout` (UI files) is a fixed pause
        return WaitStep(duration_ms=_get(data, "duration", "duration_ms", "timeout"), **common)

    def _screenshot(self, data, common) -> Step:
        options = _options(data)
        full_page = _get(data, "fullPage", "full_page", default=options.get("fullPage", False))
        return ScreenshotStep(full_page=bool(full_page), **common)

    def _assert(self, data, common) -> Step:
        spec_data = data.get("assertion")
        if not isinstance(spec_data, Mapping):
            spec_data = data
        return AssertStep(assertion=self.build_assertion(spec_data), **common)

    def _assertion(self, data, common) -> Step:
        spec_data = data.get("assertion")
        if not isinstance(spec_data, Mapping):
            raise ConfigurationError(f"assertion step '{common['name']}' needs an assertion mapping")
        return AssertionStep(assertion=self.build_assertion(spec_data), **common)

    def build_assertion(self, data: Mapping[str, Any]) -> AssertionSpec:
        kind = parse_assertion_kind(_get(data, "type", "kind"))
        validator, validator_name = None, None
        if kind == AssertionKind.CUSTOM:
            validator, validator_name = self._hooks.resolve(data.get("validator"))
        return AssertionSpec(
            kind=kind,
            expected=data.get("expected", UNDEFINED),
            target=data.get("target"),
            selector=data.get("selector"),
            header=data.get("header"),
            path=data.get("path"),
            schema=data.get("schema"),
            max_duration_ms=_get(data, "maxDuration", "max_duration_ms"),
            validator=validator,
            validator_name=validator_name,
        )

    def _request(self, data, common) -> Step:
        options = _options(data)
        request = HttpRequestSpec(
            url=data.get("url", ""),
            method=data.get("method", "GET"),
            headers=data.get("headers"),
            body=_get(data, "data", "body"),
            params=data.get("params"),
            timeout_ms=_get(data, "timeout_ms", default=options.get("timeout")),
        )
        return RequestStep(
            request=request,
            response_schema=_get(data, "responseSchema", "response_schema"),
            retries=data.get("retries"),
            **common,
        )

    def _hook(self, cls, data, common) -> Step:
        handler, handler_name = self._hooks.resolve(data.get("handler"))
        params = data.get("params") or {}
        if not isinstance(params, dict):
            raise ConfigurationError(f"step '{common['name']}' params must be a mapping")
        return cls(handler=handler, handler_name=handler_name, params=dict(params), **common)


def _required(data: Mapping[str, Any], key: str) -> Any:
    value = data.get(key)
    if not value:
        raise ConfigurationError(f"{data.get('action') or data.get('type')} step '{data.get('name', '?')}' requires {key}")
    return value
