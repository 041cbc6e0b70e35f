# application/services/assertion_evaluator.py
from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlsplit

from application.ports.execution_context import ExecutionContextPort
from application.ports.http_client import HttpResponse
from application.ports.schema_validator import SchemaValidatorPort
from domain.exceptions import ConfigurationError, SchemaValidationError
from domain.steps.assertion import UNDEFINED, AssertionKind, AssertionSpec


@dataclass(frozen=True)
class AssertionResult:
    passed: bool
    message: Optional[str] = None


_PASS = AssertionResult(passed=True)


def _fail(message: str) -> AssertionResult:
    return AssertionResult(passed=False, message=message)


def _show(value: Any) -> str:
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, str):
        return f'"{value}"'
    return repr(value)


def values_equal(expected: Any, actual: Any) -> bool:
    """Equality that does not let True == 1 or "5" == 5 slip through."""
    if expected is UNDEFINED or actual is UNDEFINED:
        return expected is actual
    if isinstance(expected, bool) != isinstance(actual, bool):
        return False
    return expected == actual


def get_nested_value(obj: Any, path: str) -> Any:
    """
    Dotted path lookup: "user.id", "items.0.name".
    Any missing segment yields UNDEFINED.
    """
    current = obj
    for part in path.split("."):
        if isinstance(current, dict):
            if part not in current:
                return UNDEFINED
            current = current[part]
        elif isinstance(current, (list, tuple)) and part.isdigit():
            idx = int(part)
            if idx >= len(current):
                return UNDEFINED
            current = current[idx]
        else:
            return UNDEFINED
    return current


def _field(subject: Any, name: str, default: Any = None) -> Any:
    if isinstance(subject, dict):
        return subject.get(name, default)
    return getattr(subject, name, default)


def _body_of(subject: Any) -> Any:
    if isinstance(subject, HttpResponse):
        return subject.body
    if isinstance(subject, dict) and "body" in subject:
        return subject["body"]
    return subject


def _header_of(subject: Any, name: str) -> Optional[str]:
    if isinstance(subject, HttpResponse):
        return subject.header(name)
    headers = _field(subject, "headers") or {}
    wanted = name.lower()
    for key, value in headers.items():
        if str(key).lower() == wanted:
            return value
    return None


class AssertionEvaluator:
    """
    Evaluates one AssertionSpec.

    Response kinds (status, header, body, schema, performance, custom) are
    checked against a captured value, usually an HttpResponse. Page kinds
    (text, visible, url, count) are checked against a live execution context.
    """

    def __init__(self, schema_validator: SchemaValidatorPort):
        self._schema_validator = schema_validator

    async def evaluate(self, spec: AssertionSpec, subject: Any, context: Any = None) -> AssertionResult:
        kind = spec.kind

        if kind == AssertionKind.STATUS:
            actual = _field(subject, "status")
            if not values_equal(spec.expected, actual):
                return _fail(f"Status assertion failed. Expected: {_show(spec.expected)}, Got: {_show(actual)}")
            return _PASS

        if kind == AssertionKind.HEADER:
            actual = _header_of(subject, spec.header or "")
            expected = spec.expected
            if actual is None or expected is UNDEFINED or str(actual) != str(expected):
                return _fail(
                    f"Header assertion failed for '{spec.header}'. Expected: {_show(expected)}, Got: {_show(actual)}"
                )
            return _PASS

        if kind == AssertionKind.BODY:
            actual = get_nested_value(_body_of(subject), spec.path or "")
            if not values_equal(spec.expected, actual):
                return _fail(
                    f"Body assertion failed at '{spec.path}'. Expected: {_show(spec.expected)}, Got: {_show(actual)}"
                )
            return _PASS

        if kind == AssertionKind.SCHEMA:
            try:
                self._schema_validator.validate(_body_of(subject), spec.schema or {})
            except SchemaValidationError as exc:
                return _fail(f"Schema validation failed: {exc}")
            return _PASS

        if kind == AssertionKind.PERFORMANCE:
            duration = _field(subject, "duration_ms") or 0
            if duration > (spec.max_duration_ms or 0):
                return _fail(
                    f"Performance assertion failed. Expected: <{spec.max_duration_ms}ms, Got: {duration}ms"
                )
            return _PASS

        if kind == AssertionKind.CUSTOM:
            return await self._evaluate_custom(spec, subject, context)

        raise ConfigurationError(f"unknown assertion type: {kind.value}")

    async def evaluate_page(self, spec: AssertionSpec, page: ExecutionContextPort, timeout_ms: int) -> AssertionResult:
        kind = spec.kind

        if kind == AssertionKind.TEXT:
            actual = await page.text_content(spec.selector or "", timeout_ms)
            if not values_equal(spec.expected, actual):
                return _fail(f"Text assertion failed. Expected: {_show(spec.expected)}, Got: {_show(actual)}")
            return _PASS

        if kind == AssertionKind.VISIBLE:
            expected = True if spec.expected is UNDEFINED else bool(spec.expected)
            actual = await page.is_visible(spec.selector or "")
            if expected != actual:
                return _fail(f"Visibility assertion failed. Expected: {expected}, Got: {actual}")
            return _PASS

        if kind == AssertionKind.URL:
            actual = await page.url()
            if not self._url_matches(spec.expected, actual):
                return _fail(f"URL assertion failed. Expected: {_show(spec.expected)}, Got: {_show(actual)}")
            return _PASS

        if kind == AssertionKind.COUNT:
            actual = await page.count(spec.selector or "")
            if not values_equal(spec.expected, actual):
                return _fail(f"Count assertion failed. Expected: {_show(spec.expected)}, Got: {actual}")
            return _PASS

        raise ConfigurationError(f"unknown assertion type: {kind.value}")

    async def _evaluate_custom(self, spec: AssertionSpec, subject: Any, context: Any) -> AssertionResult:
        result = spec.validator(subject, context)
        if inspect.isawaitable(result):
            result = await result

        name = spec.validator_name or getattr(spec.validator, "__name__", "validator")
        if isinstance(result, AssertionResult):
            valid, message = result.passed, result.message
        elif isinstance(result, dict):
            valid, message = bool(result.get("valid")), result.get("message")
        elif hasattr(result, "valid"):
            valid, message = bool(result.valid), getattr(result, "message", None)
        else:
            valid, message = bool(result), None

        if not valid:
            return _fail(f"Custom assertion failed: {message or name + ' returned a falsy result'}")
        return _PASS

    def _url_matches(self, expected: Any, actual: str) -> bool:
        if not isinstance(expected, str):
            return False
        if expected == actual:
            return True
        # "/dashboard" matches the path (and query, if given) of the current URL
        if expected.startswith("/"):
            parts = urlsplit(actual)
            path_query = parts.path + (f"?{parts.query}" if parts.query else "")
            return expected in (parts.path, path_query)
        return False
