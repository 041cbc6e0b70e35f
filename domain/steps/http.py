# domain/steps/http.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from domain.exceptions import ConfigurationError
from domain.steps.base import Action, Step

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})


@dataclass(frozen=True)
class HttpRequestSpec:
    url: str
    method: str = "GET"
    headers: Optional[Dict[str, str]] = None
    body: Any = None
    params: Optional[Dict[str, Any]] = None
    timeout_ms: Optional[int] = None

    def __post_init__(self) -> None:
        method = (self.method or "GET").upper()
        if method not in HTTP_METHODS:
            raise ConfigurationError(f"unsupported HTTP method: {self.method}")
        object.__setattr__(self, "method", method)
        if not self.url:
            raise ConfigurationError("request requires url")


@dataclass(frozen=True)
class RequestStep(Step):
    request: HttpRequestSpec
    response_schema: Optional[Dict[str, Any]] = None
    retries: Optional[int] = None  # None => EngineConfig.retries

    action = Action.REQUEST
