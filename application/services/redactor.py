# application/services/redactor.py
from __future__ import annotations

from typing import Any, Dict, Optional

SENSITIVE_KEYS = {"password", "passwd", "pass", "authorization", "cookie", "set-cookie", "token", "api_key", "x-api-key"}
MASK = "********"


def mask_value(key: str, value: Any) -> Any:
    if key.lower() in SENSITIVE_KEYS and value is not None:
        return MASK
    return value


def mask_dict(d: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {k: mask_value(k, v) for k, v in (d or {}).items()}


def mask_body(body: Any) -> Any:
    """Masks sensitive keys at any depth of a JSON-like body."""
    if isinstance(body, dict):
        return {k: MASK if (str(k).lower() in SENSITIVE_KEYS and v is not None) else mask_body(v) for k, v in body.items()}
    if isinstance(body, list):
        return [mask_body(v) for v in body]
    return body
