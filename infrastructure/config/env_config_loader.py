# infrastructure/config/env_config_loader.py
from __future__ import annotations

import os
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from application.config import EngineConfig
from domain.definition import Viewport
from domain.exceptions import ConfigurationError

ENV_PREFIX = "SMARTQA_"
CONFIG_FILE_ENV = ENV_PREFIX + "CONFIG_FILE"


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _parse_csv(value: str) -> tuple:
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _parse_int_csv(value: str) -> tuple:
    return tuple(int(part) for part in _parse_csv(value))


def _parse_viewport(value: Any) -> Viewport:
    if isinstance(value, Viewport):
        return value
    if isinstance(value, Mapping):
        return Viewport(width=int(value.get("width", 1920)), height=int(value.get("height", 1080)))
    # "1280x720"
    width, _, height = str(value).lower().partition("x")
    return Viewport(width=int(width), height=int(height))


def _optional_str(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None


_PARSERS: Dict[str, Callable[[Any], Any]] = {
    "browsers": lambda v: _parse_csv(v) if isinstance(v, str) else tuple(v),
    "headless": lambda v: _parse_bool(v) if isinstance(v, str) else bool(v),
    "base_url": str,
    "navigation_timeout_ms": int,
    "selector_timeout_ms": int,
    "test_timeout_ms": int,
    "cleanup_timeout_ms": int,
    "http_timeout_ms": int,
    "retries": int,
    "retry_base_delay_ms": int,
    "retry_statuses": lambda v: _parse_int_csv(v) if isinstance(v, str) else tuple(int(s) for s in v),
    "default_wait_until": str,
    "viewport": _parse_viewport,
    "load_test_request_delay_ms": int,
    "log_level": lambda v: str(v).upper(),
    "log_file": _optional_str,
    "definitions_dir": str,
}


def _coerce(overrides: Mapping[str, Any], source: str, strict: bool = True) -> Dict[str, Any]:
    known = {f.name for f in fields(EngineConfig)}
    out: Dict[str, Any] = {}
    for key, raw in overrides.items():
        if key not in known:
            if not strict:
                continue
            raise ConfigurationError(f"unknown config key '{key}' in {source}")
        try:
            out[key] = _PARSERS[key](raw)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"invalid value for '{key}' in {source}: {raw!r}") from exc
    return out


def _from_environ(environ: Mapping[str, str]) -> Dict[str, Any]:
    raw = {
        key[len(ENV_PREFIX):].lower(): value
        for key, value in environ.items()
        if key.startswith(ENV_PREFIX) and key != CONFIG_FILE_ENV
    }
    # unknown SMARTQA_* variables are ignored
    return _coerce(raw, "environment", strict=False)


def _from_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Config file is invalid: {path}")
    return _coerce(data, str(path))


def load_engine_config(
    path: Optional[str | Path] = None,
    env_file: Optional[str | Path] = ".env",
    environ: Optional[Mapping[str, str]] = None,
) -> EngineConfig:
    """
    Build an EngineConfig from, in increasing precedence: the dataclass
    defaults, SMARTQA_* environment variables (after loading `env_file`
    without overriding variables already set), then the YAML file at `path`
    (or at $SMARTQA_CONFIG_FILE).
    """
    if env_file is not None and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    env = os.environ if environ is None else environ
    config = EngineConfig()
    config = replace(config, **_from_environ(env))
    if path is None and env.get(CONFIG_FILE_ENV):
        path = env[CONFIG_FILE_ENV]
    if path is not None:
        config = replace(config, **_from_yaml(Path(path)))
    return config
