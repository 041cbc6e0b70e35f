# application/config.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from domain.definition import Viewport


@dataclass(frozen=True)
class EngineConfig:
    """
    Engine-wide settings. Every timeout used by the handlers and the runner
    comes from here.
    """
    browsers: Tuple[str, ...] = ("chromium",)
    headless: bool = True
    base_url: str = ""

    navigation_timeout_ms: int = 30000
    selector_timeout_ms: int = 5000
    test_timeout_ms: int = 300000
    cleanup_timeout_ms: int = 60000
    http_timeout_ms: int = 30000

    retries: int = 3
    retry_base_delay_ms: int = 1000
    retry_statuses: Tuple[int, ...] = (500, 502, 503, 504)

    default_wait_until: str = "networkidle"
    viewport: Viewport = field(default_factory=Viewport)
    load_test_request_delay_ms: int = 100

    log_level: str = "INFO"
    log_file: Optional[str] = None
    definitions_dir: str = "definitions"

    def resolve_url(self, url: str) -> str:
        if url.startswith(("http://", "https://")) or not self.base_url:
            return url
        return self.base_url.rstrip("/") + "/" + url.lstrip("/")
