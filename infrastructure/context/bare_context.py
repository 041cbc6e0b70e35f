# infrastructure/context/bare_context.py
from __future__ import annotations

from typing import Any, Dict, Optional

from application.ports.execution_context import ContextProviderPort, ExecutionContextPort
from domain.definition import ContextOptions
from domain.exceptions import ConfigurationError, ContextAcquisitionError
from domain.run_record import API_FLAVOR


class BareContext(ExecutionContextPort):
    """
    Context for API-only tests. It owns no page, so every page operation is a
    configuration error for the step that asked for it.
    """

    def __init__(self, options: ContextOptions):
        self.options = options
        self.destroyed = False

    def _no_page(self, operation: str):
        return ConfigurationError(f"'{operation}' needs a browser context; '{API_FLAVOR}' runs have no page")

    async def navigate(self, url: str, wait_until: str, timeout_ms: int) -> None:
        raise self._no_page("navigate")

    async def click(self, selector: str, timeout_ms: int, options: Optional[Dict[str, Any]] = None) -> None:
        raise self._no_page("click")

    async def fill(self, selector: str, value: str, timeout_ms: int) -> None:
        raise self._no_page("fill")

    async def type(self, selector: str, text: str, timeout_ms: int, delay_ms: Optional[int] = None) -> None:
        raise self._no_page("type")

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        raise self._no_page("wait")

    async def screenshot(self, full_page: bool = False) -> bytes:
        raise self._no_page("screenshot")

    async def text_content(self, selector: str, timeout_ms: int) -> Optional[str]:
        raise self._no_page("assert")

    async def is_visible(self, selector: str) -> bool:
        raise self._no_page("assert")

    async def url(self) -> str:
        raise self._no_page("assert")

    async def count(self, selector: str) -> int:
        raise self._no_page("assert")

    async def destroy(self) -> None:
        self.destroyed = True


class BareContextProvider(ContextProviderPort):
    async def create_context(self, options: ContextOptions) -> ExecutionContextPort:
        return BareContext(options)


class UnavailableContextProvider(ContextProviderPort):
    """Stands in for a browser that failed to launch; every acquisition fails."""

    def __init__(self, reason: str):
        self._reason = reason

    async def create_context(self, options: ContextOptions) -> ExecutionContextPort:
        raise ContextAcquisitionError(self._reason)
