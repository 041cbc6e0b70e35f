# application/ports/execution_context.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from domain.definition import ContextOptions


class ExecutionContextPort(ABC):
    """
    One isolated sandbox (a browser page, or a bare scope for HTTP runs).
    Owned by exactly one test execution and destroyed after it.
    """

    @abstractmethod
    async def navigate(self, url: str, wait_until: str, timeout_ms: int) -> None: ...

    @abstractmethod
    async def click(self, selector: str, timeout_ms: int, options: Optional[Dict[str, Any]] = None) -> None: ...

    @abstractmethod
    async def fill(self, selector: str, value: str, timeout_ms: int) -> None: ...

    @abstractmethod
    async def type(self, selector: str, text: str, timeout_ms: int, delay_ms: Optional[int] = None) -> None: ...

    @abstractmethod
    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None: ...

    @abstractmethod
    async def screenshot(self, full_page: bool = False) -> bytes: ...

    @abstractmethod
    async def text_content(self, selector: str, timeout_ms: int) -> Optional[str]: ...

    @abstractmethod
    async def is_visible(self, selector: str) -> bool: ...

    @abstractmethod
    async def url(self) -> str: ...

    @abstractmethod
    async def count(self, selector: str) -> int: ...

    @abstractmethod
    async def destroy(self) -> None: ...


class ContextProviderPort(ABC):
    @abstractmethod
    async def create_context(self, options: ContextOptions) -> ExecutionContextPort:
        """Raises ContextAcquisitionError when no usable context can be produced."""
        ...
