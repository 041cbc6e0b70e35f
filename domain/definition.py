# domain/definition.py
"""
Test definition domain model
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from domain.exceptions import ConfigurationError
from domain.steps.base import Step


@dataclass(frozen=True)
class Viewport:
    width: int = 1920
    height: int = 1080


@dataclass(frozen=True)
class ContextOptions:
    viewport: Optional[Viewport] = None
    user_agent: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TestDefinition:
    """
    A named, ordered sequence of steps. Immutable once built; the same
    definition is shared by every execution context it runs in.
    """
    __test__ = False  # keep pytest from collecting this class

    id: str
    name: str
    steps: Tuple[Step, ...] = ()
    cleanup: Tuple[Step, ...] = ()
    description: str = ""
    tags: Tuple[str, ...] = ()
    options: ContextOptions = field(default_factory=ContextOptions)

    def __post_init__(self) -> None:
        if not self.id or not str(self.id).strip():
            raise ConfigurationError("test definition id must not be empty")
        object.__setattr__(self, "steps", tuple(self.steps))
        object.__setattr__(self, "cleanup", tuple(self.cleanup))
        object.__setattr__(self, "tags", tuple(self.tags))

    def metadata(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "tags": list(self.tags),
            "step_count": len(self.steps),
        }

    def needs_page(self) -> bool:
        return any(step.uses_page() for step in self.steps + self.cleanup)
