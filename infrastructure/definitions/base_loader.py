# infrastructure/definitions/base_loader.py
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from application.services.hook_catalog import HookCatalog
from domain.definition import ContextOptions, TestDefinition, Viewport
from domain.exceptions import ConfigurationError
from infrastructure.definitions.step_builder import StepBuilder


class DefinitionLoadError(ConfigurationError):
    pass


class DefinitionLoaderBase(ABC):
    """
    Turns a parsed definition file into TestDefinitions. A file holds one
    test (a mapping with `steps`), a list of tests, or a suite mapping with
    `tests` and/or `apiTests`.
    """

    def __init__(self, hooks: Optional[HookCatalog] = None):
        self._steps = StepBuilder(hooks)

    @abstractmethod
    def _load_file(self, path: Path) -> Any:
        ...

    def load_from_file(self, path: str | Path) -> List[TestDefinition]:
        p = Path(path)
        if not p.exists():
            raise DefinitionLoadError(f"Definition file not found: {p}")
        data = self._load_file(p)
        if data is None:
            raise DefinitionLoadError(f"Definition file is empty: {p}")
        try:
            return self.load_from_data(data)
        except DefinitionLoadError:
            raise
        except ConfigurationError as exc:
            raise DefinitionLoadError(f"{p}: {exc}") from exc

    def load_from_data(self, data: Any) -> List[TestDefinition]:
        if isinstance(data, list):
            return [self.load_test(item) for item in data]
        if not isinstance(data, Mapping):
            raise DefinitionLoadError(f"Unsupported definition document: {type(data).__name__}")
        if "tests" in data or "apiTests" in data:
            items = list(data.get("tests") or []) + list(data.get("apiTests") or [])
            return [self.load_test(item) for item in items]
        return [self.load_test(data)]

    def load_test(self, data: Mapping[str, Any]) -> TestDefinition:
        if not isinstance(data, Mapping):
            raise DefinitionLoadError(f"test definition must be a mapping, got {type(data).__name__}")
        test_id = str(data.get("id") or "")
        steps = [self._steps.build(s) for s in data.get("steps") or []]
        cleanup = [self._steps.build(s) for s in data.get("cleanup") or []]
        return TestDefinition(
            id=test_id,
            name=str(data.get("name") or test_id),
            steps=tuple(steps),
            cleanup=tuple(cleanup),
            description=str(data.get("description") or ""),
            tags=tuple(data.get("tags") or ()),
            options=self._load_options(data),
        )

    def _load_options(self, data: Mapping[str, Any]) -> ContextOptions:
        viewport = None
        raw = data.get("viewport")
        if isinstance(raw, Mapping):
            viewport = Viewport(width=int(raw.get("width", 1920)), height=int(raw.get("height", 1080)))
        extra: Dict[str, Any] = dict(data.get("contextOptions") or data.get("context_options") or {})
        return ContextOptions(
            viewport=viewport,
            user_agent=data.get("userAgent") or data.get("user_agent"),
            extra=extra,
        )
