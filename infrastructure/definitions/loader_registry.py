# infrastructure/definitions/loader_registry.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from application.services.hook_catalog import HookCatalog
from domain.definition import TestDefinition
from infrastructure.definitions.base_loader import DefinitionLoaderBase, DefinitionLoadError
from infrastructure.definitions.json_loader import JsonDefinitionLoader
from infrastructure.definitions.yaml_loader import YamlDefinitionLoader


class DefinitionLoaderRegistry:
    def __init__(self, hooks: Optional[HookCatalog] = None) -> None:
        yaml_loader = YamlDefinitionLoader(hooks)
        self._loaders: Dict[str, DefinitionLoaderBase] = {
            ".yaml": yaml_loader,
            ".yml": yaml_loader,
            ".json": JsonDefinitionLoader(hooks),
        }

    def get_loader(self, path: Path) -> DefinitionLoaderBase:
        ext = path.suffix.lower()
        loader = self._loaders.get(ext)
        if loader is None:
            raise DefinitionLoadError(f"Unsupported definition format: {ext}")
        return loader

    def load(self, path: str | Path) -> List[TestDefinition]:
        p = Path(path)
        return self.get_loader(p).load_from_file(p)
