# infrastructure/definitions/__init__.py
from infrastructure.definitions.base_loader import DefinitionLoadError, DefinitionLoaderBase
from infrastructure.definitions.file_finder import DefinitionFileFinder
from infrastructure.definitions.json_loader import JsonDefinitionLoader
from infrastructure.definitions.loader_registry import DefinitionLoaderRegistry
from infrastructure.definitions.step_builder import StepBuilder
from infrastructure.definitions.yaml_loader import YamlDefinitionLoader

__all__ = [
    "DefinitionLoadError",
    "DefinitionLoaderBase",
    "DefinitionLoaderRegistry",
    "DefinitionFileFinder",
    "JsonDefinitionLoader",
    "StepBuilder",
    "YamlDefinitionLoader",
]
