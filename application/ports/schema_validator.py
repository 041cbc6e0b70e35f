# application/ports/schema_validator.py
from __future__ import annotations

from typing import Any, Dict, Protocol


class SchemaValidatorPort(Protocol):
    def validate(self, value: Any, schema: Dict[str, Any]) -> None:
        """Raises SchemaValidationError with a human-readable message on violation."""
        ...
