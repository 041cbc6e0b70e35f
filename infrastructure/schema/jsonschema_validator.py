# infrastructure/schema/jsonschema_validator.py
from __future__ import annotations

from typing import Any, Dict

import jsonschema

from domain.exceptions import ConfigurationError, SchemaValidationError


class JsonSchemaValidator:
    """SchemaValidatorPort backed by jsonschema (draft picked from `$schema`)."""

    def validate(self, value: Any, schema: Dict[str, Any]) -> None:
        try:
            jsonschema.validate(instance=value, schema=schema)
        except jsonschema.ValidationError as exc:
            location = ".".join(str(p) for p in exc.absolute_path)
            prefix = f"at '{location}': " if location else ""
            raise SchemaValidationError(f"{prefix}{exc.message}") from exc
        except jsonschema.SchemaError as exc:
            raise ConfigurationError(f"invalid schema: {exc.message}") from exc
