# domain/exceptions.py
from __future__ import annotations

from typing import Any, Optional


class EngineError(Exception):
    pass


class ConfigurationError(EngineError):
    """Malformed definition: unknown action, unknown assertion type, bad handler reference."""


class StepExecutionError(EngineError):
    pass


class AssertionFailedError(StepExecutionError):
    pass


class TransportError(EngineError):
    pass


class RetryableResponseError(StepExecutionError):
    def __init__(self, message: str, response: Optional[Any] = None):
        super().__init__(message)
        self.response = response


class SchemaValidationError(EngineError):
    pass


class ContextAcquisitionError(EngineError):
    pass


class RunStateError(EngineError):
    pass
