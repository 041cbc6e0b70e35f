# domain/run.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from domain.variables import LAST_RESPONSE_KEY, VariableStore


@dataclass
class RunContext:
    """
    State owned by exactly one test execution: the execution context
    (page or bare scope) and the variable store.
    """
    test_id: str
    flavor: str = ""
    context: Optional[Any] = None
    variables: VariableStore = field(default_factory=VariableStore)

    @property
    def last_response(self) -> Any:
        return self.variables.get(LAST_RESPONSE_KEY)
