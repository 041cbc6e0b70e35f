# application/services/interpolator.py
from __future__ import annotations

import json
import re
from typing import Any, Mapping

from domain.variables import VariableStore

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


class Interpolator:
    """
    Replaces {{name}} placeholders with values captured in a VariableStore.

    - strings, dicts, lists and tuples are walked recursively and a new value is
      returned; the input is never mutated
    - unresolved names are left as-is, so partial templates are fine
    - dict/list values are inserted as JSON, everything else via str()
    """

    def interpolate(self, value: Any, variables: VariableStore | Mapping[str, Any]) -> Any:
        if isinstance(value, str):
            return self._render_str(value, variables)
        if isinstance(value, dict):
            return {k: self.interpolate(v, variables) for k, v in value.items()}
        if isinstance(value, list):
            return [self.interpolate(v, variables) for v in value]
        if isinstance(value, tuple):
            return tuple(self.interpolate(v, variables) for v in value)
        return value

    def _render_str(self, s: str, variables: VariableStore | Mapping[str, Any]) -> str:
        if "{{" not in s:
            return s

        def replace(match: re.Match) -> str:
            key = match.group(1)
            if key not in variables:
                return match.group(0)
            return self._stringify(variables.get(key))

        return _PLACEHOLDER.sub(replace, s)

    def _stringify(self, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False, default=str)
        return str(value)
