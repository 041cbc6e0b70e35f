# application/services/hook_catalog.py
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from domain.exceptions import ConfigurationError

Hook = Callable[..., Any]


class HookCatalog:
    """
    Named callables that definition files refer to: custom step handlers,
    setup/cleanup fixtures and custom assertion validators.
    """

    def __init__(self, hooks: Optional[Dict[str, Hook]] = None):
        self._hooks: Dict[str, Hook] = {}
        for name, hook in (hooks or {}).items():
            self.register(name, hook)

    def register(self, name: str, hook: Hook) -> None:
        if not callable(hook):
            raise ConfigurationError(f"hook '{name}' is not callable")
        self._hooks[name] = hook

    def hook(self, name: Optional[str] = None) -> Callable[[Hook], Hook]:
        """Decorator form of register()."""
        def decorator(fn: Hook) -> Hook:
            self.register(name or fn.__name__, fn)
            return fn
        return decorator

    def resolve(self, ref: Any) -> Tuple[Hook, str]:
        if callable(ref):
            return ref, getattr(ref, "__name__", "handler")
        if not isinstance(ref, str) or not ref:
            raise ConfigurationError(f"invalid handler reference: {ref!r}")
        hook = self._hooks.get(ref)
        if hook is None:
            raise ConfigurationError(f"unknown handler reference: {ref}")
        return hook, ref

    def names(self) -> Iterable[str]:
        return sorted(self._hooks)
