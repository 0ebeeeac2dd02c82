"""
GuardCatalog -- guard names that configuration files may reference.

YAML never contains guard logic.  It names a guard and, optionally, passes
keyword parameters; the catalog turns ``(name, params)`` into a ``Guard``
instance through a factory registered in code.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from lifecycle_kernel.domain.guards import Guard
from lifecycle_kernel.exceptions import UnknownGuardError

GuardFactory = Callable[..., Guard]


class GuardCatalog:
    """Registry of guard factories, keyed by configuration name."""

    def __init__(self) -> None:
        self._factories: dict[str, GuardFactory] = {}

    def register(self, name: str, factory: GuardFactory) -> None:
        """Register a factory; the last registration for a name wins."""
        self._factories[name] = factory

    def build(self, name: str, params: Mapping[str, Any] | None = None) -> Guard:
        factory = self._factories.get(name)
        if factory is None:
            raise UnknownGuardError(name)
        try:
            return factory(**dict(params or {}))
        except TypeError as exc:
            raise ValueError(f"Invalid params for guard {name!r}: {exc}") from exc

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._factories))

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __len__(self) -> int:
        return len(self._factories)
