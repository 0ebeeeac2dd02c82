"""
TransitionContext -- read-only bundle describing one pending transition.

Built by the host (or by the engine from a plain mapping) before guards run.
Guards read it; nothing writes to it.  Ordering dependencies between guards
are expressed as payload fields the host populates up front, never as
values one guard leaves behind for the next.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class TransitionContext:
    """Read-only request data handed to every guard in a chain."""

    entity_kind: str
    entity_id: str
    action: str
    actor_id: str | None = None
    payload: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Copy before wrapping so the caller's dict cannot change underneath
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]

    def __contains__(self, key: object) -> bool:
        return key in self.payload

    def __iter__(self) -> Iterator[str]:
        return iter(self.payload)
