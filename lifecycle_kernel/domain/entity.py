"""
LifecycleEntity -- the thing whose lifecycle is managed.

Responsibility:
    Owns exactly one current state and a version counter.  Exposes the
    state read-only; the only way to change it is a successful commit by
    ``LifecycleEngine``.

Invariants enforced:
    - Created with an explicit, non-empty initial state.
    - No public setter.  The engine commits through ``_compare_and_set``,
      which succeeds only if neither state nor version moved since the
      engine took its snapshot.
    - Each entity has its own lock; entities share no mutable state.
    - An engine passed to the constructor is attached through
      ``LifecycleEngine.bind``, so an unknown kind or state fails here.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from lifecycle_kernel.exceptions import InvalidInitialStateError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from lifecycle_kernel.domain.context import TransitionContext
    from lifecycle_kernel.domain.results import TransitionResult
    from lifecycle_kernel.services.lifecycle_engine import LifecycleEngine


class LifecycleEntity:
    """An entity with a guarded lifecycle."""

    def __init__(
        self,
        entity_kind: str,
        initial_state: str,
        entity_id: str | None = None,
        engine: LifecycleEngine | None = None,
    ) -> None:
        if not initial_state:
            raise InvalidInitialStateError(entity_kind, initial_state)
        self._entity_kind = entity_kind
        self._entity_id = entity_id or str(uuid4())
        self._state = initial_state
        self._version = 0
        self._lock = threading.RLock()
        self._engine: LifecycleEngine | None = None
        if engine is not None:
            engine.bind(self)

    @property
    def entity_kind(self) -> str:
        return self._entity_kind

    @property
    def entity_id(self) -> str:
        return self._entity_id

    @property
    def current_state(self) -> str:
        return self._state

    @property
    def version(self) -> int:
        """Number of committed transitions so far."""
        return self._version

    @property
    def engine(self) -> LifecycleEngine | None:
        return self._engine

    def request_transition(
        self,
        action: str,
        context: TransitionContext | Mapping[str, Any] | None = None,
        *,
        actor_id: str | None = None,
    ) -> TransitionResult:
        if self._engine is None:
            raise RuntimeError(
                f"{self._entity_kind} {self._entity_id} is not bound to a LifecycleEngine"
            )
        return self._engine.request_transition(
            self, action, context, actor_id=actor_id
        )

    # ------------------------------------------------------------------
    # Engine-facing internals
    # ------------------------------------------------------------------

    def _bind(self, engine: LifecycleEngine) -> None:
        self._engine = engine

    def _snapshot(self) -> tuple[str, int]:
        with self._lock:
            return self._state, self._version

    def _compare_and_set(
        self, expected_state: str, expected_version: int, new_state: str
    ) -> bool:
        with self._lock:
            if self._state != expected_state or self._version != expected_version:
                return False
            self._state = new_state
            self._version += 1
            return True

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self._entity_kind!r}, "
            f"id={self._entity_id!r}, state={self._state!r})"
        )
