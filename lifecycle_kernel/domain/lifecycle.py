"""
Canonical lifecycle types (``lifecycle_kernel.domain.lifecycle``).

Responsibility
--------------
Pure value objects describing an entity kind's lifecycle: its closed set of
states, its initial state, and the transition rules between them.  Used by
every module (publishing, registration, ...) so that a rule and a
definition are defined once.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  No imports
from ``db/``, ``services/`` or outer layers.

Invariants enforced
-------------------
* ``initial_state`` is a member of ``states``.
* Rules reference only states in ``states``.
* Uniqueness of ``(from_state, action)`` is enforced by
  ``TransitionTable`` when the definition is loaded.
"""

from __future__ import annotations

from dataclasses import dataclass

from lifecycle_kernel.exceptions import InvalidInitialStateError, UnknownStateError


@dataclass(frozen=True)
class TransitionRule:
    """A structurally legal move: ``(from_state, action) -> to_state``."""

    from_state: str
    action: str
    to_state: str

    @property
    def key(self) -> tuple[str, str]:
        return (self.from_state, self.action)


@dataclass(frozen=True)
class LifecycleDefinition:
    """A state machine definition for one entity kind.

    Contract: frozen; ``rules`` reference only states in ``states``.
    Guarantees: ``initial_state`` is a member of ``states``.
    ``terminal_states`` are states with no outgoing rule.
    """

    entity_kind: str
    initial_state: str
    states: tuple[str, ...]
    rules: tuple[TransitionRule, ...]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.initial_state or self.initial_state not in self.states:
            raise InvalidInitialStateError(self.entity_kind, self.initial_state)
        declared = set(self.states)
        for rule in self.rules:
            for state in (rule.from_state, rule.to_state):
                if state not in declared:
                    raise UnknownStateError(self.entity_kind, state)

    @property
    def actions(self) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for rule in self.rules:
            seen.setdefault(rule.action, None)
        return tuple(seen)

    @property
    def terminal_states(self) -> tuple[str, ...]:
        sources = {rule.from_state for rule in self.rules}
        return tuple(s for s in self.states if s not in sources)
