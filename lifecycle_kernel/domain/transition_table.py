"""
TransitionTable -- static map of (state, action) to resulting state.

Responsibility:
    Answers "is this action structurally legal from this state, and where
    does it lead?"  Pure data with construction-time validation.

Architecture position:
    Kernel > Domain.  No I/O, no logging.

Invariants enforced:
    - At most one rule per ``(from_state, action)``: the table is a partial
      function.  A second registration is a configuration error raised at
      build time, never at lookup time.
    - Every rule references declared states only.
    - No rule uses the reserved action ``ALL_ACTIONS``.
    - Once ``freeze()`` is called the table is read-only.

Failure modes:
    - ``DuplicateTransitionError``, ``UnknownStateError``,
      ``ReservedActionError`` and ``ConfigurationFrozenError`` from
      ``add``/``register``.
    - ``allowed_transition`` never raises; "not found" is ``None``.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable

from lifecycle_kernel.domain.lifecycle import LifecycleDefinition, TransitionRule
from lifecycle_kernel.exceptions import (
    ConfigurationFrozenError,
    DuplicateTransitionError,
    ReservedActionError,
    UnknownStateError,
)

# Chain key for guards that run before every action of a kind
ALL_ACTIONS = "*"


class TransitionTable:
    """Partial function ``(from_state, action) -> to_state`` for one entity kind."""

    def __init__(
        self,
        entity_kind: str,
        states: Iterable[str],
        rules: Iterable[TransitionRule] = (),
    ) -> None:
        self._entity_kind = entity_kind
        self._states: tuple[str, ...] = tuple(dict.fromkeys(states))
        self._state_set = frozenset(self._states)
        self._rules: dict[tuple[str, str], TransitionRule] = {}
        self._frozen = False
        self._lock = threading.Lock()
        for rule in rules:
            self.add(rule)

    @classmethod
    def from_definition(cls, definition: LifecycleDefinition) -> TransitionTable:
        return cls(definition.entity_kind, definition.states, definition.rules)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def add(self, rule: TransitionRule) -> None:
        """Add a rule, rejecting undeclared states and duplicate keys."""
        if rule.action == ALL_ACTIONS:
            raise ReservedActionError(self._entity_kind, rule.action)
        for state in (rule.from_state, rule.to_state):
            if state not in self._state_set:
                raise UnknownStateError(self._entity_kind, state)
        with self._lock:
            if self._frozen:
                raise ConfigurationFrozenError(self._entity_kind)
            existing = self._rules.get(rule.key)
            if existing is not None:
                raise DuplicateTransitionError(
                    self._entity_kind,
                    rule.from_state,
                    rule.action,
                    existing.to_state,
                    rule.to_state,
                )
            # Replace rather than mutate so readers never see a half-built dict
            rules = dict(self._rules)
            rules[rule.key] = rule
            self._rules = rules

    def register(self, from_state: str, action: str, to_state: str) -> TransitionRule:
        rule = TransitionRule(from_state=from_state, action=action, to_state=to_state)
        self.add(rule)
        return rule

    def freeze(self) -> None:
        with self._lock:
            self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def allowed_transition(self, from_state: str, action: str) -> str | None:
        """Return the target state, or None if the move is structurally illegal."""
        rule = self._rules.get((from_state, action))
        return rule.to_state if rule is not None else None

    def actions_from(self, state: str) -> tuple[str, ...]:
        return tuple(r.action for r in self._rules.values() if r.from_state == state)

    def is_terminal(self, state: str) -> bool:
        return not self.actions_from(state)

    def has_state(self, state: str) -> bool:
        return state in self._state_set

    def has_action(self, action: str) -> bool:
        return any(r.action == action for r in self._rules.values())

    @property
    def entity_kind(self) -> str:
        return self._entity_kind

    @property
    def states(self) -> tuple[str, ...]:
        return self._states

    @property
    def rules(self) -> tuple[TransitionRule, ...]:
        return tuple(self._rules.values())

    @property
    def actions(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(r.action for r in self._rules.values()))

    @property
    def terminal_states(self) -> tuple[str, ...]:
        sources = {r.from_state for r in self._rules.values()}
        return tuple(s for s in self._states if s not in sources)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, key: object) -> bool:
        return key in self._rules

    def __repr__(self) -> str:
        return (
            f"TransitionTable({self._entity_kind!r}, states={len(self._states)}, "
            f"rules={len(self._rules)}, frozen={self._frozen})"
        )
