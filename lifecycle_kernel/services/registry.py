"""
LifecycleRegistry -- configuration-time wiring of tables and guard chains.

Responsibility:
    Holds, per entity kind, the declared states, the initial state, the
    transition table, and the guard chains bound to each action.  This is
    the object a host (or ``lifecycle_config``) populates at startup and
    hands to ``LifecycleEngine``.

Architecture position:
    Kernel > Services.  Shared, read-mostly configuration; entities never
    hold a reference to it.

Invariants enforced:
    - An entity kind is defined once, with an explicit initial state that
      is one of its declared states.
    - Transitions are registered only for defined kinds and only until
      ``freeze()``.
    - A guard is bound either kind-wide (``action=None``) or to an action
      that at least one transition rule of the kind uses.
    - Guard chains stay reconfigurable after ``freeze()``; engines read
      them by snapshot.

Failure modes:
    All failures are ``ConfigurationError`` subclasses and are raised at
    setup time, never from ``LifecycleEngine.request_transition``.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable

from lifecycle_kernel.domain.guards import APPEND, Guard, GuardChain, GuardPosition
from lifecycle_kernel.domain.lifecycle import LifecycleDefinition, TransitionRule
from lifecycle_kernel.domain.transition_table import ALL_ACTIONS, TransitionTable
from lifecycle_kernel.exceptions import (
    DuplicateEntityKindError,
    InvalidInitialStateError,
    UnboundGuardActionError,
    UnknownEntityKindError,
)
from lifecycle_kernel.logging_config import get_logger

logger = get_logger("services.registry")


class LifecycleRegistry:
    """Transition tables and guard chains, keyed by entity kind."""

    def __init__(self) -> None:
        self._tables: dict[str, TransitionTable] = {}
        self._initial_states: dict[str, str] = {}
        self._chains: dict[tuple[str, str], GuardChain] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Entity kinds and transitions
    # ------------------------------------------------------------------

    def define_kind(
        self, entity_kind: str, states: Iterable[str], initial_state: str
    ) -> TransitionTable:
        states = tuple(states)
        if not initial_state or initial_state not in states:
            raise InvalidInitialStateError(entity_kind, initial_state)
        with self._lock:
            if entity_kind in self._tables:
                raise DuplicateEntityKindError(entity_kind)
            table = TransitionTable(entity_kind, states)
            self._tables[entity_kind] = table
            self._initial_states[entity_kind] = initial_state
        logger.debug(
            "entity_kind_defined",
            extra={
                "entity_kind": entity_kind,
                "states": list(states),
                "initial_state": initial_state,
            },
        )
        return table

    def register_definition(self, definition: LifecycleDefinition) -> TransitionTable:
        table = self.define_kind(
            definition.entity_kind, definition.states, definition.initial_state
        )
        for rule in definition.rules:
            table.add(rule)
        logger.info(
            "lifecycle_registered",
            extra={
                "entity_kind": definition.entity_kind,
                "state_count": len(definition.states),
                "rule_count": len(definition.rules),
            },
        )
        return table

    def register_transition(
        self, entity_kind: str, from_state: str, action: str, to_state: str
    ) -> TransitionRule:
        return self.table(entity_kind).register(from_state, action, to_state)

    def freeze(self) -> None:
        """Seal every transition table.  Guard chains remain reconfigurable."""
        for table in self._tables.values():
            table.freeze()

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def register_guard(
        self,
        entity_kind: str,
        action: str | None,
        guard: Guard,
        position: GuardPosition = APPEND,
    ) -> GuardChain:
        """Bind ``guard`` to ``(entity_kind, action)``; ``action=None`` means all actions."""
        table = self.table(entity_kind)
        key = action if action is not None else ALL_ACTIONS
        if action is not None and not table.has_action(action):
            raise UnboundGuardActionError(entity_kind, action, guard.name)
        chain = self._chain_for(entity_kind, key, create=True)
        chain.add(guard, position)
        logger.debug(
            "guard_registered",
            extra={
                "entity_kind": entity_kind,
                "action": key,
                "guard_name": guard.name,
                "chain": list(chain.names),
            },
        )
        return chain

    def unregister_guard(
        self, entity_kind: str, action: str | None, guard_name: str
    ) -> Guard:
        return self.guard_chain(entity_kind, action).remove(guard_name)

    def move_guard(
        self,
        entity_kind: str,
        action: str | None,
        guard_name: str,
        position: GuardPosition,
    ) -> None:
        self.guard_chain(entity_kind, action).move(guard_name, position)

    def guard_chain(self, entity_kind: str, action: str | None) -> GuardChain:
        """The chain bound to ``(entity_kind, action)``, created empty if absent."""
        self.table(entity_kind)
        key = action if action is not None else ALL_ACTIONS
        return self._chain_for(entity_kind, key, create=True)

    def guards_for(self, entity_kind: str, action: str) -> tuple[Guard, ...]:
        """Snapshot of the guards that gate ``action``: kind-wide first."""
        kind_wide = self._chain_for(entity_kind, ALL_ACTIONS, create=False)
        specific = self._chain_for(entity_kind, action, create=False)
        guards: tuple[Guard, ...] = ()
        if kind_wide is not None:
            guards += kind_wide.snapshot()
        if specific is not None:
            guards += specific.snapshot()
        return guards

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def table(self, entity_kind: str) -> TransitionTable:
        table = self._tables.get(entity_kind)
        if table is None:
            raise UnknownEntityKindError(entity_kind)
        return table

    def initial_state(self, entity_kind: str) -> str:
        self.table(entity_kind)
        return self._initial_states[entity_kind]

    def has_kind(self, entity_kind: str) -> bool:
        return entity_kind in self._tables

    @property
    def kinds(self) -> tuple[str, ...]:
        return tuple(self._tables)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _chain_for(
        self, entity_kind: str, key: str, *, create: bool
    ) -> GuardChain | None:
        chain = self._chains.get((entity_kind, key))
        if chain is None and create:
            with self._lock:
                chain = self._chains.setdefault(
                    (entity_kind, key), GuardChain(f"{entity_kind}.{key}")
                )
        return chain
