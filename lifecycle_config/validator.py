"""
Configuration Validator (``lifecycle_config.validator``).

Responsibility
--------------
Validates a ``LifecycleConfigSet`` at build time so that every structural
mistake is reported together, before any registry is populated.

Invariants enforced
-------------------
* Entity kinds are unique and declare at least one state.
* ``initial_state`` is a declared state.
* Transitions reference declared states; ``(from, action)`` is unique.
* No transition uses the reserved action ``"*"``.
* Guards bind to an action some transition uses (or to all actions), and
  name a guard the catalog provides.
* Engine retry attempts lie in ``1..MAX_ATTEMPTS_LIMIT``.

Failure modes
-------------
* Errors (``ConfigValidationResult.errors``) -> configuration MUST NOT be
  assembled.
* Warnings (unreachable states) -> may be assembled but should be reviewed.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field

from lifecycle_config.schema import LifecycleConfigSet, LifecycleDef
from lifecycle_kernel.domain.transition_table import ALL_ACTIONS
from lifecycle_kernel.services.retry_service import MAX_ATTEMPTS_LIMIT


@dataclass
class ConfigValidationResult:
    """
    Result of configuration validation.

    ``is_valid`` is ``True`` only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def validate_config_set(
    config: LifecycleConfigSet,
    guard_names: Iterable[str] | None = None,
) -> ConfigValidationResult:
    """
    Validate a configuration set.

    Args:
        config: The parsed configuration set.
        guard_names: Names the guard catalog provides.  When ``None`` guard
            names are not checked.
    """
    result = ConfigValidationResult()
    known_guards = set(guard_names) if guard_names is not None else None

    seen_kinds: set[str] = set()
    for lc in config.lifecycles:
        if lc.entity_kind in seen_kinds:
            result.add_error(f"Duplicate entity kind: {lc.entity_kind}")
            continue
        seen_kinds.add(lc.entity_kind)
        _validate_lifecycle(lc, known_guards, result)

    attempts = config.engine.max_retry_attempts
    if not 1 <= attempts <= MAX_ATTEMPTS_LIMIT:
        result.add_error(
            f"engine.max_retry_attempts must be between 1 and "
            f"{MAX_ATTEMPTS_LIMIT}, got {attempts}"
        )

    return result


def _validate_lifecycle(
    lc: LifecycleDef,
    known_guards: set[str] | None,
    result: ConfigValidationResult,
) -> None:
    kind = lc.entity_kind
    states = set(lc.states)
    if not states:
        result.add_error(f"{kind}: no states declared")
        return
    if len(states) != len(lc.states):
        result.add_error(f"{kind}: duplicate state names")
    if lc.initial_state not in states:
        result.add_error(f"{kind}: initial state {lc.initial_state!r} is not declared")

    keys: dict[tuple[str, str], str] = {}
    for t in lc.transitions:
        if t.action == ALL_ACTIONS:
            result.add_error(f"{kind}: action {t.action!r} is reserved for kind-wide guards")
        for state in (t.from_state, t.to_state):
            if state not in states:
                result.add_error(
                    f"{kind}: transition {t.from_state} --{t.action}--> {t.to_state} "
                    f"references undeclared state {state!r}"
                )
        key = (t.from_state, t.action)
        if key in keys:
            result.add_error(
                f"{kind}: duplicate transition for ({t.from_state!r}, {t.action!r}) "
                f"-> {keys[key]!r} and {t.to_state!r}"
            )
        else:
            keys[key] = t.to_state

    actions = {t.action for t in lc.transitions}
    bound: set[tuple[str | None, str]] = set()
    for g in lc.guards:
        if g.action is not None and g.action not in actions:
            result.add_error(
                f"{kind}: guard {g.guard!r} bound to action {g.action!r} "
                "which no transition uses"
            )
        if known_guards is not None and g.guard not in known_guards:
            result.add_error(f"{kind}: unknown guard {g.guard!r}")
        if (g.action, g.guard) in bound:
            result.add_error(
                f"{kind}: guard {g.guard!r} bound twice to {g.action or 'all actions'}"
            )
        bound.add((g.action, g.guard))

    if lc.initial_state in states:
        for state in sorted(states - _reachable(lc)):
            result.add_warning(
                f"{kind}: state {state!r} is unreachable from {lc.initial_state!r}"
            )


def _reachable(lc: LifecycleDef) -> set[str]:
    edges: dict[str, set[str]] = {}
    for t in lc.transitions:
        edges.setdefault(t.from_state, set()).add(t.to_state)
    seen = {lc.initial_state}
    queue = deque([lc.initial_state])
    while queue:
        current = queue.popleft()
        for nxt in edges.get(current, ()):
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)
    return seen
