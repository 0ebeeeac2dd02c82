"""
Guards and guard chains (``lifecycle_kernel.domain.guards``).

Responsibility
--------------
A ``Guard`` is a single-responsibility predicate over a
``TransitionContext`` that approves or vetoes a pending transition.  A
``GuardChain`` is an ordered sequence of guards that short-circuits on the
first veto.

Architecture position
---------------------
**Kernel domain layer.**  Guards may hold their own configuration (a
minimum length, a lookup collaborator) but must not mutate the context or
shared state while evaluating.

Invariants enforced
-------------------
* Evaluation runs guards in registration order and stops at the first
  denial; later guards are never called.
* An empty chain approves.
* A chain is copy-on-write: ``add``/``remove``/``move`` swap in a new
  tuple, so an ``evaluate`` already in flight iterates the snapshot it
  started with.
* Guard names are unique within a chain.

Failure modes
-------------
* A guard that raises is treated as a denial and logged as
  ``guard_evaluation_error``; the exception does not escape the chain.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Final

from lifecycle_kernel.domain.context import TransitionContext
from lifecycle_kernel.exceptions import (
    DuplicateGuardError,
    GuardNotFoundError,
    GuardPositionError,
)
from lifecycle_kernel.logging_config import get_logger

logger = get_logger("domain.guards")

APPEND: Final = "append"

GuardPosition = int | str


@dataclass(frozen=True)
class GuardDecision:
    """Outcome of one guard, or of a whole chain.

    ``guard_name`` is set on chain-level denials to the guard that vetoed.
    """

    approved: bool
    reason: str = ""
    guard_name: str | None = None

    @classmethod
    def approve(cls) -> GuardDecision:
        return APPROVED

    @classmethod
    def deny(cls, reason: str, guard_name: str | None = None) -> GuardDecision:
        return cls(approved=False, reason=reason, guard_name=guard_name)

    def __bool__(self) -> bool:
        return self.approved


APPROVED: Final = GuardDecision(approved=True)


class Guard(ABC):
    """A named predicate that may veto a transition.

    Subclasses implement ``evaluate``.  ``name`` defaults to the class name,
    which is what a denial reports as the failing guard.
    """

    name: str = ""
    description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if not cls.__dict__.get("name"):
            cls.name = cls.__name__

    @abstractmethod
    def evaluate(self, context: TransitionContext) -> GuardDecision | bool:
        """Approve or deny.  A bare bool is accepted; False denies."""
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


class PredicateGuard(Guard):
    """Adapts a plain ``callable(context) -> bool`` into a Guard."""

    def __init__(
        self,
        name: str,
        predicate: Callable[[TransitionContext], bool],
        reason: str | None = None,
        description: str = "",
    ) -> None:
        self.name = name
        self.description = description
        self._predicate = predicate
        self._reason = reason or f"Guard not satisfied: {name}"

    def evaluate(self, context: TransitionContext) -> GuardDecision:
        if self._predicate(context):
            return APPROVED
        return GuardDecision.deny(self._reason)


def _run_guard(guard: Guard, context: TransitionContext) -> GuardDecision:
    try:
        outcome = guard.evaluate(context)
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "guard_evaluation_error",
            extra={
                "guard_name": guard.name,
                "action": context.action,
                "error_type": type(exc).__name__,
                "error": str(exc),
            },
        )
        return GuardDecision.deny(
            f"Guard raised {type(exc).__name__}: {exc}", guard.name
        )

    if isinstance(outcome, GuardDecision):
        if outcome.approved:
            return APPROVED
        return GuardDecision.deny(outcome.reason, guard.name)
    if outcome:
        return APPROVED
    return GuardDecision.deny(f"Guard not satisfied: {guard.name}", guard.name)


def evaluate_guards(
    guards: Iterable[Guard], context: TransitionContext
) -> GuardDecision:
    """Run guards in order and return the first denial, or APPROVED."""
    for guard in guards:
        decision = _run_guard(guard, context)
        if not decision.approved:
            return decision
    return APPROVED


class GuardChain:
    """Ordered, short-circuiting, copy-on-write sequence of guards."""

    def __init__(self, name: str, guards: Iterable[Guard] = ()) -> None:
        self._name = name
        self._guards: tuple[Guard, ...] = ()
        self._lock = threading.Lock()
        for guard in guards:
            self.add(guard)

    @property
    def name(self) -> str:
        return self._name

    # ------------------------------------------------------------------
    # Reconfiguration
    # ------------------------------------------------------------------

    def add(self, guard: Guard, position: GuardPosition = APPEND) -> None:
        with self._lock:
            current = list(self._guards)
            if any(g.name == guard.name for g in current):
                raise DuplicateGuardError(self._name, guard.name)
            index = self._resolve_position(position, len(current))
            current.insert(index, guard)
            self._guards = tuple(current)

    def remove(self, guard_name: str) -> Guard:
        with self._lock:
            current = list(self._guards)
            index = self._index_of(current, guard_name)
            guard = current.pop(index)
            self._guards = tuple(current)
            return guard

    def move(self, guard_name: str, position: GuardPosition) -> None:
        with self._lock:
            current = list(self._guards)
            guard = current.pop(self._index_of(current, guard_name))
            index = self._resolve_position(position, len(current))
            current.insert(index, guard)
            self._guards = tuple(current)

    def clear(self) -> None:
        with self._lock:
            self._guards = ()

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def snapshot(self) -> tuple[Guard, ...]:
        return self._guards

    def evaluate(self, context: TransitionContext) -> GuardDecision:
        return evaluate_guards(self.snapshot(), context)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(g.name for g in self._guards)

    def __len__(self) -> int:
        return len(self._guards)

    def __iter__(self) -> Iterator[Guard]:
        return iter(self.snapshot())

    def __repr__(self) -> str:
        return f"GuardChain({self._name!r}, {list(self.names)!r})"

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _index_of(self, guards: Sequence[Guard], guard_name: str) -> int:
        for i, g in enumerate(guards):
            if g.name == guard_name:
                return i
        raise GuardNotFoundError(self._name, guard_name)

    def _resolve_position(self, position: GuardPosition, length: int) -> int:
        if position == APPEND:
            return length
        # bool is an int subclass; True/False are not positions
        if isinstance(position, bool) or not isinstance(position, int):
            raise GuardPositionError(self._name, position, length)
        if position < 0:
            position += length
        if position < 0 or position > length:
            raise GuardPositionError(self._name, position, length)
        return position
