"""Transition outcomes returned by the lifecycle engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique


@unique
class RejectKind(str, Enum):
    """Why a transition request was not committed."""

    STRUCTURALLY_ILLEGAL = "structurally_illegal"
    GUARD_DENIED = "guard_denied"
    CONCURRENCY_CONFLICT = "concurrency_conflict"


@dataclass(frozen=True)
class TransitionResult:
    """Result of one ``request_transition`` call.

    Committed results carry ``new_state``.  Rejected results carry
    ``reject_kind`` and ``reason``; guard denials also name the guard.
    ``observed_state`` is the entity's state as seen when the result was
    produced -- for a concurrency conflict, the state the winner committed.
    """

    success: bool
    entity_kind: str
    entity_id: str
    action: str
    from_state: str
    observed_state: str
    new_state: str | None = None
    reject_kind: RejectKind | None = None
    reason: str = ""
    failing_guard: str | None = None
    attempts: int = 1

    @classmethod
    def committed(
        cls,
        *,
        entity_kind: str,
        entity_id: str,
        action: str,
        from_state: str,
        new_state: str,
    ) -> TransitionResult:
        return cls(
            success=True,
            entity_kind=entity_kind,
            entity_id=entity_id,
            action=action,
            from_state=from_state,
            observed_state=new_state,
            new_state=new_state,
        )

    @classmethod
    def rejected(
        cls,
        kind: RejectKind,
        *,
        entity_kind: str,
        entity_id: str,
        action: str,
        from_state: str,
        reason: str,
        observed_state: str | None = None,
        failing_guard: str | None = None,
    ) -> TransitionResult:
        return cls(
            success=False,
            entity_kind=entity_kind,
            entity_id=entity_id,
            action=action,
            from_state=from_state,
            observed_state=observed_state if observed_state is not None else from_state,
            reject_kind=kind,
            reason=reason,
            failing_guard=failing_guard,
        )

    @property
    def is_structurally_illegal(self) -> bool:
        return self.reject_kind is RejectKind.STRUCTURALLY_ILLEGAL

    @property
    def is_guard_denied(self) -> bool:
        return self.reject_kind is RejectKind.GUARD_DENIED

    @property
    def is_conflict(self) -> bool:
        return self.reject_kind is RejectKind.CONCURRENCY_CONFLICT
