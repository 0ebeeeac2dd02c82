"""
lifecycle_kernel.services.lifecycle_engine -- guarded transition execution.

Responsibility:
    Validates and commits state transitions.  Thin coordinator -- delegates
    structural legality to the entity kind's ``TransitionTable``, semantic
    approval to the bound guard chains, and the state write to the entity's
    compare-and-set.

Architecture position:
    Kernel > Services.  Stateless across calls: every request is a fresh
    evaluation of entity + table + guards + context.

Invariants enforced:
    - A move absent from the table is rejected before any guard runs.
    - A guard denial leaves entity state unchanged.
    - Read-validate-commit is serialized per entity: the commit succeeds
      only if state and version are unchanged since the snapshot; a lost
      race is reported as CONCURRENCY_CONFLICT, never overwritten.
    - Post-commit hooks and the outcome sink run after the state write;
      their failures are logged and cannot roll the transition back.
    - Domain rejections are returned, never raised.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable, Mapping
from contextlib import nullcontext
from typing import Any

from lifecycle_kernel.domain.clock import Clock, SystemClock
from lifecycle_kernel.domain.context import TransitionContext
from lifecycle_kernel.domain.entity import LifecycleEntity
from lifecycle_kernel.domain.guards import evaluate_guards
from lifecycle_kernel.domain.results import RejectKind, TransitionResult
from lifecycle_kernel.exceptions import ContextMismatchError, UnknownStateError
from lifecycle_kernel.logging_config import LogContext, get_logger
from lifecycle_kernel.services.registry import LifecycleRegistry

logger = get_logger("services.lifecycle_engine")

# Trace type and outcome codes for structured logging
TRACE_TYPE_LIFECYCLE_TRANSITION = "LIFECYCLE_TRANSITION"
OUTCOME_COMMITTED = "committed"
OUTCOME_NO_TRANSITION = "no_transition"
OUTCOME_GUARD_DENIED = "guard_denied"
OUTCOME_CONFLICT = "concurrency_conflict"

_OUTCOME_BY_KIND = {
    RejectKind.STRUCTURALLY_ILLEGAL: OUTCOME_NO_TRANSITION,
    RejectKind.GUARD_DENIED: OUTCOME_GUARD_DENIED,
    RejectKind.CONCURRENCY_CONFLICT: OUTCOME_CONFLICT,
}

PostCommitHook = Callable[[TransitionResult, TransitionContext], None]
OutcomeSink = Callable[[dict], None]


class LifecycleEngine:
    """Executes guarded transitions for entities of registered kinds.

    ``serialize_evaluation=True`` holds the entity's lock across the whole
    read-validate-commit sequence, so a concurrent request on the same
    entity waits and is then evaluated against the committed state.  With
    the default ``False`` guards run unlocked and only the commit is
    exclusive; a request that loses the race gets CONCURRENCY_CONFLICT.
    """

    def __init__(
        self,
        registry: LifecycleRegistry,
        *,
        clock: Clock | None = None,
        serialize_evaluation: bool = False,
        post_commit_hooks: Iterable[PostCommitHook] = (),
        outcome_sink: OutcomeSink | None = None,
    ) -> None:
        self._registry = registry
        self._clock = clock or SystemClock()
        self._serialize = serialize_evaluation
        self._hooks: tuple[PostCommitHook, ...] = tuple(post_commit_hooks)
        self._hooks_lock = threading.Lock()
        self._outcome_sink = outcome_sink

    @property
    def registry(self) -> LifecycleRegistry:
        return self._registry

    @property
    def serialize_evaluation(self) -> bool:
        return self._serialize

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    def create_entity(
        self,
        entity_kind: str,
        initial_state: str | None = None,
        entity_id: str | None = None,
    ) -> LifecycleEntity:
        """Create an entity bound to this engine.

        ``initial_state`` defaults to the kind's declared initial state.
        """
        return self.bind(LifecycleEntity(
            entity_kind,
            self._resolve_initial_state(entity_kind, initial_state),
            entity_id=entity_id,
        ))

    def bind(self, entity: LifecycleEntity) -> LifecycleEntity:
        """Attach an externally constructed entity (e.g. a domain subclass)."""
        table = self._registry.table(entity.entity_kind)
        if not table.has_state(entity.current_state):
            raise UnknownStateError(entity.entity_kind, entity.current_state)
        entity._bind(self)
        return entity

    def current_state(self, entity: LifecycleEntity) -> str:
        return entity.current_state

    def allowed_actions(self, entity: LifecycleEntity) -> tuple[str, ...]:
        """Actions structurally legal from the entity's current state."""
        return self._registry.table(entity.entity_kind).actions_from(entity.current_state)

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def add_post_commit_hook(self, hook: PostCommitHook) -> None:
        with self._hooks_lock:
            self._hooks = self._hooks + (hook,)

    def remove_post_commit_hook(self, hook: PostCommitHook) -> None:
        with self._hooks_lock:
            hooks = list(self._hooks)
            hooks.remove(hook)
            self._hooks = tuple(hooks)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def request_transition(
        self,
        entity: LifecycleEntity,
        action: str,
        context: TransitionContext | Mapping[str, Any] | None = None,
        *,
        actor_id: str | None = None,
    ) -> TransitionResult:
        """Validate and, if legal and approved, commit ``action`` on ``entity``.

        Returns a committed result, or a rejection of kind
        STRUCTURALLY_ILLEGAL, GUARD_DENIED or CONCURRENCY_CONFLICT.
        """
        ctx = self._build_context(entity, action, context, actor_id)
        lock = entity._lock if self._serialize else nullcontext()
        with LogContext.bind(
            entity_kind=entity.entity_kind,
            entity_id=entity.entity_id,
            actor_id=ctx.actor_id,
        ):
            with lock:
                return self._execute(entity, action, ctx)

    def _execute(
        self, entity: LifecycleEntity, action: str, ctx: TransitionContext
    ) -> TransitionResult:
        t0 = time.monotonic()
        table = self._registry.table(entity.entity_kind)
        from_state, version = entity._snapshot()

        # 1. Structural legality
        to_state = table.allowed_transition(from_state, action)
        if to_state is None:
            return self._finish(
                t0,
                TransitionResult.rejected(
                    RejectKind.STRUCTURALLY_ILLEGAL,
                    entity_kind=entity.entity_kind,
                    entity_id=entity.entity_id,
                    action=action,
                    from_state=from_state,
                    reason=(
                        f"No transition from '{from_state}' via action '{action}' "
                        f"for entity kind '{entity.entity_kind}'"
                    ),
                ),
            )

        # 2. Semantic approval
        decision = evaluate_guards(
            self._registry.guards_for(entity.entity_kind, action), ctx
        )
        if not decision.approved:
            return self._finish(
                t0,
                TransitionResult.rejected(
                    RejectKind.GUARD_DENIED,
                    entity_kind=entity.entity_kind,
                    entity_id=entity.entity_id,
                    action=action,
                    from_state=from_state,
                    reason=decision.reason,
                    failing_guard=decision.guard_name,
                ),
                to_state=to_state,
            )

        # 3. Commit, guarded by the snapshot
        if not entity._compare_and_set(from_state, version, to_state):
            observed = entity.current_state
            return self._finish(
                t0,
                TransitionResult.rejected(
                    RejectKind.CONCURRENCY_CONFLICT,
                    entity_kind=entity.entity_kind,
                    entity_id=entity.entity_id,
                    action=action,
                    from_state=from_state,
                    observed_state=observed,
                    reason=(
                        f"Entity changed from '{from_state}' to '{observed}' "
                        "while the transition was being evaluated"
                    ),
                ),
                to_state=to_state,
            )

        result = TransitionResult.committed(
            entity_kind=entity.entity_kind,
            entity_id=entity.entity_id,
            action=action,
            from_state=from_state,
            new_state=to_state,
        )
        self._run_hooks(result, ctx)
        return self._finish(t0, result, to_state=to_state)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _resolve_initial_state(
        self, entity_kind: str, initial_state: str | None
    ) -> str:
        if initial_state is None:
            return self._registry.initial_state(entity_kind)
        if not self._registry.table(entity_kind).has_state(initial_state):
            raise UnknownStateError(entity_kind, initial_state)
        return initial_state

    def _build_context(
        self,
        entity: LifecycleEntity,
        action: str,
        context: TransitionContext | Mapping[str, Any] | None,
        actor_id: str | None,
    ) -> TransitionContext:
        if isinstance(context, TransitionContext):
            if context.action != action:
                raise ContextMismatchError("action", action, context.action)
            if context.entity_id != entity.entity_id:
                raise ContextMismatchError("entity_id", entity.entity_id, context.entity_id)
            if context.entity_kind != entity.entity_kind:
                raise ContextMismatchError(
                    "entity_kind", entity.entity_kind, context.entity_kind
                )
            if actor_id is not None and actor_id != context.actor_id:
                raise ContextMismatchError("actor_id", actor_id, context.actor_id)
            return context
        return TransitionContext(
            entity_kind=entity.entity_kind,
            entity_id=entity.entity_id,
            action=action,
            actor_id=actor_id,
            payload=context or {},
        )

    def _run_hooks(self, result: TransitionResult, ctx: TransitionContext) -> None:
        for hook in self._hooks:
            try:
                hook(result, ctx)
            except Exception:  # noqa: BLE001
                logger.exception(
                    "post_commit_hook_failed",
                    extra={
                        "hook": getattr(hook, "__qualname__", repr(hook)),
                        "action": result.action,
                        "new_state": result.new_state,
                    },
                )

    def _finish(
        self,
        t0: float,
        result: TransitionResult,
        to_state: str | None = None,
    ) -> TransitionResult:
        duration_ms = (time.monotonic() - t0) * 1000
        outcome = (
            OUTCOME_COMMITTED if result.success else _OUTCOME_BY_KIND[result.reject_kind]
        )
        record: dict[str, Any] = {
            "trace_type": TRACE_TYPE_LIFECYCLE_TRANSITION,
            "ts": self._clock.now_utc().isoformat(),
            "entity_kind": result.entity_kind,
            "entity_id": result.entity_id,
            "action": result.action,
            "from_state": result.from_state,
            "observed_state": result.observed_state,
            "outcome": outcome,
            "reason": result.reason,
            "duration_ms": round(duration_ms, 3),
        }
        if to_state is not None:
            record["to_state"] = to_state
        if result.failing_guard is not None:
            record["failing_guard"] = result.failing_guard
        record.update(LogContext.get_all())
        logger.info("lifecycle_transition", extra=record)
        if self._outcome_sink is not None:
            try:
                self._outcome_sink(dict(record, message="lifecycle_transition"))
            except Exception:  # noqa: BLE001
                logger.exception(
                    "outcome_sink_failed",
                    extra={
                        "action": result.action,
                        "outcome": outcome,
                    },
                )
        return result
