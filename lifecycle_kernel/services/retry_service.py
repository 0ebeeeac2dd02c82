"""
TransitionRetryService -- bounded re-issue of conflicting transitions.

Responsibility:
    Re-requests a transition that lost a race on the same entity
    (CONCURRENCY_CONFLICT).  Each attempt is a fresh engine evaluation
    against the entity's now-current state, so a retry may legitimately end
    as STRUCTURALLY_ILLEGAL or GUARD_DENIED instead of committing.

Invariants enforced:
    MAX_ATTEMPTS_LIMIT -- Safety limit (10) prevents unbounded retry loops.
    Only CONCURRENCY_CONFLICT is retried; structural and guard rejections
    are caller errors or business rejections and are returned at once.

Usage:
    retry_svc = TransitionRetryService(engine, max_attempts=3)
    result = retry_svc.request_transition(article, "publish", ctx)
    if result.is_conflict:
        # still losing after result.attempts tries
        ...
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from lifecycle_kernel.domain.context import TransitionContext
from lifecycle_kernel.domain.entity import LifecycleEntity
from lifecycle_kernel.domain.results import TransitionResult
from lifecycle_kernel.logging_config import get_logger
from lifecycle_kernel.services.lifecycle_engine import LifecycleEngine

logger = get_logger("services.retry_service")

DEFAULT_MAX_ATTEMPTS = 3
MAX_ATTEMPTS_LIMIT = 10


class TransitionRetryService:
    """Retries transition requests that were rejected as concurrency conflicts.

    Contract:
        ``request_transition`` calls the engine at most ``max_attempts``
        times and returns the last result with ``attempts`` set.

    Guarantees:
        - Never retries STRUCTURALLY_ILLEGAL or GUARD_DENIED.
        - Never exceeds MAX_ATTEMPTS_LIMIT engine calls per request.
    """

    def __init__(
        self, engine: LifecycleEngine, max_attempts: int = DEFAULT_MAX_ATTEMPTS
    ) -> None:
        if not 1 <= max_attempts <= MAX_ATTEMPTS_LIMIT:
            raise ValueError(
                f"max_attempts must be between 1 and {MAX_ATTEMPTS_LIMIT}, "
                f"got {max_attempts}"
            )
        self._engine = engine
        self._max_attempts = max_attempts

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def request_transition(
        self,
        entity: LifecycleEntity,
        action: str,
        context: TransitionContext | Mapping[str, Any] | None = None,
        *,
        actor_id: str | None = None,
    ) -> TransitionResult:
        attempt = 0
        while True:
            attempt += 1
            result = self._engine.request_transition(
                entity, action, context, actor_id=actor_id
            )
            if not result.is_conflict:
                return replace(result, attempts=attempt)
            if attempt >= self._max_attempts:
                logger.warning(
                    "transition_retry_exhausted",
                    extra={
                        "entity_kind": entity.entity_kind,
                        "entity_id": entity.entity_id,
                        "action": action,
                        "attempts": attempt,
                        "observed_state": result.observed_state,
                    },
                )
                return replace(result, attempts=attempt)
            logger.info(
                "transition_retry",
                extra={
                    "entity_kind": entity.entity_kind,
                    "entity_id": entity.entity_id,
                    "action": action,
                    "attempt": attempt,
                    "observed_state": result.observed_state,
                },
            )
