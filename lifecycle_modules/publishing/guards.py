"""Guards for the article lifecycle."""

from __future__ import annotations

from collections.abc import Iterable

from lifecycle_kernel.domain.context import TransitionContext
from lifecycle_kernel.domain.guards import APPROVED, Guard, GuardDecision

DEFAULT_MODERATOR_ROLES = ("moderator", "editor-in-chief")


class NonEmptyBodyGuard(Guard):
    """Only an article with a non-blank ``body`` may be submitted."""

    description = "Article body must not be empty"

    def evaluate(self, context: TransitionContext) -> GuardDecision:
        body = context.get("body")
        if not isinstance(body, str) or not body.strip():
            return GuardDecision.deny("article body is empty")
        return APPROVED


class ModeratorRoleGuard(Guard):
    """The acting user must hold one of ``roles`` (read from ``actor_roles``)."""

    description = "Actor must hold a moderator role"

    def __init__(self, roles: Iterable[str] = DEFAULT_MODERATOR_ROLES) -> None:
        self.roles = frozenset(roles)
        if not self.roles:
            raise ValueError("ModeratorRoleGuard needs at least one role")

    def evaluate(self, context: TransitionContext) -> GuardDecision:
        if context.actor_id is None:
            return GuardDecision.deny("no acting user")
        held = set(context.get("actor_roles", ()))
        if held.isdisjoint(self.roles):
            return GuardDecision.deny(
                f"actor {context.actor_id} is not a moderator"
            )
        return APPROVED
