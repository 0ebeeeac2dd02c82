"""
Article entity.

An ``Article`` carries its editorial content and exposes one method per
action.  Each method only builds the transition payload; whether the move
happens is decided by the engine the article is bound to.
"""

from __future__ import annotations

from collections.abc import Iterable

from lifecycle_kernel.domain.entity import LifecycleEntity
from lifecycle_kernel.domain.results import TransitionResult
from lifecycle_modules.publishing.workflows import (
    ARTICLE_KIND,
    DRAFT,
    PUBLISH,
    REVERT_TO_DRAFT,
    SUBMIT_FOR_REVIEW,
)


class Article(LifecycleEntity):
    """An article in the editorial workflow."""

    def __init__(
        self,
        title: str,
        body: str = "",
        author_id: str | None = None,
        entity_id: str | None = None,
        initial_state: str = DRAFT,
    ) -> None:
        super().__init__(ARTICLE_KIND, initial_state, entity_id=entity_id)
        self.title = title
        self.body = body
        self.author_id = author_id

    def submit_for_review(self) -> TransitionResult:
        return self.request_transition(
            SUBMIT_FOR_REVIEW,
            {"title": self.title, "body": self.body},
            actor_id=self.author_id,
        )

    def publish(self, moderator_id: str, roles: Iterable[str] = ()) -> TransitionResult:
        return self.request_transition(
            PUBLISH,
            {"actor_roles": tuple(roles)},
            actor_id=moderator_id,
        )

    def revert_to_draft(
        self, actor_id: str | None = None, note: str = ""
    ) -> TransitionResult:
        return self.request_transition(
            REVERT_TO_DRAFT, {"note": note}, actor_id=actor_id
        )
