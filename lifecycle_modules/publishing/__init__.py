"""
Publishing Module (``lifecycle_modules.publishing``).

Responsibility
--------------
Editorial lifecycle for articles: a draft is submitted for review, a
moderator publishes it, and either a pending or a published article can be
sent back to draft.

Architecture position
---------------------
**Modules layer** -- declarative lifecycle, guards and an entity subclass.
All transition logic is delegated to ``LifecycleEngine``.
"""

from lifecycle_modules.publishing.entities import Article
from lifecycle_modules.publishing.guards import ModeratorRoleGuard, NonEmptyBodyGuard
from lifecycle_modules.publishing.workflows import (
    ARTICLE_KIND,
    ARTICLE_LIFECYCLE,
    DRAFT,
    MODERATION,
    PUBLISH,
    PUBLISHED,
    REVERT_TO_DRAFT,
    SUBMIT_FOR_REVIEW,
)

__all__ = [
    "ARTICLE_KIND",
    "ARTICLE_LIFECYCLE",
    "Article",
    "DRAFT",
    "MODERATION",
    "ModeratorRoleGuard",
    "NonEmptyBodyGuard",
    "PUBLISH",
    "PUBLISHED",
    "REVERT_TO_DRAFT",
    "SUBMIT_FOR_REVIEW",
]
