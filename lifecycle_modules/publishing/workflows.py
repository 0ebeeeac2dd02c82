"""
Publishing Workflows (``lifecycle_modules.publishing.workflows``).

Responsibility
--------------
Declares the article lifecycle.  Illegal moves (publishing a draft,
submitting a published article) are simply absent from the rules.

Audit relevance
---------------
The definition is logged at module-load time with state and rule counts.
"""

from lifecycle_kernel.domain.lifecycle import LifecycleDefinition, TransitionRule
from lifecycle_kernel.logging_config import get_logger

logger = get_logger("modules.publishing.workflows")

ARTICLE_KIND = "article"

# States
DRAFT = "draft"
MODERATION = "moderation"
PUBLISHED = "published"

# Actions
SUBMIT_FOR_REVIEW = "submit-for-review"
PUBLISH = "publish"
REVERT_TO_DRAFT = "revert-to-draft"


ARTICLE_LIFECYCLE = LifecycleDefinition(
    entity_kind=ARTICLE_KIND,
    description="Editorial workflow for published content",
    initial_state=DRAFT,
    states=(DRAFT, MODERATION, PUBLISHED),
    rules=(
        TransitionRule(from_state=DRAFT, action=SUBMIT_FOR_REVIEW, to_state=MODERATION),
        TransitionRule(from_state=MODERATION, action=PUBLISH, to_state=PUBLISHED),
        TransitionRule(from_state=MODERATION, action=REVERT_TO_DRAFT, to_state=DRAFT),
        TransitionRule(from_state=PUBLISHED, action=REVERT_TO_DRAFT, to_state=DRAFT),
    ),
)

logger.info(
    "publishing_lifecycle_defined",
    extra={
        "entity_kind": ARTICLE_LIFECYCLE.entity_kind,
        "state_count": len(ARTICLE_LIFECYCLE.states),
        "rule_count": len(ARTICLE_LIFECYCLE.rules),
    },
)
