"""
Code-first wiring of the shipped modules.

``build_default_registry`` produces the same lifecycles and guard chains as
``lifecycle_config/sets/content.yaml`` without reading any file.  Hosts
that want to reorder or swap guards can keep using the returned registry:
transition tables are frozen, guard chains are not.
"""

from __future__ import annotations

from lifecycle_kernel.db.lookup import ExistenceLookup
from lifecycle_kernel.domain.clock import Clock
from lifecycle_kernel.logging_config import get_logger
from lifecycle_kernel.services.lifecycle_engine import LifecycleEngine
from lifecycle_kernel.services.registry import LifecycleRegistry
from lifecycle_modules.publishing.guards import ModeratorRoleGuard, NonEmptyBodyGuard
from lifecycle_modules.publishing.workflows import (
    ARTICLE_KIND,
    ARTICLE_LIFECYCLE,
    PUBLISH,
    SUBMIT_FOR_REVIEW,
)
from lifecycle_modules.registration.guards import (
    EmailExistsGuard,
    PasswordGuard,
    ReferralGuard,
)
from lifecycle_modules.registration.workflows import (
    REGISTER,
    REGISTRATION_KIND,
    REGISTRATION_LIFECYCLE,
)

logger = get_logger("modules.wiring")


def build_default_registry(
    lookup: ExistenceLookup,
    registry: LifecycleRegistry | None = None,
) -> LifecycleRegistry:
    """Register the article and registration lifecycles with their guards."""
    registry = registry or LifecycleRegistry()

    registry.register_definition(ARTICLE_LIFECYCLE)
    registry.register_guard(ARTICLE_KIND, SUBMIT_FOR_REVIEW, NonEmptyBodyGuard())
    registry.register_guard(ARTICLE_KIND, PUBLISH, ModeratorRoleGuard())

    registry.register_definition(REGISTRATION_LIFECYCLE)
    registry.register_guard(REGISTRATION_KIND, REGISTER, EmailExistsGuard(lookup))
    registry.register_guard(REGISTRATION_KIND, REGISTER, PasswordGuard())
    registry.register_guard(REGISTRATION_KIND, REGISTER, ReferralGuard(lookup))

    registry.freeze()
    logger.info("default_registry_built", extra={"entity_kinds": list(registry.kinds)})
    return registry


def build_default_engine(
    lookup: ExistenceLookup,
    *,
    clock: Clock | None = None,
    serialize_evaluation: bool = False,
) -> LifecycleEngine:
    return LifecycleEngine(
        build_default_registry(lookup),
        clock=clock,
        serialize_evaluation=serialize_evaluation,
    )
