"""
Configuration Assembler (``lifecycle_config.assembler``).

Responsibility
--------------
Turns a validated ``LifecycleConfigSet`` into a populated
``LifecycleRegistry`` and a ready ``LifecycleEngine``.

Invariants enforced
-------------------
* Assembly only proceeds from a configuration with no validation errors;
  otherwise ``ConfigValidationError`` is raised (fatal at startup).
* Transitions are registered before guards, so every guard binding is
  checked against an existing rule.
* The registry's transition tables are frozen once assembled.
"""

from __future__ import annotations

from lifecycle_config.catalog import GuardCatalog
from lifecycle_config.schema import LifecycleConfigSet
from lifecycle_config.validator import validate_config_set
from lifecycle_kernel.domain.clock import Clock
from lifecycle_kernel.exceptions import ConfigValidationError
from lifecycle_kernel.logging_config import get_logger
from lifecycle_kernel.services.lifecycle_engine import LifecycleEngine
from lifecycle_kernel.services.registry import LifecycleRegistry
from lifecycle_kernel.services.retry_service import TransitionRetryService

logger = get_logger("config.assembler")


def build_registry(
    config: LifecycleConfigSet,
    catalog: GuardCatalog,
    registry: LifecycleRegistry | None = None,
) -> LifecycleRegistry:
    """Validate ``config`` and register every lifecycle it declares."""
    validation = validate_config_set(config, guard_names=catalog.names)
    for warning in validation.warnings:
        logger.warning(
            "lifecycle_config_warning",
            extra={"config_id": config.config_id, "warning": warning},
        )
    if not validation.is_valid:
        raise ConfigValidationError(config.config_id, validation.errors)

    registry = registry or LifecycleRegistry()
    for lc in config.lifecycles:
        registry.define_kind(lc.entity_kind, lc.states, lc.initial_state)
        for t in lc.transitions:
            registry.register_transition(lc.entity_kind, t.from_state, t.action, t.to_state)
        for binding in lc.guards:
            guard = catalog.build(binding.guard, binding.params_dict)
            registry.register_guard(lc.entity_kind, binding.action, guard, binding.position)
    registry.freeze()
    return registry


def build_engine(
    config: LifecycleConfigSet,
    catalog: GuardCatalog,
    clock: Clock | None = None,
) -> LifecycleEngine:
    """Build a registry from ``config`` and wrap it in an engine."""
    registry = build_registry(config, catalog)
    return LifecycleEngine(
        registry,
        clock=clock,
        serialize_evaluation=config.engine.serialize_evaluation,
    )


def build_retry_service(
    config: LifecycleConfigSet, engine: LifecycleEngine
) -> TransitionRetryService:
    """Wrap ``engine`` with the configured conflict-retry budget."""
    return TransitionRetryService(engine, max_attempts=config.engine.max_retry_attempts)
