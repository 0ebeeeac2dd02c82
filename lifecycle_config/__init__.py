"""
lifecycle_config -- single public entrypoint for lifecycle configuration.

Responsibility:
    Turns YAML lifecycle files into a ready ``LifecycleEngine`` through
    ``load_engine()``.  YAML names states, transitions and guards; guard
    logic itself lives in code and is reached through a ``GuardCatalog``.

Architecture position:
    Configuration -- sits above ``lifecycle_kernel`` and beside
    ``lifecycle_modules``.  The kernel MUST NEVER import from
    ``lifecycle_config``.

Invariants enforced:
    - Build-time validation: a configuration with any validation error is
      never assembled (``ConfigValidationError``).
    - Deterministic identity: the same YAML always yields the same
      checksum.

Failure modes:
    - ``FileNotFoundError`` -- missing file or empty directory.
    - ``ConfigValidationError`` -- structural errors in the configuration.
    - ``UnknownGuardError`` -- raised only if a guard disappears from the
      catalog between validation and assembly.

Audit relevance:
    Every successful ``load_engine()`` call emits a
    ``lifecycle_config_loaded`` log entry with config_id, version and
    checksum, tying each engine to the configuration that built it.
"""

from __future__ import annotations

from pathlib import Path

from lifecycle_config.assembler import build_engine, build_registry, build_retry_service
from lifecycle_config.catalog import GuardCatalog
from lifecycle_config.loader import load_config_set
from lifecycle_config.schema import LifecycleConfigSet
from lifecycle_config.validator import ConfigValidationResult, validate_config_set
from lifecycle_kernel.domain.clock import Clock
from lifecycle_kernel.logging_config import get_logger
from lifecycle_kernel.services.lifecycle_engine import LifecycleEngine

logger = get_logger("config")

# Shipped configuration sets
DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"


def load_engine(
    path: Path | str,
    catalog: GuardCatalog,
    clock: Clock | None = None,
) -> LifecycleEngine:
    """Load, validate and assemble the configuration at ``path``.

    Args:
        path: A YAML file, or a directory whose ``*.yaml`` files form one set.
        catalog: Guard factories the configuration may name.
        clock: Clock for trace timestamps.  Defaults to the system clock.

    Returns:
        An engine whose registry holds every configured lifecycle, with
        transition tables frozen.

    Raises:
        FileNotFoundError: If ``path`` has no configuration.
        ConfigValidationError: If validation reports errors.
    """
    config = load_config_set(Path(path))
    engine = build_engine(config, catalog, clock=clock)
    logger.info(
        "lifecycle_config_loaded",
        extra={
            "config_id": config.config_id,
            "version": config.version,
            "checksum": config.checksum,
            "entity_kinds": [lc.entity_kind for lc in config.lifecycles],
            "serialize_evaluation": config.engine.serialize_evaluation,
        },
    )
    return engine


__all__ = [
    "DEFAULT_CONFIG_DIR",
    "ConfigValidationResult",
    "GuardCatalog",
    "LifecycleConfigSet",
    "build_engine",
    "build_registry",
    "build_retry_service",
    "load_config_set",
    "load_engine",
    "validate_config_set",
]
