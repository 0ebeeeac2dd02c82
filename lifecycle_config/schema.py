"""
Configuration schema (``lifecycle_config.schema``).

Frozen dataclasses produced by ``lifecycle_config.loader`` from YAML.  They
describe lifecycles by name only -- guards are referenced by catalog name,
never by expression -- and carry no behavior.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class TransitionDef:
    """One rule: ``from_state --action--> to_state``."""

    from_state: str
    action: str
    to_state: str


@dataclass(frozen=True)
class GuardBindingDef:
    """Binds a catalog guard to an action (``action=None``: every action)."""

    guard: str
    action: str | None = None
    params: tuple[tuple[str, Any], ...] = ()
    position: int | str = "append"

    @property
    def params_dict(self) -> dict[str, Any]:
        return dict(self.params)


@dataclass(frozen=True)
class LifecycleDef:
    """Lifecycle of one entity kind."""

    entity_kind: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[TransitionDef, ...] = ()
    guards: tuple[GuardBindingDef, ...] = ()
    description: str = ""


@dataclass(frozen=True)
class EngineSettingsDef:
    """Engine options applied by ``assembler.build_engine``."""

    serialize_evaluation: bool = False
    max_retry_attempts: int = 3


@dataclass(frozen=True)
class LifecycleConfigSet:
    """A complete, versioned set of lifecycles plus engine settings."""

    config_id: str
    version: int
    lifecycles: tuple[LifecycleDef, ...]
    engine: EngineSettingsDef = field(default_factory=EngineSettingsDef)
    checksum: str = ""

    def lifecycle(self, entity_kind: str) -> LifecycleDef | None:
        for lc in self.lifecycles:
            if lc.entity_kind == entity_kind:
                return lc
        return None
