"""
Configuration Loader (``lifecycle_config.loader``).

Responsibility
--------------
Loads YAML lifecycle files and parses them into typed
``lifecycle_config.schema`` dataclasses.  Consumed by
``lifecycle_config.load_engine``; it has no dependency on engine wiring.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; required fields have no silent defaults.
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any

import yaml

from lifecycle_config.schema import (
    EngineSettingsDef,
    GuardBindingDef,
    LifecycleConfigSet,
    LifecycleDef,
    TransitionDef,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def parse_transition(data: dict[str, Any]) -> TransitionDef:
    """Parse ``{from, action, to}``."""
    return TransitionDef(
        from_state=str(data["from"]),
        action=str(data["action"]),
        to_state=str(data["to"]),
    )


def parse_guard_binding(data: dict[str, Any]) -> GuardBindingDef:
    """Parse ``{guard, action?, params?, position?}``."""
    params = data.get("params") or {}
    if not isinstance(params, dict):
        raise ValueError(f"Guard {data.get('guard')!r}: params must be a mapping")
    position = data.get("position", "append")
    if not isinstance(position, (int, str)) or isinstance(position, bool):
        raise ValueError(f"Guard {data.get('guard')!r}: invalid position {position!r}")
    action = data.get("action")
    return GuardBindingDef(
        guard=str(data["guard"]),
        action=str(action) if action is not None else None,
        params=tuple(sorted(params.items())),
        position=position,
    )


def parse_lifecycle(data: dict[str, Any]) -> LifecycleDef:
    """
    Parse a ``LifecycleDef`` from a dict.

    Preconditions:
        ``data`` contains ``entity_kind``, ``initial_state`` and ``states``.
    Raises:
        KeyError: if required keys are missing.
    """
    return LifecycleDef(
        entity_kind=str(data["entity_kind"]),
        initial_state=str(data["initial_state"]),
        states=tuple(str(s) for s in data["states"]),
        transitions=tuple(parse_transition(t) for t in data.get("transitions", ())),
        guards=tuple(parse_guard_binding(g) for g in data.get("guards", ())),
        description=data.get("description", ""),
    )


def parse_engine_settings(data: dict[str, Any] | None) -> EngineSettingsDef:
    data = data or {}
    return EngineSettingsDef(
        serialize_evaluation=bool(data.get("serialize_evaluation", False)),
        max_retry_attempts=int(data.get("max_retry_attempts", 3)),
    )


def parse_config_set(data: dict[str, Any]) -> LifecycleConfigSet:
    """Parse a whole config set and stamp it with its checksum."""
    config = LifecycleConfigSet(
        config_id=str(data["config_id"]),
        version=int(data.get("version", 1)),
        lifecycles=tuple(parse_lifecycle(lc) for lc in data.get("lifecycles", ())),
        engine=parse_engine_settings(data.get("engine")),
    )
    return replace(config, checksum=compute_checksum(config))


def load_config_set(path: Path) -> LifecycleConfigSet:
    """
    Load a config set from one YAML file, or from every ``*.yaml`` in a
    directory.

    In directory mode the first file (sorted by name) that declares
    ``config_id`` supplies ``config_id``, ``version`` and ``engine``;
    ``lifecycles`` from all files are concatenated in file order.
    """
    path = Path(path)
    if path.is_file():
        return parse_config_set(load_yaml_file(path))

    files = sorted(path.glob("*.yaml"))
    if not files:
        raise FileNotFoundError(f"No *.yaml lifecycle files in {path}")

    merged: dict[str, Any] = {"lifecycles": []}
    for file in files:
        data = load_yaml_file(file)
        for key in ("config_id", "version", "engine"):
            if key in data and key not in merged:
                merged[key] = data[key]
        merged["lifecycles"].extend(data.get("lifecycles", ()))
    if "config_id" not in merged:
        raise KeyError(f"No file in {path} declares config_id")
    return parse_config_set(merged)


def compute_checksum(config: LifecycleConfigSet) -> str:
    """SHA-256 over canonical JSON of the config set (checksum excluded)."""
    payload = asdict(config)
    payload.pop("checksum", None)
    canonical = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
