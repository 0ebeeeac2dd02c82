"""
Pytest fixtures for the lifecycle kernel test suite.

Provides:
- Structured logging configured once per session, captured as JSON dicts
- A deterministic clock
- A populated registry and engine for the publishing and registration
  modules, backed by an in-memory lookup
"""

import json
import logging
from io import StringIO

import pytest

from lifecycle_kernel.db.lookup import InMemoryLookup
from lifecycle_kernel.domain.clock import DeterministicClock
from lifecycle_kernel.domain.lifecycle import LifecycleDefinition, TransitionRule
from lifecycle_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from lifecycle_kernel.services.lifecycle_engine import LifecycleEngine
from lifecycle_kernel.services.registry import LifecycleRegistry
from lifecycle_modules.wiring import build_default_registry

TAKEN_EMAIL = "taken@example.com"
VALID_REFERRAL = "FRIEND-2024"


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture lifecycle_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, engine):
            engine.request_transition(...)
            logs = captured_logs()
            assert any(r["message"] == "lifecycle_transition" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("lifecycle_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Kernel fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    return DeterministicClock()


@pytest.fixture
def doc_definition():
    """Small three-state lifecycle used by kernel-level tests."""
    return LifecycleDefinition(
        entity_kind="doc",
        initial_state="draft",
        states=("draft", "moderation", "published"),
        rules=(
            TransitionRule("draft", "submit-for-review", "moderation"),
            TransitionRule("moderation", "publish", "published"),
            TransitionRule("published", "revert-to-draft", "draft"),
        ),
    )


@pytest.fixture
def doc_registry(doc_definition):
    registry = LifecycleRegistry()
    registry.register_definition(doc_definition)
    return registry


@pytest.fixture
def doc_engine(doc_registry, deterministic_clock):
    return LifecycleEngine(doc_registry, clock=deterministic_clock)


# =============================================================================
# Module fixtures
# =============================================================================


@pytest.fixture
def lookup():
    return InMemoryLookup({"email": [TAKEN_EMAIL], "referral_code": [VALID_REFERRAL]})


@pytest.fixture
def registry(lookup):
    return build_default_registry(lookup)


@pytest.fixture
def engine(registry, deterministic_clock):
    return LifecycleEngine(registry, clock=deterministic_clock)
