"""
Pure domain layer.

Value objects and in-memory structures for guarded lifecycles with NO
dependencies on:
- ORM (SQLAlchemy)
- Configuration files (YAML)
- I/O
"""

from lifecycle_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from lifecycle_kernel.domain.context import TransitionContext
from lifecycle_kernel.domain.entity import LifecycleEntity
from lifecycle_kernel.domain.guards import (
    APPEND,
    APPROVED,
    Guard,
    GuardChain,
    GuardDecision,
    PredicateGuard,
    evaluate_guards,
)
from lifecycle_kernel.domain.lifecycle import LifecycleDefinition, TransitionRule
from lifecycle_kernel.domain.results import RejectKind, TransitionResult
from lifecycle_kernel.domain.transition_table import TransitionTable

__all__ = [
    "APPEND",
    "APPROVED",
    "Clock",
    "DeterministicClock",
    "Guard",
    "GuardChain",
    "GuardDecision",
    "LifecycleDefinition",
    "LifecycleEntity",
    "PredicateGuard",
    "RejectKind",
    "SystemClock",
    "TransitionContext",
    "TransitionResult",
    "TransitionRule",
    "TransitionTable",
    "evaluate_guards",
]
