"""Services for the lifecycle kernel (registry, engine, retry)."""

from lifecycle_kernel.services.lifecycle_engine import (
    LifecycleEngine,
    OutcomeSink,
    PostCommitHook,
)
from lifecycle_kernel.services.registry import ALL_ACTIONS, LifecycleRegistry
from lifecycle_kernel.services.retry_service import (
    DEFAULT_MAX_ATTEMPTS,
    MAX_ATTEMPTS_LIMIT,
    TransitionRetryService,
)

__all__ = [
    "ALL_ACTIONS",
    "DEFAULT_MAX_ATTEMPTS",
    "LifecycleEngine",
    "LifecycleRegistry",
    "MAX_ATTEMPTS_LIMIT",
    "OutcomeSink",
    "PostCommitHook",
    "TransitionRetryService",
]
