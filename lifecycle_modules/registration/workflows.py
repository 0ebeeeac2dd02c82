"""
Registration Workflows (``lifecycle_modules.registration.workflows``).

``rejected`` and ``deactivated`` are terminal: no rule leaves them.
"""

from lifecycle_kernel.domain.lifecycle import LifecycleDefinition, TransitionRule
from lifecycle_kernel.logging_config import get_logger

logger = get_logger("modules.registration.workflows")

REGISTRATION_KIND = "registration"

# States
PENDING = "pending"
REGISTERED = "registered"
REJECTED = "rejected"
DEACTIVATED = "deactivated"

# Actions
REGISTER = "register"
REJECT = "reject"
DEACTIVATE = "deactivate"


REGISTRATION_LIFECYCLE = LifecycleDefinition(
    entity_kind=REGISTRATION_KIND,
    description="Account registration requests",
    initial_state=PENDING,
    states=(PENDING, REGISTERED, REJECTED, DEACTIVATED),
    rules=(
        TransitionRule(from_state=PENDING, action=REGISTER, to_state=REGISTERED),
        TransitionRule(from_state=PENDING, action=REJECT, to_state=REJECTED),
        TransitionRule(from_state=REGISTERED, action=DEACTIVATE, to_state=DEACTIVATED),
    ),
)

logger.info(
    "registration_lifecycle_defined",
    extra={
        "entity_kind": REGISTRATION_LIFECYCLE.entity_kind,
        "state_count": len(REGISTRATION_LIFECYCLE.states),
        "rule_count": len(REGISTRATION_LIFECYCLE.rules),
        "terminal_states": list(REGISTRATION_LIFECYCLE.terminal_states),
    },
)
