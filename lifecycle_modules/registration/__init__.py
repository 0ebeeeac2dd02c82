"""
Registration Module (``lifecycle_modules.registration``).

Responsibility
--------------
Account registration lifecycle.  A pending registration is accepted only
when its email is not already taken, its password is long enough, and any
referral code it carries exists.  Facts about existing records come from an
``ExistenceLookup`` the host provides.
"""

from lifecycle_modules.registration.entities import Registration
from lifecycle_modules.registration.guards import (
    EmailExistsGuard,
    PasswordGuard,
    ReferralGuard,
)
from lifecycle_modules.registration.workflows import (
    DEACTIVATE,
    DEACTIVATED,
    PENDING,
    REGISTER,
    REGISTERED,
    REGISTRATION_KIND,
    REGISTRATION_LIFECYCLE,
    REJECT,
    REJECTED,
)

__all__ = [
    "DEACTIVATE",
    "DEACTIVATED",
    "EmailExistsGuard",
    "PENDING",
    "PasswordGuard",
    "REGISTER",
    "REGISTERED",
    "REGISTRATION_KIND",
    "REGISTRATION_LIFECYCLE",
    "REJECT",
    "REJECTED",
    "ReferralGuard",
    "Registration",
]
