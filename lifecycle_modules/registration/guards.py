"""
Guards for the registration lifecycle.

The default chain on ``register`` is
``[EmailExistsGuard, PasswordGuard, ReferralGuard]``: the cheap local
password check sits between the two lookups, and a taken email stops the
chain before any other guard runs.
"""

from __future__ import annotations

from lifecycle_kernel.db.lookup import ExistenceLookup
from lifecycle_kernel.domain.context import TransitionContext
from lifecycle_kernel.domain.guards import APPROVED, Guard, GuardDecision

DEFAULT_MIN_PASSWORD_LENGTH = 8


class EmailExistsGuard(Guard):
    """Denies when an account with the requested email already exists."""

    description = "Email must not belong to an existing account"

    def __init__(self, lookup: ExistenceLookup, field: str = "email") -> None:
        self._lookup = lookup
        self._field = field

    def evaluate(self, context: TransitionContext) -> GuardDecision:
        email = context.get("email")
        if not email:
            return GuardDecision.deny("email is required")
        if self._lookup.exists(self._field, email):
            return GuardDecision.deny("email exists")
        return APPROVED


class PasswordGuard(Guard):
    description = "Password must meet the minimum length"

    def __init__(self, min_length: int = DEFAULT_MIN_PASSWORD_LENGTH) -> None:
        if min_length < 1:
            raise ValueError(f"min_length must be positive, got {min_length}")
        self.min_length = min_length

    def evaluate(self, context: TransitionContext) -> GuardDecision:
        password = context.get("password") or ""
        if len(password) < self.min_length:
            return GuardDecision.deny(
                f"password shorter than {self.min_length} characters"
            )
        return APPROVED


class ReferralGuard(Guard):
    """A referral code is optional; when one is given it must exist."""

    description = "Referral code, if any, must exist"

    def __init__(self, lookup: ExistenceLookup, field: str = "referral_code") -> None:
        self._lookup = lookup
        self._field = field

    def evaluate(self, context: TransitionContext) -> GuardDecision:
        code = context.get("referral_code")
        if not code:
            return APPROVED
        if not self._lookup.exists(self._field, code):
            return GuardDecision.deny(f"referral code {code!r} not found")
        return APPROVED
