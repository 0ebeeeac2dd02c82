"""Registration entity."""

from __future__ import annotations

from lifecycle_kernel.domain.entity import LifecycleEntity
from lifecycle_kernel.domain.results import TransitionResult
from lifecycle_modules.registration.workflows import (
    DEACTIVATE,
    PENDING,
    REGISTER,
    REGISTRATION_KIND,
    REJECT,
)


class Registration(LifecycleEntity):
    """A request to open an account.

    The password is never stored on the entity; it is only passed through
    the ``register`` transition payload for the guards to check.
    """

    def __init__(
        self,
        email: str,
        referral_code: str | None = None,
        entity_id: str | None = None,
        initial_state: str = PENDING,
    ) -> None:
        super().__init__(REGISTRATION_KIND, initial_state, entity_id=entity_id)
        self.email = email
        self.referral_code = referral_code

    def register(self, password: str) -> TransitionResult:
        return self.request_transition(
            REGISTER,
            {
                "email": self.email,
                "password": password,
                "referral_code": self.referral_code,
            },
        )

    def reject(self, reason: str = "", actor_id: str | None = None) -> TransitionResult:
        return self.request_transition(REJECT, {"reason": reason}, actor_id=actor_id)

    def deactivate(self, actor_id: str | None = None) -> TransitionResult:
        return self.request_transition(DEACTIVATE, actor_id=actor_id)
