"""
Registration module: guard chain on ``register`` and the lifecycle around it.

The chain is [EmailExistsGuard, PasswordGuard, ReferralGuard].  A taken
email stops the chain before the password or referral checks run.
"""

import pytest

from lifecycle_kernel.db.lookup import InMemoryLookup
from lifecycle_kernel.domain.context import TransitionContext
from lifecycle_kernel.domain.guards import Guard
from lifecycle_kernel.services.lifecycle_engine import LifecycleEngine
from lifecycle_modules.registration import (
    DEACTIVATED,
    PENDING,
    REGISTER,
    REGISTERED,
    REJECTED,
    EmailExistsGuard,
    PasswordGuard,
    ReferralGuard,
    Registration,
)
from lifecycle_modules.wiring import build_default_engine, build_default_registry

GOOD_PASSWORD = "correct-horse"


def _ctx(**payload) -> TransitionContext:
    return TransitionContext("registration", "reg-1", REGISTER, payload=payload)


class CallCounter(Guard):
    """Wraps a guard and counts evaluations, keeping the wrapped name."""

    def __init__(self, inner: Guard):
        self.inner = inner
        self.name = inner.name
        self.calls = 0

    def evaluate(self, context):
        self.calls += 1
        return self.inner.evaluate(context)


class TestGuardChainOrder:

    def test_default_chain_order(self, registry):
        assert registry.guard_chain("registration", REGISTER).names == (
            "EmailExistsGuard",
            "PasswordGuard",
            "ReferralGuard",
        )

    def test_taken_email_short_circuits(self, registry, lookup, deterministic_clock):
        chain = registry.guard_chain("registration", REGISTER)
        for name in list(chain.names):
            counted = CallCounter(chain.remove(name))
            chain.add(counted)
        counters = {g.name: g for g in chain}
        engine = LifecycleEngine(registry, clock=deterministic_clock)
        registration = engine.bind(Registration("taken@example.com", referral_code="bogus"))

        result = registration.register("x")

        assert result.is_guard_denied
        assert result.reason == "email exists"
        assert result.failing_guard == "EmailExistsGuard"
        assert counters["EmailExistsGuard"].calls == 1
        assert counters["PasswordGuard"].calls == 0
        assert counters["ReferralGuard"].calls == 0
        assert registration.current_state == PENDING

    def test_reordering_changes_first_failure(self, registry, engine):
        registry.move_guard("registration", REGISTER, "PasswordGuard", 0)
        registration = engine.bind(Registration("taken@example.com"))

        result = registration.register("short")
        assert result.failing_guard == "PasswordGuard"


class TestRegistrationLifecycle:

    def test_register_new_user(self, engine):
        registration = engine.bind(Registration("new@example.com"))
        result = registration.register(GOOD_PASSWORD)

        assert result.success
        assert registration.current_state == REGISTERED

    def test_valid_referral(self, engine):
        registration = engine.bind(Registration("new@example.com", referral_code="FRIEND-2024"))
        assert registration.register(GOOD_PASSWORD).success

    def test_unknown_referral(self, engine):
        registration = engine.bind(Registration("new@example.com", referral_code="NOPE"))
        result = registration.register(GOOD_PASSWORD)

        assert result.failing_guard == "ReferralGuard"
        assert "NOPE" in result.reason

    def test_short_password(self, engine):
        result = engine.bind(Registration("new@example.com")).register("short")
        assert result.failing_guard == "PasswordGuard"

    def test_reject_then_terminal(self, engine):
        registration = engine.bind(Registration("new@example.com"))
        assert registration.reject("spam").success
        assert registration.current_state == REJECTED
        assert registration.register(GOOD_PASSWORD).is_structurally_illegal
        assert engine.allowed_actions(registration) == ()

    def test_deactivate_only_after_register(self, engine):
        registration = engine.bind(Registration("new@example.com"))
        assert registration.deactivate().is_structurally_illegal
        registration.register(GOOD_PASSWORD)
        assert registration.deactivate().success
        assert registration.current_state == DEACTIVATED

    def test_register_twice_is_structurally_illegal(self, engine):
        registration = engine.bind(Registration("new@example.com"))
        registration.register(GOOD_PASSWORD)
        assert registration.register(GOOD_PASSWORD).is_structurally_illegal

    def test_build_default_engine(self, lookup):
        engine = build_default_engine(lookup, serialize_evaluation=True)
        assert engine.serialize_evaluation
        assert set(engine.registry.kinds) == {"article", "registration"}


class TestGuardsInIsolation:

    def test_email_guard(self, lookup):
        guard = EmailExistsGuard(lookup)
        assert not guard.evaluate(_ctx(email="taken@example.com")).approved
        assert guard.evaluate(_ctx(email="free@example.com")).approved
        assert guard.evaluate(_ctx()).reason == "email is required"

    @pytest.mark.parametrize(
        "password, approved",
        [("", False), (None, False), ("1234567", False), ("12345678", True)],
    )
    def test_password_guard_default_length(self, password, approved):
        assert PasswordGuard().evaluate(_ctx(password=password)).approved is approved

    def test_password_guard_custom_length(self):
        assert PasswordGuard(min_length=3).evaluate(_ctx(password="abc")).approved

    def test_password_guard_rejects_bad_config(self):
        with pytest.raises(ValueError):
            PasswordGuard(min_length=0)

    def test_referral_guard_optional(self):
        lookup = InMemoryLookup({"referral_code": []})
        assert ReferralGuard(lookup).evaluate(_ctx()).approved
        assert ReferralGuard(lookup).evaluate(_ctx(referral_code=None)).approved
        assert not ReferralGuard(lookup).evaluate(_ctx(referral_code="X")).approved

    def test_lookup_failure_is_a_denial(self, deterministic_clock):
        """A lookup missing the email field raises; the chain turns it into a denial."""
        engine = LifecycleEngine(
            build_default_registry(InMemoryLookup({"referral_code": []})),
            clock=deterministic_clock,
        )
        result = engine.bind(Registration("a@example.com")).register(GOOD_PASSWORD)

        assert result.is_guard_denied
        assert result.failing_guard == "EmailExistsGuard"
        assert "UnknownLookupFieldError" in result.reason
