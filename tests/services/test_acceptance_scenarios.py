"""
Acceptance scenarios for the lifecycle engine.

A: legal move, empty chain          -> committed
B: no rule for (state, action)      -> structurally illegal
C: first guard denies               -> guard denied, later guards not run
D: action has guards, but no rule from the current state -> structurally illegal
"""

from lifecycle_kernel.domain.guards import Guard, GuardDecision
from lifecycle_kernel.domain.lifecycle import LifecycleDefinition, TransitionRule
from lifecycle_kernel.domain.results import RejectKind
from lifecycle_kernel.services.lifecycle_engine import LifecycleEngine
from lifecycle_kernel.services.registry import LifecycleRegistry


class Recording(Guard):
    def __init__(self, name, deny_with=None):
        self.name = name
        self.deny_with = deny_with
        self.calls = 0

    def evaluate(self, context):
        self.calls += 1
        if self.deny_with:
            return GuardDecision.deny(self.deny_with)
        return True


def _engine(*rules):
    registry = LifecycleRegistry()
    registry.register_definition(
        LifecycleDefinition(
            entity_kind="article",
            initial_state="draft",
            states=("draft", "moderation", "published"),
            rules=tuple(TransitionRule(*r) for r in rules),
        )
    )
    return registry, LifecycleEngine(registry)


def test_scenario_a_empty_chain_commits():
    _, engine = _engine(("draft", "submit-for-review", "moderation"))
    entity = engine.create_entity("article")

    result = engine.request_transition(entity, "submit-for-review")

    assert result.success
    assert result.new_state == "moderation"
    assert entity.current_state == "moderation"


def test_scenario_b_missing_rule_is_structurally_illegal():
    _, engine = _engine(("draft", "submit-for-review", "moderation"))
    entity = engine.create_entity("article")

    result = engine.request_transition(entity, "publish")

    assert result.reject_kind is RejectKind.STRUCTURALLY_ILLEGAL
    assert entity.current_state == "draft"


def test_scenario_c_first_denial_short_circuits():
    registry = LifecycleRegistry()
    registry.define_kind("registration", ["pending", "registered"], "pending")
    registry.register_transition("registration", "pending", "register", "registered")
    email = Recording("EmailExistsGuard", deny_with="email exists")
    password = Recording("PasswordGuard")
    referral = Recording("ReferralGuard")
    for guard in (email, password, referral):
        registry.register_guard("registration", "register", guard)
    engine = LifecycleEngine(registry)
    entity = engine.create_entity("registration")

    result = engine.request_transition(entity, "register")

    assert result.reject_kind is RejectKind.GUARD_DENIED
    assert (result.reason, result.failing_guard) == ("email exists", "EmailExistsGuard")
    assert (password.calls, referral.calls) == (0, 0)
    assert entity.current_state == "pending"


def test_scenario_d_guards_elsewhere_do_not_make_a_move_legal():
    registry, engine = _engine(
        ("draft", "moderation", "moderation"),
        ("moderation", "publish", "published"),
    )
    guard = Recording("ModerationGuard")
    registry.register_guard("article", "moderation", guard)
    entity = engine.create_entity("article", initial_state="published")

    result = engine.request_transition(entity, "moderation")

    assert result.reject_kind is RejectKind.STRUCTURALLY_ILLEGAL
    assert guard.calls == 0
    assert entity.current_state == "published"
