"""
Tests for TransitionTable and LifecycleDefinition.

The table is a partial function: at most one rule per (from_state, action),
lookups never raise, and a frozen table refuses new rules.
"""

import pytest

from lifecycle_kernel.domain.lifecycle import LifecycleDefinition, TransitionRule
from lifecycle_kernel.domain.transition_table import ALL_ACTIONS, TransitionTable
from lifecycle_kernel.exceptions import (
    ConfigurationError,
    ConfigurationFrozenError,
    DuplicateTransitionError,
    InvalidInitialStateError,
    ReservedActionError,
    UnknownStateError,
)

STATES = ("draft", "moderation", "published")


def _table(*rules: tuple[str, str, str]) -> TransitionTable:
    table = TransitionTable("article", STATES)
    for from_state, action, to_state in rules:
        table.register(from_state, action, to_state)
    return table


class TestLookup:

    def test_registered_move_returns_target(self):
        table = _table(("draft", "submit-for-review", "moderation"))
        assert table.allowed_transition("draft", "submit-for-review") == "moderation"

    def test_missing_move_returns_none(self):
        table = _table(("draft", "submit-for-review", "moderation"))
        assert table.allowed_transition("draft", "publish") is None

    def test_same_action_from_other_state_is_not_legal(self):
        table = _table(("moderation", "publish", "published"))
        assert table.allowed_transition("published", "publish") is None
        assert table.allowed_transition("draft", "publish") is None

    def test_unknown_state_lookup_does_not_raise(self):
        table = _table(("draft", "submit-for-review", "moderation"))
        assert table.allowed_transition("archived", "submit-for-review") is None

    def test_one_action_from_several_states(self):
        table = _table(
            ("moderation", "revert-to-draft", "draft"),
            ("published", "revert-to-draft", "draft"),
        )
        assert table.allowed_transition("moderation", "revert-to-draft") == "draft"
        assert table.allowed_transition("published", "revert-to-draft") == "draft"
        assert table.actions == ("revert-to-draft",)

    def test_actions_from_and_terminal(self):
        table = _table(
            ("draft", "submit-for-review", "moderation"),
            ("moderation", "publish", "published"),
        )
        assert table.actions_from("draft") == ("submit-for-review",)
        assert table.is_terminal("published")
        assert table.terminal_states == ("published",)

    def test_contains_and_len(self):
        table = _table(("draft", "submit-for-review", "moderation"))
        assert ("draft", "submit-for-review") in table
        assert ("draft", "publish") not in table
        assert len(table) == 1


class TestConfiguration:

    def test_duplicate_key_rejected(self):
        table = _table(("draft", "submit-for-review", "moderation"))
        with pytest.raises(DuplicateTransitionError) as exc_info:
            table.register("draft", "submit-for-review", "published")
        err = exc_info.value
        assert err.existing_to_state == "moderation"
        assert err.new_to_state == "published"
        assert err.code == "DUPLICATE_TRANSITION"

    def test_identical_duplicate_also_rejected(self):
        table = _table(("draft", "submit-for-review", "moderation"))
        with pytest.raises(DuplicateTransitionError):
            table.register("draft", "submit-for-review", "moderation")

    def test_duplicate_leaves_first_rule_in_place(self):
        table = _table(("draft", "submit-for-review", "moderation"))
        with pytest.raises(DuplicateTransitionError):
            table.register("draft", "submit-for-review", "published")
        assert table.allowed_transition("draft", "submit-for-review") == "moderation"

    @pytest.mark.parametrize(
        "rule",
        [
            ("archived", "publish", "published"),
            ("draft", "archive", "archived"),
        ],
    )
    def test_undeclared_state_rejected(self, rule):
        with pytest.raises(UnknownStateError):
            _table(rule)

    def test_frozen_table_refuses_rules(self):
        table = _table(("draft", "submit-for-review", "moderation"))
        table.freeze()
        assert table.frozen
        with pytest.raises(ConfigurationFrozenError):
            table.register("moderation", "publish", "published")

    def test_kind_wide_key_is_not_an_action(self):
        with pytest.raises(ReservedActionError) as exc_info:
            _table(("draft", ALL_ACTIONS, "moderation"))
        assert exc_info.value.action == "*"

    def test_errors_are_configuration_errors(self):
        assert issubclass(DuplicateTransitionError, ConfigurationError)
        assert issubclass(ReservedActionError, ConfigurationError)
        assert issubclass(ConfigurationFrozenError, ConfigurationError)


class TestLifecycleDefinition:

    def test_from_definition(self, doc_definition):
        table = TransitionTable.from_definition(doc_definition)
        assert table.entity_kind == "doc"
        assert len(table) == len(doc_definition.rules)

    def test_initial_state_must_be_declared(self):
        with pytest.raises(InvalidInitialStateError):
            LifecycleDefinition("doc", "archived", STATES, ())

    def test_empty_initial_state_rejected(self):
        with pytest.raises(InvalidInitialStateError):
            LifecycleDefinition("doc", "", STATES, ())

    def test_rule_states_must_be_declared(self):
        with pytest.raises(UnknownStateError):
            LifecycleDefinition(
                "doc", "draft", STATES, (TransitionRule("draft", "archive", "archived"),)
            )

    def test_duplicate_keys_in_definition_fail_on_load(self):
        definition = LifecycleDefinition(
            "doc",
            "draft",
            STATES,
            (
                TransitionRule("draft", "submit-for-review", "moderation"),
                TransitionRule("draft", "submit-for-review", "published"),
            ),
        )
        with pytest.raises(DuplicateTransitionError):
            TransitionTable.from_definition(definition)

    def test_terminal_states_and_actions(self, doc_definition):
        assert doc_definition.terminal_states == ()
        assert doc_definition.actions == (
            "submit-for-review",
            "publish",
            "revert-to-draft",
        )
