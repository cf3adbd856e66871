"""Tests for house rules validation and presets."""

from dataclasses import replace

import pytest

from core.errors import InvalidRulesError
from core.rules import DEFAULT_HOUSE_RULES, HouseRules


class TestDefaultRules:
    """The documented defaults."""

    def test_defaults(self):
        rules = DEFAULT_HOUSE_RULES
        assert rules.num_decks == 2
        assert rules.dealer_hits_soft_17
        assert rules.surrender == "none"
        assert rules.double_after_split
        assert rules.double_on == "any"
        assert rules.resplit_aces
        assert rules.blackjack_payout == 1.5
        assert not rules.no_hole_card
        assert rules.max_split_hands == 4

    def test_rules_are_immutable(self):
        with pytest.raises(AttributeError):
            DEFAULT_HOUSE_RULES.num_decks = 6


class TestValidation:
    """Contradictory or out-of-range rules are rejected."""

    @pytest.mark.parametrize("num_decks", [0, 9])
    def test_deck_range(self, num_decks):
        with pytest.raises(InvalidRulesError):
            HouseRules(num_decks=num_decks)

    def test_payout_floor(self):
        with pytest.raises(InvalidRulesError):
            HouseRules(blackjack_payout=0.9)

    @pytest.mark.parametrize("hands", [0, 5])
    def test_split_hands_range(self, hands):
        with pytest.raises(InvalidRulesError):
            HouseRules(max_split_hands=hands)

    @pytest.mark.parametrize("surrender", ["enhcAll", "es10"])
    def test_enhc_surrender_requires_no_hole_card(self, surrender):
        with pytest.raises(InvalidRulesError):
            HouseRules(surrender=surrender)
        assert HouseRules(surrender=surrender, no_hole_card=True).is_early_surrender

    def test_late_surrender_requires_peek(self):
        with pytest.raises(InvalidRulesError):
            HouseRules(surrender="late", no_hole_card=True)

    def test_unknown_values(self):
        with pytest.raises(InvalidRulesError):
            HouseRules(surrender="sometimes")
        with pytest.raises(InvalidRulesError):
            HouseRules(double_on="8-11")

    def test_replace_revalidates(self):
        with pytest.raises(InvalidRulesError):
            replace(DEFAULT_HOUSE_RULES, surrender="es10")

    def test_invalid_rules_error_is_value_error(self):
        with pytest.raises(ValueError):
            HouseRules(num_decks=0)


class TestRuleQueries:
    """Derived rule properties."""

    def test_surrender_timing(self):
        assert not HouseRules(surrender="late").is_early_surrender
        assert HouseRules(surrender="early").is_early_surrender
        assert not HouseRules().is_early_surrender

    def test_surrender_windows(self):
        es10 = HouseRules(surrender="es10", no_hole_card=True)
        assert es10.can_surrender_against(10)
        assert not es10.can_surrender_against(11)
        assert not es10.can_surrender_against(9)

        enhc_all = HouseRules(surrender="enhcAll", no_hole_card=True)
        assert enhc_all.can_surrender_against(11)
        assert enhc_all.can_surrender_against(5)

        assert not HouseRules().can_surrender_against(10)

    @pytest.mark.parametrize(
        "double_on,total,allowed",
        [
            ("any", 5, True),
            ("any", 17, True),
            ("9-11", 9, True),
            ("9-11", 8, False),
            ("10-11", 9, False),
            ("10-11", 11, True),
        ],
    )
    def test_double_restriction(self, double_on, total, allowed):
        assert HouseRules(double_on=double_on).can_double_total(total) is allowed


class TestPresets:
    """Tests for rule presets."""

    def test_vegas_strip(self):
        rules = HouseRules.vegas_strip()
        assert rules.num_decks == 6
        assert not rules.dealer_hits_soft_17
        assert rules.surrender == "late"

    def test_downtown_vegas(self):
        assert HouseRules.downtown_vegas().dealer_hits_soft_17

    def test_single_deck(self):
        rules = HouseRules.single_deck()
        assert rules.num_decks == 1
        assert not rules.double_after_split

    def test_atlantic_city(self):
        assert HouseRules.atlantic_city().num_decks == 8

    def test_european(self):
        rules = HouseRules.european()
        assert rules.no_hole_card
        assert not rules.dealer_peeks
        assert rules.surrender == "enhcAll"
