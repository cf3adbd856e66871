"""Tests for dealer outcome distributions."""

import pytest

from core.cards import CARD_VALUES, Card, Rank
from core.errors import InvalidCompositionError
from core.rules import HouseRules
from core.shoe import Composition
from core.statistics.probability import (
    DealerOutcome,
    DealerOutcomeCalculator,
    DealerProbabilities,
    dealer_distribution,
)

S17 = HouseRules(num_decks=8, dealer_hits_soft_17=False)
H17 = HouseRules(num_decks=8, dealer_hits_soft_17=True)


def _shoe_without(num_decks, *values):
    composition = Composition.full(num_decks)
    for value in values:
        composition.draw(value)
    return composition


def _only(value, count):
    counts = [0] * len(CARD_VALUES)
    counts[CARD_VALUES.index(value)] = count
    return Composition(counts)


class TestDealerDistribution:
    """Tests for dealer_distribution."""

    @pytest.mark.parametrize("up_value", CARD_VALUES)
    @pytest.mark.parametrize("rules", [S17, H17], ids=["S17", "H17"])
    def test_sums_to_one(self, up_value, rules):
        probs = dealer_distribution(up_value, _shoe_without(1, up_value), rules)
        assert probs.total == pytest.approx(1.0, abs=1e-9)
        assert all(p >= 0.0 for p in probs.to_dict().values())

    def test_ace_blackjack_mass_is_ten_density(self):
        composition = _shoe_without(1, 11)
        probs = dealer_distribution(11, composition, S17)
        assert probs.blackjack == pytest.approx(16 / 51)

    def test_ten_blackjack_mass_is_ace_density(self):
        composition = _shoe_without(2, 10, 11)
        probs = dealer_distribution(Card(Rank.KING), composition, S17)
        assert probs.blackjack == pytest.approx(7 / 102)

    @pytest.mark.parametrize("up_value", range(2, 10))
    def test_no_blackjack_for_small_up_cards(self, up_value):
        probs = dealer_distribution(up_value, _shoe_without(1, up_value), S17)
        assert probs.blackjack == 0.0

    def test_close_to_infinite_deck_tables(self):
        """Eight decks is close to the published infinite-deck figures."""
        six = dealer_distribution(6, _shoe_without(8, 6), S17)
        ten = dealer_distribution(10, _shoe_without(8, 10), S17)
        assert six.bust == pytest.approx(0.4234, abs=0.01)
        assert ten.bust == pytest.approx(0.2122, abs=0.01)
        assert ten.twenty == pytest.approx(0.3396, abs=0.01)

    def test_h17_hits_soft_17(self):
        """Hitting soft 17 trades 17s for busts and higher totals."""
        s17 = dealer_distribution(6, _shoe_without(8, 6), S17)
        h17 = dealer_distribution(6, _shoe_without(8, 6), H17)
        assert h17.seventeen < s17.seventeen
        assert h17.bust > s17.bust

    def test_forced_outcome(self):
        """With only tens left, a 7 up-card always makes 17."""
        probs = dealer_distribution(7, _only(10, 20), S17)
        assert probs.seventeen == pytest.approx(1.0)

    def test_composition_is_not_modified(self):
        composition = _shoe_without(1, 5)
        before = composition.signature()
        dealer_distribution(5, composition, S17)
        assert composition.signature() == before

    def test_repeat_calls_agree(self):
        """Nothing carries over between calls."""
        first = dealer_distribution(6, _shoe_without(2, 6), H17)
        other = dealer_distribution(6, _shoe_without(2, 6), S17)
        second = dealer_distribution(6, _shoe_without(2, 6), H17)
        assert first == second
        assert first != other

    def test_exhausted_shoe_raises(self):
        with pytest.raises(InvalidCompositionError):
            dealer_distribution(2, _only(2, 1), S17)

    def test_empty_shoe_raises(self):
        with pytest.raises(InvalidCompositionError):
            dealer_distribution(2, _only(2, 0), S17)


class TestDealerOutcomeCalculator:
    """Tests for the memoising calculator."""

    def test_memo_is_per_instance(self):
        first = DealerOutcomeCalculator(S17)
        second = DealerOutcomeCalculator(S17)
        first.distribution(4, _shoe_without(1, 4))
        assert first._memo
        assert not second._memo


class TestDealerProbabilities:
    """Tests for the DealerProbabilities value object."""

    def test_must_sum_to_one(self):
        with pytest.raises(InvalidCompositionError):
            DealerProbabilities(10, 0.5, 0.1, 0.1, 0.1, 0.1, 0.0)

    def test_without_blackjack_renormalises(self):
        probs = dealer_distribution(11, _shoe_without(6, 11), S17)
        conditioned = probs.without_blackjack()
        assert conditioned.blackjack == 0.0
        assert conditioned.total == pytest.approx(1.0)
        assert conditioned.bust / conditioned.twenty == pytest.approx(probs.bust / probs.twenty)

    def test_without_blackjack_is_identity_when_impossible(self):
        probs = dealer_distribution(5, _shoe_without(6, 5), S17)
        assert probs.without_blackjack() is probs

    def test_certain_blackjack_cannot_be_conditioned(self):
        probs = dealer_distribution(11, _only(10, 10), S17)
        assert probs.blackjack == pytest.approx(1.0)
        with pytest.raises(InvalidCompositionError):
            probs.without_blackjack()

    def test_to_dict(self):
        probs = dealer_distribution(9, _shoe_without(1, 9), S17)
        outcomes = probs.to_dict()
        assert set(outcomes) == set(DealerOutcome)
        assert outcomes[DealerOutcome.NINETEEN] == probs.nineteen
