"""Composition-dependent expected value of every player action."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from core.cards import ACE_VALUE
from core.errors import InvalidCompositionError
from core.hand import Hand, add_card_value
from core.rules import DEFAULT_HOUSE_RULES, HouseRules
from core.shoe import Composition
from core.statistics.probability import DealerOutcomeCalculator, DealerProbabilities

SURRENDER_EV = -0.5


class Action(Enum):
    """Player actions, in tie-break order."""

    STAND = "stand"
    HIT = "hit"
    DOUBLE = "double"
    SPLIT = "split"
    SURRENDER = "surrender"
    # Decline early surrender and play on, with the dealer blackjack risk folded in.
    CONTINUE = "continue"

    def __str__(self) -> str:
        return self.value


PLAY_ACTIONS = (Action.STAND, Action.HIT, Action.DOUBLE, Action.SPLIT)


@dataclass(frozen=True)
class ActionEV:
    """Expected value of one action, per unit of the original bet."""

    action: Action
    ev: float
    is_available: bool = True


@dataclass(frozen=True)
class HandState:
    """Everything about a player hand that affects its decision."""

    total: int
    is_soft: bool
    num_cards: int = 2
    pair_value: int | None = None
    is_natural: bool = False
    is_split_hand: bool = False
    is_split_aces: bool = False
    split_hands: int = 1

    @classmethod
    def from_hand(cls, hand: Hand) -> "HandState":
        total, is_soft = hand.total
        return cls(
            total=total,
            is_soft=is_soft,
            num_cards=len(hand.cards),
            pair_value=hand.cards[0].value if hand.is_pair else None,
            is_natural=hand.is_natural,
            is_split_hand=hand.is_split_hand,
            is_split_aces=hand.is_split_aces,
            split_hands=hand.split_hands,
        )

    @classmethod
    def initial(cls, first: int, second: int) -> "HandState":
        """Two-card starting hand from card values."""
        total, is_soft = add_card_value(*add_card_value(0, False, first), second)
        return cls(
            total=total,
            is_soft=is_soft,
            pair_value=first if first == second else None,
            is_natural=total == 21,
        )


class ActionEVCalculator:
    """
    Expectimax over the remaining shoe for one dealer up-card.

    The dealer distribution is fixed for the life of the calculator; the
    composition is walked with draw/replace as the player draws. Hit and split
    results are cached with the composition in the key. One calculator serves one
    top-level computation and is then discarded.
    """

    def __init__(
        self,
        rules: HouseRules,
        dealer: DealerProbabilities,
        composition: Composition,
        max_split_hands: int | None = None,
    ) -> None:
        """
        Args:
            rules: House rules
            dealer: Dealer outcome distribution, usually conditioned on no blackjack
            composition: Shoe after every committed card; walked in place
            max_split_hands: Tighter split cap than the rules allow, if any
        """
        self.rules = rules
        self.dealer = dealer
        self.composition = composition
        self.max_split_hands = rules.max_split_hands
        if max_split_hands is not None:
            self.max_split_hands = min(max_split_hands, rules.max_split_hands)

        finals = dealer.final_totals
        self._stand_evs = {}
        for total in range(2, 22):
            win = dealer.bust + sum(p for t, p in finals.items() if t < total)
            lose = dealer.blackjack + sum(p for t, p in finals.items() if t > total)
            self._stand_evs[total] = win - lose
        self._hit_memo: dict[tuple, float] = {}
        self._split_memo: dict[tuple, float] = {}

    def stand(self, total: int) -> float:
        if total > 21:
            return -1.0
        return self._stand_evs[total]

    def hit(self, total: int, is_soft: bool) -> float:
        """EV of taking a card and then playing stand/hit optimally."""
        if total > 21:
            return -1.0

        composition = self.composition
        key = (total, is_soft, composition.signature())
        cached = self._hit_memo.get(key)
        if cached is not None:
            return cached

        remaining = composition.total
        if not remaining:
            raise InvalidCompositionError("Shoe exhausted while the player was drawing")

        ev = 0.0
        for value, count in composition.nonzero():
            p = count / remaining
            new_total, new_soft = add_card_value(total, is_soft, value)
            if new_total > 21:
                ev -= p
                continue
            if new_total == 21:
                # Nothing beats standing on 21.
                ev += p * self.stand(21)
                continue
            composition.draw(value)
            ev += p * max(self.stand(new_total), self.hit(new_total, new_soft))
            composition.replace(value)

        self._hit_memo[key] = ev
        return ev

    def double(self, total: int, is_soft: bool) -> float:
        """EV of doubling: exactly one more card, then stand, at twice the stake."""
        composition = self.composition
        remaining = composition.total
        if not remaining:
            raise InvalidCompositionError("Shoe exhausted while the player was drawing")

        ev = 0.0
        for value, count in composition.nonzero():
            new_total, _ = add_card_value(total, is_soft, value)
            ev += count / remaining * self.stand(new_total)
        return 2.0 * ev

    def play(self, total: int, is_soft: bool, can_double: bool) -> float:
        """Best of stand, hit and (when allowed) double."""
        best = max(self.stand(total), self.hit(total, is_soft))
        if can_double:
            best = max(best, self.double(total, is_soft))
        return best

    def split(self, pair_value: int, split_hands: int = 1) -> float:
        """
        EV of splitting a pair, for all resulting hands together.

        Resplits share one budget: once ``max_split_hands`` hands exist, no
        hand in the group may split again.

        Args:
            pair_value: Point value of each pair card
            split_hands: Hands in play before this split
        """
        spare = max(self.max_split_hands - (split_hands + 1), 0)
        return self._split_hands_ev(pair_value, 2, spare)

    def _split_hands_ev(self, pair_value: int, pending: int, spare: int) -> float:
        """
        Total EV of ``pending`` hands each holding one pair card.

        ``spare`` is how many more hands resplitting may still create. Hands
        are dealt in turn; a later hand sees the shoe as it stood before the
        earlier hand's second card.
        """
        if not pending:
            return 0.0

        composition = self.composition
        key = (pair_value, pending, spare, composition.signature())
        cached = self._split_memo.get(key)
        if cached is not None:
            return cached

        remaining = composition.total
        if not remaining:
            raise InvalidCompositionError("Shoe exhausted while dealing to a split hand")

        rules = self.rules
        is_aces = pair_value == ACE_VALUE
        one_card_only = is_aces and not rules.hit_split_aces
        may_resplit = spare > 0 and (not is_aces or rules.resplit_aces)
        rest_ev = self._split_hands_ev(pair_value, pending - 1, spare)

        ev = 0.0
        for value, count in composition.nonzero():
            p = count / remaining
            total, is_soft = add_card_value(pair_value, is_aces, value)
            composition.draw(value)
            if one_card_only:
                hand_ev = self.stand(total)
            else:
                can_double = (
                    rules.double_after_split
                    and not is_aces
                    and rules.can_double_total(total)
                )
                hand_ev = self.play(total, is_soft, can_double)
            outcome = hand_ev + rest_ev
            if may_resplit and value == pair_value:
                # The drawn card starts a new hand; this one waits for another card.
                outcome = max(outcome, self._split_hands_ev(pair_value, pending + 1, spare - 1))
            composition.replace(value)
            ev += p * outcome

        self._split_memo[key] = ev
        return ev

    def action_evs(
        self,
        state: HandState,
        up_value: int,
        blackjack_probability: float = 0.0,
        allow_continue: bool = False,
    ) -> list[ActionEV]:
        """
        EV and availability of every action for one decision.

        Args:
            state: The player's hand
            up_value: Dealer up-card value, for the surrender window
            blackjack_probability: Chance the dealer holds blackjack, used by continue
            allow_continue: Report the play-on value of declining early surrender

        Returns:
            ActionEV entries in Action order
        """
        rules = self.rules
        total, is_soft = state.total, state.is_soft
        two_cards = state.num_cards == 2

        stand_ev = rules.blackjack_payout if state.is_natural else self.stand(total)
        can_hit = not (state.is_split_aces and not rules.hit_split_aces)
        can_double = (
            two_cards
            and not state.is_split_aces
            and (not state.is_split_hand or rules.double_after_split)
            and rules.can_double_total(total)
        )

        split_ev = 0.0
        can_split = False
        if state.pair_value is not None and two_cards:
            split_ev = self.split(state.pair_value, state.split_hands)
            can_split = state.split_hands < self.max_split_hands and (
                not state.is_split_aces or rules.resplit_aces
            )

        can_surrender = (
            two_cards
            and not state.is_split_hand
            and rules.can_surrender_against(up_value)
        )

        entries = [
            ActionEV(Action.STAND, stand_ev, True),
            ActionEV(Action.HIT, self.hit(total, is_soft), can_hit),
            ActionEV(Action.DOUBLE, self.double(total, is_soft), can_double),
            ActionEV(Action.SPLIT, split_ev, can_split),
            ActionEV(Action.SURRENDER, SURRENDER_EV, can_surrender),
        ]

        if allow_continue and rules.is_early_surrender and two_cards and not state.is_split_hand:
            best = max(entry.ev for entry in entries if entry.is_available and entry.action in PLAY_ACTIONS)
            loss = 0.0 if state.is_natural else -1.0
            continue_ev = blackjack_probability * loss + (1.0 - blackjack_probability) * best
            entries.append(ActionEV(Action.CONTINUE, continue_ev, True))

        return entries


def compute_action_evs(
    player_hand: Hand,
    dealer_hand: Hand,
    rules: HouseRules = DEFAULT_HOUSE_RULES,
    allow_continue: bool = False,
) -> list[ActionEV]:
    """
    Exact EV of each action for a player hand against the dealer's up-card.

    Stand, hit, double and split are valued given that the dealer does not
    hold blackjack. With ``allow_continue`` and early-timed surrender, a
    CONTINUE entry carries the unconditional value of playing on.

    Args:
        player_hand: The hand facing the decision
        dealer_hand: Dealer hand; only its first card (the up-card) is used
        rules: House rules
        allow_continue: Whether to add the CONTINUE entry

    Returns:
        ActionEV entries in Action order

    Raises:
        InvalidHandError: If either hand is empty or malformed
        InvalidCompositionError: If the cards cannot come from the shoe
    """
    player_hand.validate()
    dealer_hand.validate()
    up_card = dealer_hand.up_card

    composition = Composition.after_dealing(rules.num_decks, [*player_hand.cards, up_card])
    dealer = DealerOutcomeCalculator(rules).distribution(up_card.value, composition)
    calculator = ActionEVCalculator(rules, dealer.without_blackjack(), composition)
    return calculator.action_evs(
        HandState.from_hand(player_hand),
        up_card.value,
        blackjack_probability=dealer.blackjack,
        allow_continue=allow_continue,
    )


def select_action(action_evs: Iterable[ActionEV], allow_surrender: bool = True) -> ActionEV:
    """
    Pick the EV-maximising entry.

    Play actions tie-break in Action order. Surrender wins only when it beats
    CONTINUE if that entry is present (early timing), else the best play.
    CONTINUE itself is never returned.
    """
    available = {entry.action: entry for entry in action_evs if entry.is_available}
    plays = [available[action] for action in PLAY_ACTIONS if action in available]
    best_play = max(plays, key=lambda entry: entry.ev)

    surrender = available.get(Action.SURRENDER)
    if not allow_surrender or surrender is None:
        return best_play

    baseline = available.get(Action.CONTINUE, best_play)
    if surrender.ev > baseline.ev:
        return surrender
    return best_play
