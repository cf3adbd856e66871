"""Hand evaluation and settlement for blackjack."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from core.cards import ACE_VALUE, Card
from core.errors import InvalidHandError


def add_card_value(total: int, is_soft: bool, value: int) -> tuple[int, bool]:
    """
    Add one card to a running total.

    Args:
        total: Current best total
        is_soft: Whether an Ace in the total is still counted as 11
        value: Point value of the new card (Ace = 11)

    Returns:
        Tuple of (new total, new softness)
    """
    soft_aces = 1 if is_soft else 0
    total += value
    if value == ACE_VALUE:
        soft_aces += 1
    while total > 21 and soft_aces:
        total -= 10
        soft_aces -= 1
    return total, soft_aces > 0


def hand_total(cards: Iterable[Card]) -> tuple[int, bool]:
    """
    Best total of a list of cards and whether it is soft.

    Aces count 11 and are reduced to 1 one at a time while the total is over 21.
    """
    total = 0
    soft_aces = 0
    for card in cards:
        if not isinstance(card, Card):
            raise InvalidHandError(f"Not a card: {card!r}")
        total += card.value
        if card.is_ace:
            soft_aces += 1

    while total > 21 and soft_aces:
        total -= 10
        soft_aces -= 1

    return total, soft_aces > 0


@dataclass
class Hand:
    """A blackjack hand plus the split/double history that constrains it."""

    cards: list[Card] = field(default_factory=list)
    is_doubled: bool = False
    is_split_hand: bool = False
    is_split_aces: bool = False
    is_surrendered: bool = False
    # Hands in play from the original deal once this one exists.
    split_hands: int = 1

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        if not isinstance(card, Card):
            raise InvalidHandError(f"Not a card: {card!r}")
        self.cards.append(card)

    def split(self) -> tuple["Hand", "Hand"]:
        """
        Split a pair into two one-card hands.

        Returns:
            The two new hands; each counts the extra hand toward the split cap.

        Raises:
            InvalidHandError: If the hand is not a two-card pair.
        """
        if not self.is_pair:
            raise InvalidHandError("Only a two-card pair can be split")
        hands = self.split_hands + 1
        aces = self.cards[0].is_ace
        return tuple(
            Hand(cards=[card], is_split_hand=True, is_split_aces=aces, split_hands=hands)
            for card in self.cards
        )

    def validate(self) -> None:
        """Raise InvalidHandError unless the hand holds at least one card."""
        if not self.cards:
            raise InvalidHandError("Hand has no cards")
        hand_total(self.cards)

    @property
    def total(self) -> tuple[int, bool]:
        """Best total and softness."""
        return hand_total(self.cards)

    @property
    def value(self) -> int:
        return hand_total(self.cards)[0]

    @property
    def is_soft(self) -> bool:
        """True when an Ace is still counted as 11."""
        return hand_total(self.cards)[1]

    @property
    def is_natural(self) -> bool:
        """Two-card 21 that did not come from a split."""
        return len(self.cards) == 2 and self.value == 21 and not self.is_split_hand

    @property
    def is_busted(self) -> bool:
        return self.value > 21

    @property
    def is_pair(self) -> bool:
        """Two cards of equal point value (K-10 is a pair for splitting)."""
        return len(self.cards) == 2 and self.cards[0].value == self.cards[1].value

    @property
    def up_card(self) -> Card:
        """First card; for a dealer hand this is the exposed card."""
        if not self.cards:
            raise InvalidHandError("Hand has no cards")
        return self.cards[0]

    @property
    def num_cards(self) -> int:
        return len(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        total, soft = self.total
        if self.is_natural:
            label = "BLACKJACK"
        elif total > 21:
            label = "BUST"
        elif soft:
            label = f"soft {total}"
        else:
            label = str(total)
        return f"{cards_str} ({label})"

    @classmethod
    def of(cls, *cards: Card, **flags) -> "Hand":
        """Build a hand from cards, e.g. ``Hand.of(Card(Rank.TEN), Card(Rank.SIX))``."""
        return cls(cards=list(cards), **flags)


class HandResult(Enum):
    """Settled outcome of one player hand."""

    WIN = "win"
    LOSE = "lose"
    PUSH = "push"
    BLACKJACK = "blackjack"
    SURRENDER = "surrender"


def get_hand_result(player: Hand, dealer: Hand) -> HandResult:
    """
    Settle a finished player hand against the dealer's final hand.

    A natural beats any non-natural 21; a split 21 is an ordinary win.
    """
    player.validate()
    dealer.validate()

    if player.is_surrendered:
        return HandResult.SURRENDER
    if player.is_busted:
        return HandResult.LOSE

    player_bj = player.is_natural
    dealer_bj = dealer.is_natural
    if player_bj and dealer_bj:
        return HandResult.PUSH
    if player_bj:
        return HandResult.BLACKJACK
    if dealer_bj:
        return HandResult.LOSE

    if dealer.is_busted:
        return HandResult.WIN

    player_value = player.value
    dealer_value = dealer.value
    if player_value > dealer_value:
        return HandResult.WIN
    if player_value < dealer_value:
        return HandResult.LOSE
    return HandResult.PUSH


def payoff(result: HandResult, blackjack_payout: float = 1.5, doubled: bool = False) -> float:
    """Net result in units of the original bet."""
    if result is HandResult.BLACKJACK:
        return blackjack_payout
    if result is HandResult.SURRENDER:
        return -0.5
    stake = 2.0 if doubled else 1.0
    if result is HandResult.WIN:
        return stake
    if result is HandResult.LOSE:
        return -stake
    return 0.0
