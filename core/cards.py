"""Card ranks, suits and value buckets used by the EV engine."""

from dataclasses import dataclass
from enum import Enum, auto

from core.errors import InvalidHandError

ACE_VALUE = 11
TEN_VALUE = 10

# Engine value buckets, lowest first: 2..9, ten-value, Ace.
CARD_VALUES: tuple[int, ...] = (2, 3, 4, 5, 6, 7, 8, 9, TEN_VALUE, ACE_VALUE)
NUM_VALUES = len(CARD_VALUES)


def value_index(value: int) -> int:
    """Return the composition bucket for a card value (2 -> 0, Ace -> 9)."""
    if value < 2 or value > ACE_VALUE:
        raise InvalidHandError(f"Invalid card value: {value}")
    return value - 2


class Suit(Enum):
    """Card suits. Display only; suits never affect the math."""

    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        return _SUIT_SYMBOLS[self]


_SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}


class Rank(Enum):
    """Card ranks. J/Q/K share the ten bucket but stay distinct for display."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        return _RANK_LABELS[self]

    @property
    def blackjack_value(self) -> int:
        """Point value with the Ace counted high."""
        if self is Rank.ACE:
            return ACE_VALUE
        return min(self.value, TEN_VALUE)

    @property
    def is_ace(self) -> bool:
        return self is Rank.ACE

    @property
    def is_ten_value(self) -> bool:
        return self.blackjack_value == TEN_VALUE

    @classmethod
    def for_value(cls, value: int) -> "Rank":
        """Representative rank for a value bucket (10 -> TEN, 11 -> ACE)."""
        value_index(value)
        if value == ACE_VALUE:
            return cls.ACE
        return cls(value)


_RANK_LABELS = {rank: str(rank.value) for rank in Rank if rank.value <= 10}
_RANK_LABELS.update({Rank.JACK: "J", Rank.QUEEN: "Q", Rank.KING: "K", Rank.ACE: "A"})

_RANK_CODES = {label: rank for rank, label in _RANK_LABELS.items()}
_RANK_CODES["T"] = Rank.TEN

_SUIT_CODES = {
    "C": Suit.CLUBS,
    "D": Suit.DIAMONDS,
    "H": Suit.HEARTS,
    "S": Suit.SPADES,
}
_SUIT_CODES.update({symbol: suit for suit, symbol in _SUIT_SYMBOLS.items()})


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit = Suit.SPADES

    def __post_init__(self) -> None:
        if not isinstance(self.rank, Rank):
            raise InvalidHandError(f"Invalid rank: {self.rank!r}")
        if not isinstance(self.suit, Suit):
            raise InvalidHandError(f"Invalid suit: {self.suit!r}")

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the blackjack point value (Ace = 11)."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @property
    def is_ten_value(self) -> bool:
        return self.rank.is_ten_value

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """
        Parse a card such as 'AS', 'Kh', '10♦' or 'T♣'.

        A bare rank ('A', '7', 'K') is accepted and given the default suit.

        Raises:
            InvalidHandError: If the rank or suit is not recognised.
        """
        s = s.strip().upper()
        if not s:
            raise InvalidHandError("Empty card string")

        if s in _RANK_CODES:
            return cls(_RANK_CODES[s])

        rank_str, suit_str = s[:-1], s[-1]
        if rank_str not in _RANK_CODES:
            raise InvalidHandError(f"Invalid rank: {rank_str}")
        if suit_str not in _SUIT_CODES:
            raise InvalidHandError(f"Invalid suit: {suit_str}")
        return cls(_RANK_CODES[rank_str], _SUIT_CODES[suit_str])

    @classmethod
    def of_value(cls, value: int, suit: Suit = Suit.SPADES) -> "Card":
        """Build a card from its point value (10 gives a TEN, 11 an ACE)."""
        return cls(Rank.for_value(value), suit)


def parse_cards(tokens: str) -> list[Card]:
    """Parse a whitespace-separated list of card strings ('A K', '10h 6s')."""
    return [Card.from_string(token) for token in tokens.split()]
