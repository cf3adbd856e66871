"""Shoe composition: what is left to draw after the committed cards."""

from collections.abc import Iterable, Iterator, Sequence

from core.cards import CARD_VALUES, NUM_VALUES, Card, Rank, value_index
from core.errors import InvalidCompositionError

CARDS_PER_RANK_PER_DECK = 4


def remaining_counts(num_decks: int, dealt_cards: Iterable[Card]) -> dict[Rank, int]:
    """
    Count the cards of each rank still in the shoe.

    Args:
        num_decks: Number of decks the shoe started with
        dealt_cards: Every card already committed (player cards, dealer up-card)

    Returns:
        Mapping of every rank to its remaining count

    Raises:
        InvalidCompositionError: If more copies of a rank were dealt than exist
    """
    if num_decks < 1:
        raise InvalidCompositionError(f"num_decks must be at least 1, got {num_decks}")

    counts = {rank: CARDS_PER_RANK_PER_DECK * num_decks for rank in Rank}
    for card in dealt_cards:
        counts[card.rank] -= 1
        if counts[card.rank] < 0:
            raise InvalidCompositionError(
                f"Too many {card.rank} dealt from a {num_decks}-deck shoe"
            )
    return counts


class Composition:
    """
    Remaining cards bucketed by point value.

    Draw/replace mutate the counts in place so a recursive search can walk the
    tree without copying; ``signature()`` snapshots the state for memo keys.
    """

    __slots__ = ("_counts", "_total")

    def __init__(self, counts: Sequence[int]) -> None:
        if len(counts) != NUM_VALUES:
            raise InvalidCompositionError(
                f"Expected {NUM_VALUES} value counts, got {len(counts)}"
            )
        if any(count < 0 for count in counts):
            raise InvalidCompositionError(f"Negative count in composition: {counts}")
        self._counts = list(counts)
        self._total = sum(self._counts)

    @classmethod
    def full(cls, num_decks: int) -> "Composition":
        """A fresh shoe of ``num_decks`` decks."""
        return cls.from_rank_counts(remaining_counts(num_decks, ()))

    @classmethod
    def from_rank_counts(cls, counts: dict[Rank, int]) -> "Composition":
        buckets = [0] * NUM_VALUES
        for rank, count in counts.items():
            buckets[value_index(rank.blackjack_value)] += count
        return cls(buckets)

    @classmethod
    def after_dealing(cls, num_decks: int, dealt_cards: Iterable[Card]) -> "Composition":
        """The shoe left after ``dealt_cards`` were removed from a fresh one."""
        return cls.from_rank_counts(remaining_counts(num_decks, dealt_cards))

    @property
    def total(self) -> int:
        """Number of cards remaining."""
        return self._total

    def count(self, value: int) -> int:
        return self._counts[value_index(value)]

    def probability(self, value: int) -> float:
        """Chance the next card has the given value."""
        if not self._total:
            return 0.0
        return self._counts[value_index(value)] / self._total

    def nonzero(self) -> list[tuple[int, int]]:
        """Snapshot of ``(value, count)`` pairs that can still be drawn."""
        return [
            (value, count)
            for value, count in zip(CARD_VALUES, self._counts)
            if count
        ]

    def draw(self, value: int) -> None:
        """Remove one card of ``value``."""
        index = value_index(value)
        if not self._counts[index]:
            raise InvalidCompositionError(f"No cards of value {value} left to draw")
        self._counts[index] -= 1
        self._total -= 1

    def replace(self, value: int) -> None:
        """Undo a previous ``draw(value)``."""
        self._counts[value_index(value)] += 1
        self._total += 1

    def signature(self) -> tuple[int, ...]:
        return tuple(self._counts)

    def copy(self) -> "Composition":
        return Composition(self._counts)

    def __iter__(self) -> Iterator[int]:
        return iter(self._counts)

    def __len__(self) -> int:
        return self._total

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Composition):
            return NotImplemented
        return self._counts == other._counts

    def __repr__(self) -> str:
        pairs = ", ".join(f"{value}:{count}" for value, count in zip(CARD_VALUES, self._counts))
        return f"Composition({pairs})"
