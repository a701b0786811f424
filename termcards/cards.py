"""Card abstractions and helpers for the terminal card games."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterator, Protocol

RANK_LABELS: Final[dict[int, str]] = {1: "A", 11: "J", 12: "Q", 13: "K"}
MIN_RANK: Final[int] = 1
MAX_RANK: Final[int] = 13


class Suit(str, Enum):
    """The four suits, in foundation order."""

    SPADE = "spade"
    HEART = "heart"
    CLUB = "club"
    DIAMOND = "diamond"

    @property
    def symbol(self) -> str:
        return _SUIT_SYMBOLS[self]

    @property
    def color(self) -> "Color":
        if self in (Suit.HEART, Suit.DIAMOND):
            return Color.RED
        return Color.BLACK


class Color(str, Enum):
    """Card colors used by the alternating-color rules."""

    RED = "red"
    BLACK = "black"


_SUIT_SYMBOLS: Final[dict[Suit, str]] = {
    Suit.SPADE: "♠",
    Suit.HEART: "♥",
    Suit.CLUB: "♣",
    Suit.DIAMOND: "♦",
}


def rank_label(rank: int) -> str:
    """Return the short label for ``rank`` (``A``, ``2`` … ``10``, ``J``, ``Q``, ``K``)."""

    return RANK_LABELS.get(rank, str(rank))


class PlayingCard(Protocol):
    """Anything the pile rules can inspect."""

    @property
    def rank(self) -> int: ...

    @property
    def suit(self) -> Suit: ...

    @property
    def color(self) -> Color: ...


@dataclass(frozen=True, slots=True)
class Card:
    """Value object describing a physical playing card."""

    rank: int
    suit: Suit

    def __post_init__(self) -> None:
        if not MIN_RANK <= self.rank <= MAX_RANK:
            raise ValueError(f"invalid rank {self.rank}")
        if not isinstance(self.suit, Suit):
            object.__setattr__(self, "suit", Suit(self.suit))

    @property
    def color(self) -> Color:
        return self.suit.color

    @property
    def is_ace(self) -> bool:
        return self.rank == MIN_RANK

    @property
    def is_king(self) -> bool:
        return self.rank == MAX_RANK

    def label(self) -> str:
        """Create a display label suitable for CLI representations."""

        return f"{rank_label(self.rank)}{self.suit.symbol}"

    def __str__(self) -> str:
        return self.label()


@dataclass(slots=True)
class PolarCard:
    """A card that can lie face-up or face-down.

    Only the orientation is mutable; the wrapped :class:`Card` never changes.
    """

    card: Card
    face_up: bool = False

    @property
    def rank(self) -> int:
        return self.card.rank

    @property
    def suit(self) -> Suit:
        return self.card.suit

    @property
    def color(self) -> Color:
        return self.card.color

    @property
    def is_king(self) -> bool:
        return self.card.is_king

    def flip(self) -> None:
        """Turn the card over."""

        self.face_up = not self.face_up

    def label(self) -> str:
        return self.card.label()

    def __str__(self) -> str:
        return self.card.label() if self.face_up else "##"


def iter_full_deck() -> Iterator[Card]:
    """Yield all 52 cards of a fresh pack, suit by suit."""

    for suit in Suit:
        for rank in range(MIN_RANK, MAX_RANK + 1):
            yield Card(rank=rank, suit=suit)


def format_cards(cards: list[PlayingCard]) -> str:
    return " ".join(str(card) for card in cards)
