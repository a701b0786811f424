"""Deck, pile and shuffle simulation helpers."""

from __future__ import annotations

import copy
import logging
import random
from collections import deque
from enum import Enum
from typing import Generic, Iterable, Iterator, List, Tuple, TypeVar

from .cards import PolarCard, iter_full_deck

logger = logging.getLogger(__name__)

T = TypeVar("T")

SplitDeck = Tuple[List[T], List[T]]

DECK_SIZE = 52
HALF_DECK = DECK_SIZE // 2


class RiffleStyle(str, Enum):
    """How two halves of a split deck are recombined."""

    CUT = "cut"
    PERFECT = "perfect"
    RANDOM = "random"


class DownFirst(str, Enum):
    """Which half drops its first card when riffling."""

    BOTTOM = "bottom"
    TOP = "top"
    RANDOM = "random"


def default_rng() -> random.Random:
    """Return a generator seeded from system entropy."""

    return random.Random(random.SystemRandom().randrange(0, 2**63))


class StandardDeck(Generic[T]):
    """An ordered deck of cards whose top is the end of the list."""

    def __init__(self, cards: Iterable[T] | None = None, *, rng: random.Random | None = None) -> None:
        if cards is None:
            cards = iter_full_deck()  # type: ignore[assignment]
        self._cards: list[T] = list(cards)  # type: ignore[arg-type]
        self.rng = rng if rng is not None else default_rng()

    @classmethod
    def polar(cls, *, rng: random.Random | None = None) -> "StandardDeck[PolarCard]":
        """Return a fresh pack of face-down polar cards."""

        return StandardDeck((PolarCard(card) for card in iter_full_deck()), rng=rng)

    @property
    def cards(self) -> list[T]:
        return self._cards

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[T]:
        return iter(self._cards)

    def __bool__(self) -> bool:
        return bool(self._cards)

    def copy(self) -> "StandardDeck[T]":
        """Return an independent copy holding copies of every card and of the generator."""

        return StandardDeck(copy.deepcopy(self._cards), rng=copy.deepcopy(self.rng))

    def set_cards(self, cards: Iterable[T]) -> None:
        self._cards = list(cards)

    def peek(self) -> T | None:
        return self._cards[-1] if self._cards else None

    def push(self, card: T) -> None:
        self._cards.append(card)

    def draw_one(self) -> T | None:
        """Draw one card from the top of the deck, ``None`` when empty."""

        if not self._cards:
            return None
        return self._cards.pop()

    def draw_multiple(self, amount: int) -> list[T]:
        """Draw up to ``amount`` cards; the first element is the first card drawn."""

        amount = max(0, min(amount, len(self._cards)))
        return [self._cards.pop() for _ in range(amount)]

    def split(self, mid: int) -> SplitDeck[T]:
        """Split into ``mid`` cards from the bottom and the rest; empties the deck."""

        if mid < 0 or mid > len(self._cards):
            raise ValueError(f"split point {mid} outside deck of {len(self._cards)} cards")
        bottom, top = self._cards[:mid], self._cards[mid:]
        self._cards = []
        return bottom, top

    def put_halves_together(
        self,
        halves: SplitDeck[T],
        style: RiffleStyle | str,
        down_first: DownFirst | str = DownFirst.RANDOM,
    ) -> list[T]:
        """Recombine ``halves`` into a single pile.

        A ``cut`` places the top half underneath the bottom half. ``perfect``
        alternates strictly, starting with the half named by ``down_first``.
        ``random`` flips a coin for every card. Once a half is exhausted the
        other one is laid down in order.
        """

        style = RiffleStyle(style)
        down_first = DownFirst(down_first)
        bottom, top = deque(halves[0]), deque(halves[1])

        if style is RiffleStyle.CUT:
            return list(top) + list(bottom)

        offset = 0
        if down_first is DownFirst.TOP or (
            down_first is DownFirst.RANDOM and self.rng.randint(0, 1) == 1
        ):
            offset = 1

        out: list[T] = []
        total = len(bottom) + len(top)
        for i in range(offset, total + offset):
            take_bottom = (
                (style is RiffleStyle.PERFECT and i % 2 == 0)
                or (style is RiffleStyle.RANDOM and self.rng.randint(0, 1) == 0)
                or (down_first is DownFirst.BOTTOM and i == 0)
                or not top
            )
            if take_bottom and bottom:
                out.append(bottom.popleft())
            else:
                out.append(top.popleft())
        return out

    def cut(self, mid: int | None = HALF_DECK) -> None:
        """Cut the deck ``mid`` cards from the bottom; ``None`` cuts at random."""

        if mid is None:
            mid = self.rng.randrange(0, len(self._cards) + 1)
        elif mid >= len(self._cards):
            mid = len(self._cards) // 2
        self.set_cards(self.put_halves_together(self.split(mid), RiffleStyle.CUT))

    def riffle(
        self,
        mid: int | None = HALF_DECK,
        down_first: DownFirst | str = DownFirst.BOTTOM,
        style: RiffleStyle | str = RiffleStyle.PERFECT,
    ) -> None:
        """Simulate a riffle shuffle."""

        if mid is None:
            mid = self.rng.randrange(0, len(self._cards) + 1)
        elif mid > len(self._cards):
            mid = len(self._cards) // 2
        down_first = DownFirst(down_first)
        if down_first is DownFirst.RANDOM:
            down_first = DownFirst.BOTTOM if self.rng.randint(0, 1) == 0 else DownFirst.TOP
        logger.debug("riffle at %d (%s, %s first)", mid, RiffleStyle(style).value, down_first.value)
        self.set_cards(self.put_halves_together(self.split(mid), style, down_first))

    def randomize(self) -> None:
        """Uniformly shuffle the deck."""

        self.rng.shuffle(self._cards)
