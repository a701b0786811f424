"""Player actions and the token helpers that build them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Final, Union

from .cards import Suit

logger = logging.getLogger(__name__)

EXIT_TOKENS: Final[frozenset[str]] = frozenset({"exit", "e"})
STOP_TOKENS: Final[frozenset[str]] = frozenset({"stop", "s"})
AUTO_TOKENS: Final[frozenset[str]] = frozenset({"auto", "a"})
DRAW_TOKENS: Final[frozenset[str]] = frozenset({"draw", "d"})
MOVE_TOKENS: Final[frozenset[str]] = frozenset({"move", "m"})
FREE_TOKENS: Final[frozenset[str]] = frozenset({"free", "f", "waste", "w"})
STACK_TOKENS: Final[frozenset[str]] = frozenset({"stack"})


class Zone(str, Enum):
    """Areas of a solitaire table a card can move between."""

    BOARD = "board"
    FREE = "free"
    STACK = "stack"


@dataclass(frozen=True, slots=True)
class Location:
    """A pile on the table.

    ``index`` is 1-based for board columns and free cells. ``suit`` names a
    foundation; as a destination it may be left out to mean "the moving
    card's own suit".
    """

    zone: Zone
    index: int = 0
    suit: Suit | None = None

    @classmethod
    def board(cls, index: int) -> "Location":
        return cls(Zone.BOARD, index=index)

    @classmethod
    def free(cls, index: int = 0) -> "Location":
        return cls(Zone.FREE, index=index)

    @classmethod
    def stack(cls, suit: Suit | str | None = None) -> "Location":
        return cls(Zone.STACK, suit=Suit(suit) if suit is not None else None)

    def describe(self) -> str:
        if self.zone is Zone.BOARD:
            return f"column {self.index}"
        if self.zone is Zone.FREE:
            return f"free {self.index}" if self.index else "free"
        return f"{self.suit.value} stack" if self.suit else "stack"


@dataclass(frozen=True, slots=True)
class MoveAction:
    """Move ``amount`` cards from ``source`` to ``target``."""

    source: Location
    target: Location
    amount: int = 1


@dataclass(frozen=True, slots=True)
class DrawAction:
    """Draw from the stock (Klondike)."""


@dataclass(frozen=True, slots=True)
class AutoAction:
    """Advance every eligible card to the foundations."""


Action = Union[MoveAction, DrawAction, AutoAction]


def describe_action(action: Action) -> str:
    if isinstance(action, DrawAction):
        return "Draw"
    if isinstance(action, AutoAction):
        return "Auto move"
    amount = f"{action.amount} card(s) " if action.amount != 1 else ""
    return f"Move {amount}{action.source.describe()} → {action.target.describe()}"


def normalize(token: str) -> str:
    return token.strip().lower()


def parse_int(token: str) -> int | None:
    """Convert ``token`` to an int, logging and returning ``None`` on failure."""

    try:
        return int(token.strip())
    except ValueError:
        logger.warning("Invalid number: %r", token)
        return None


def parse_suit(token: str) -> Suit | None:
    """Return the suit named by ``token`` (``spade`` or ``spades``)."""

    word = normalize(token)
    for suit in Suit:
        if word in (suit.value, f"{suit.value}s"):
            return suit
    return None


def parse_column(token: str, columns: int) -> int | None:
    """Return the 1-based column number in ``token`` if it is in range."""

    value = parse_int(token)
    if value is None or not 1 <= value <= columns:
        return None
    return value


def parse_location(token: str, columns: int) -> Location | None:
    """Parse a source or destination token.

    Accepts a column number, ``free``/``f``/``waste``, ``stack`` or a suit
    name (meaning that suit's foundation). Returns ``None`` for anything else.
    """

    word = normalize(token)
    if word in FREE_TOKENS:
        return Location.free()
    if word in STACK_TOKENS:
        return Location.stack()
    suit = parse_suit(word)
    if suit is not None:
        return Location.stack(suit)
    if word.isdigit():
        column = parse_column(word, columns)
        if column is not None:
            return Location.board(column)
    return None
