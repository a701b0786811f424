"""Rule utilities shared by every solitaire variant."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Final, Protocol, Sequence

from .cards import MAX_RANK, PlayingCard, Suit

if TYPE_CHECKING:
    from .actions import Action

logger = logging.getLogger(__name__)

__all__ = [
    "STACK_ORDER",
    "FOUNDATION_COUNT",
    "MoveFailure",
    "IllegalMove",
    "MoveResult",
    "SolitaireEngine",
    "check_descending_pile",
    "get_stack_suit",
    "can_stack",
    "can_place_on",
    "win_condition",
    "automove",
]

STACK_ORDER: Final[tuple[Suit, ...]] = (Suit.SPADE, Suit.HEART, Suit.CLUB, Suit.DIAMOND)
FOUNDATION_COUNT: Final[int] = len(STACK_ORDER)


class MoveFailure(str, Enum):
    """Categories of rejected moves, each with a hint for the player."""

    OUT_OF_RANGE = "Make sure the piles selected are in range."
    SAME_PILE = "Make sure you are moving to a different pile."
    BAD_AMOUNT = "Make sure you are moving the right amount of cards!"
    NOT_DESCENDING = "Those cards are not a descending run of alternating colors."
    OVER_CAPACITY = "Not enough free cells or empty columns to move that many cards."
    NOT_PLACEABLE = "That card needs to be one rank lower and the opposite color."
    NEEDS_KING = "Only a King can go on an empty column."
    SUIT_MISMATCH = "Make sure the stack and card match suits."
    RANK_MISMATCH = "Make sure the rank is one higher!"
    NO_FREE_CELL = "Make sure there are free cells!"
    EMPTY_SOURCE = "There are no cards to move from there!"
    EMPTY_TARGET = "That card needs a card to go on."
    BAD_INDEX = "Make sure the index is correct!"
    INVALID_STACK = "Invalid stack input!"
    FACE_DOWN = "You can only move face-up cards."
    UNSUPPORTED = "That move is not part of this game."

    @property
    def hint(self) -> str:
        return self.value


class IllegalMove(RuntimeError):
    """Raised by engine primitives when a move breaks the rules."""

    def __init__(self, failure: MoveFailure, detail: str | None = None) -> None:
        super().__init__(detail or failure.hint)
        self.failure = failure


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Outcome of executing a player action."""

    ok: bool
    failure: MoveFailure | None = None
    moved: int = 0

    @property
    def message(self) -> str:
        if self.failure is None:
            return ""
        return self.failure.hint

    @classmethod
    def success(cls, moved: int = 1) -> "MoveResult":
        return cls(ok=True, moved=moved)

    @classmethod
    def rejected(cls, failure: MoveFailure) -> "MoveResult":
        return cls(ok=False, failure=failure)


class SolitaireEngine(Protocol):
    """Capabilities the prompt loop and renderer expect from a solitaire game."""

    board: list[list]
    stacks: list[list]

    def deal(self) -> None: ...

    def execute(self, action: "Action") -> MoveResult: ...

    def automove(self) -> int: ...

    def is_won(self) -> bool: ...


def check_descending_pile(pile: Sequence[PlayingCard], amount: int = 1) -> bool:
    """Return ``True`` if the top ``amount`` cards descend in alternating colors.

    The run is read from the ``amount``-th card from the top upward; each card
    must be exactly one rank below, and the opposite color of, the card it
    covers.
    """

    if amount < 1 or amount > len(pile):
        return False
    if amount == 1:
        return True

    run = pile[len(pile) - amount :]
    for previous, current in zip(run, run[1:]):
        if current.color == previous.color or previous.rank != current.rank + 1:
            return False
    return True


def get_stack_suit(stack: str | Suit) -> int | None:
    """Return the foundation index for a suit name, or ``None`` if unknown."""

    try:
        suit = Suit(stack)
    except ValueError:
        logger.error("Invalid stack input: %r", stack)
        return None
    return STACK_ORDER.index(suit)


def can_stack(card: PlayingCard, foundation: Sequence[PlayingCard]) -> bool:
    """Return ``True`` when ``card`` may go on ``foundation`` (suit already matched)."""

    if not foundation:
        return card.rank == 1
    return foundation[-1].rank == card.rank - 1


def can_place_on(card: PlayingCard, target: PlayingCard) -> bool:
    """Return ``True`` when ``card`` may cover ``target`` on the tableau."""

    return card.color != target.color and target.rank == card.rank + 1


def require_stack(card: PlayingCard, stack: str | Suit | None) -> int:
    """Resolve the destination foundation for ``card`` or raise ``IllegalMove``."""

    if stack is None:
        stack = card.suit
    stack_index = get_stack_suit(stack)
    if stack_index is None:
        raise IllegalMove(MoveFailure.INVALID_STACK)
    if STACK_ORDER[stack_index] != card.suit:
        raise IllegalMove(MoveFailure.SUIT_MISMATCH)
    return stack_index


def win_condition(stacks: Sequence[Sequence[PlayingCard]]) -> bool:
    """Return ``True`` when every foundation is complete."""

    return len(stacks) == FOUNDATION_COUNT and all(len(stack) >= MAX_RANK for stack in stacks)


def automove(step_free: Callable[[], int], step_board: Callable[[], int]) -> int:
    """Run ``step_free`` then ``step_board`` until a full pass moves nothing.

    Each step returns how many cards it advanced to the foundations. Every
    successful step shrinks the free and board piles, so the loop ends.
    Returns the total number of cards moved.
    """

    total = 0
    while True:
        moved = step_free()
        moved += step_board()
        if not moved:
            return total
        total += moved
