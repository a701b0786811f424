"""Freecell rules engine."""

from __future__ import annotations

import logging
import random

from .actions import Action, AutoAction, MoveAction, Zone
from .cards import Card, Suit
from .rules import (
    IllegalMove,
    MoveFailure,
    MoveResult,
    automove,
    can_place_on,
    can_stack,
    check_descending_pile,
    get_stack_suit,
    require_stack,
    win_condition,
)
from .state import FreecellConfig, FreecellState, deal_freecell

logger = logging.getLogger(__name__)


class FreecellGame:
    """Freecell table with move validation and execution.

    Every ``move_*`` method validates before touching a pile and raises
    :class:`IllegalMove` otherwise, so a rejected move leaves the table as it
    was. :meth:`execute` is the non-raising entry point used by the CLI.
    """

    def __init__(
        self,
        state: FreecellState | None = None,
        *,
        config: FreecellConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if config is None:
            config = state.config if state is not None else FreecellConfig()
        self.config = config
        self.rng = rng
        self.state = state if state is not None else FreecellState(config=config)

    @property
    def board(self) -> list[list[Card]]:
        return self.state.board

    @property
    def free(self) -> list[Card]:
        return self.state.free

    @property
    def stacks(self) -> list[list[Card]]:
        return self.state.stacks

    def deal(self) -> None:
        self.state = deal_freecell(self.config, self.rng)

    def is_won(self) -> bool:
        return win_condition(self.stacks)

    # -- validation helpers -------------------------------------------------

    def _column(self, pile_index: int) -> list[Card]:
        if not 1 <= pile_index <= len(self.board):
            raise IllegalMove(MoveFailure.OUT_OF_RANGE)
        return self.board[pile_index - 1]

    def _free_card(self, index: int) -> Card:
        if not self.free:
            raise IllegalMove(MoveFailure.EMPTY_SOURCE)
        if not 1 <= index <= len(self.free):
            raise IllegalMove(MoveFailure.BAD_INDEX)
        return self.free[index - 1]

    def _foundation(self, stack: str | Suit | None) -> list[Card]:
        if stack is None:
            raise IllegalMove(MoveFailure.INVALID_STACK)
        stack_index = get_stack_suit(stack)
        if stack_index is None:
            raise IllegalMove(MoveFailure.INVALID_STACK)
        return self.stacks[stack_index]

    def free_cells_available(self) -> int:
        return max(self.config.free_cells - len(self.free), 0)

    def max_movable(self, pile_to: int) -> int:
        """Return how many cards may move as one unit onto column ``pile_to``.

        Each free cell adds one card; each empty column other than the
        destination doubles the total.
        """

        empties = sum(
            1 for index, pile in enumerate(self.board, start=1) if not pile and index != pile_to
        )
        return (self.free_cells_available() + 1) * 2**empties

    # -- moves --------------------------------------------------------------

    def move_board_to_board(self, pile_from: int, pile_to: int, amount: int = 1) -> None:
        source = self._column(pile_from)
        target = self._column(pile_to)
        if pile_from == pile_to:
            raise IllegalMove(MoveFailure.SAME_PILE)
        if not source:
            raise IllegalMove(MoveFailure.EMPTY_SOURCE)
        if amount < 1 or amount > len(source):
            raise IllegalMove(MoveFailure.BAD_AMOUNT)
        if not check_descending_pile(source, amount):
            raise IllegalMove(MoveFailure.NOT_DESCENDING)
        if amount > self.max_movable(pile_to):
            raise IllegalMove(MoveFailure.OVER_CAPACITY)
        base = source[-amount]
        if target and not can_place_on(base, target[-1]):
            raise IllegalMove(MoveFailure.NOT_PLACEABLE)

        run = source[-amount:]
        del source[-amount:]
        target.extend(run)
        logger.debug("moved %d card(s) from column %d to column %d", amount, pile_from, pile_to)

    def move_board_to_stack(self, pile_from: int, stack: str | Suit | None = None) -> None:
        source = self._column(pile_from)
        if not source:
            raise IllegalMove(MoveFailure.EMPTY_SOURCE)
        card = source[-1]
        foundation = self.stacks[require_stack(card, stack)]
        if not can_stack(card, foundation):
            raise IllegalMove(MoveFailure.RANK_MISMATCH)
        foundation.append(source.pop())
        logger.debug("stacked %s from column %d", card, pile_from)

    def move_board_to_free(self, pile_from: int) -> None:
        source = self._column(pile_from)
        if not source:
            raise IllegalMove(MoveFailure.EMPTY_SOURCE)
        if len(self.free) >= self.config.free_cells:
            raise IllegalMove(MoveFailure.NO_FREE_CELL)
        self.free.append(source.pop())

    def move_free_to_board(self, index: int, pile_to: int) -> None:
        card = self._free_card(index)
        target = self._column(pile_to)
        if target and not can_place_on(card, target[-1]):
            raise IllegalMove(MoveFailure.NOT_PLACEABLE)
        target.append(self.free.pop(index - 1))

    def move_free_to_stack(self, index: int, stack: str | Suit | None = None) -> None:
        card = self._free_card(index)
        foundation = self.stacks[require_stack(card, stack)]
        if not can_stack(card, foundation):
            raise IllegalMove(MoveFailure.RANK_MISMATCH)
        foundation.append(self.free.pop(index - 1))
        logger.debug("stacked %s from free cell %d", card, index)

    def move_stack_to_board(self, stack: str | Suit | None, pile_to: int) -> None:
        foundation = self._foundation(stack)
        target = self._column(pile_to)
        if not foundation:
            raise IllegalMove(MoveFailure.EMPTY_SOURCE)
        if not target:
            raise IllegalMove(MoveFailure.EMPTY_TARGET)
        if not can_place_on(foundation[-1], target[-1]):
            raise IllegalMove(MoveFailure.NOT_PLACEABLE)
        target.append(foundation.pop())

    def move_stack_to_free(self, stack: str | Suit | None) -> None:
        foundation = self._foundation(stack)
        if not foundation:
            raise IllegalMove(MoveFailure.EMPTY_SOURCE)
        if len(self.free) >= self.config.free_cells:
            raise IllegalMove(MoveFailure.NO_FREE_CELL)
        self.free.append(foundation.pop())

    # -- automove -----------------------------------------------------------

    def _automove_free(self) -> int:
        moved = 0
        index = 1
        while index <= len(self.free):
            try:
                self.move_free_to_stack(index)
            except IllegalMove:
                index += 1
            else:
                moved += 1
        return moved

    def _automove_board(self) -> int:
        moved = 0
        for pile_index, pile in enumerate(self.board, start=1):
            if not pile:
                continue
            try:
                self.move_board_to_stack(pile_index)
            except IllegalMove:
                continue
            moved += 1
        return moved

    def automove(self) -> int:
        """Advance every eligible free and column card to the foundations."""

        return automove(self._automove_free, self._automove_board)

    # -- dispatch -----------------------------------------------------------

    def apply(self, action: Action) -> int:
        """Perform ``action`` and return the number of cards moved.

        Raises :class:`IllegalMove` when the action is not allowed.
        """

        if isinstance(action, AutoAction):
            return self.automove()
        if not isinstance(action, MoveAction):
            raise IllegalMove(MoveFailure.UNSUPPORTED)

        source, target = action.source, action.target
        route = (source.zone, target.zone)
        if route == (Zone.BOARD, Zone.BOARD):
            self.move_board_to_board(source.index, target.index, action.amount)
            return action.amount
        if route == (Zone.BOARD, Zone.STACK):
            self.move_board_to_stack(source.index, target.suit)
        elif route == (Zone.BOARD, Zone.FREE):
            self.move_board_to_free(source.index)
        elif route == (Zone.FREE, Zone.BOARD):
            self.move_free_to_board(source.index, target.index)
        elif route == (Zone.FREE, Zone.STACK):
            self.move_free_to_stack(source.index, target.suit)
        elif route == (Zone.STACK, Zone.BOARD):
            self.move_stack_to_board(source.suit, target.index)
        elif route == (Zone.STACK, Zone.FREE):
            self.move_stack_to_free(source.suit)
        else:
            raise IllegalMove(MoveFailure.UNSUPPORTED)
        return 1

    def execute(self, action: Action) -> MoveResult:
        """Apply ``action``, reporting rule violations instead of raising."""

        try:
            moved = self.apply(action)
        except IllegalMove as exc:
            logger.info("rejected %s: %s", action, exc)
            return MoveResult.rejected(exc.failure)
        return MoveResult.success(moved)
