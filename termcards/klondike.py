"""Klondike rules engine."""

from __future__ import annotations

import logging
import random

from .actions import Action, AutoAction, DrawAction, Zone
from .cards import PolarCard, Suit
from .deck import StandardDeck
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
from .state import KlondikeConfig, KlondikeState, deal_klondike

logger = logging.getLogger(__name__)


def _reveal_top(pile: list[PolarCard]) -> None:
    """Turn the new top card of ``pile`` face-up after cards leave it."""

    if pile and not pile[-1].face_up:
        pile[-1].flip()


class KlondikeGame:
    """Klondike table with move validation, drawing and automove.

    Rejected moves raise :class:`IllegalMove` before any pile changes;
    :meth:`execute` converts them into a failed :class:`MoveResult`.
    """

    def __init__(
        self,
        state: KlondikeState | None = None,
        *,
        config: KlondikeConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if config is None:
            config = state.config if state is not None else KlondikeConfig()
        self.config = config
        self.rng = rng
        self.state = state if state is not None else KlondikeState(config=config)

    @property
    def board(self) -> list[list[PolarCard]]:
        return self.state.board

    @property
    def stock(self) -> StandardDeck[PolarCard]:
        return self.state.stock

    @property
    def waste(self) -> list[PolarCard]:
        return self.state.waste

    @property
    def free(self) -> list[PolarCard]:
        return self.state.waste

    @property
    def stacks(self) -> list[list[PolarCard]]:
        return self.state.stacks

    def deal(self) -> None:
        self.state = deal_klondike(self.config, self.rng)

    def is_won(self) -> bool:
        return win_condition(self.stacks)

    def visible_waste(self) -> list[PolarCard]:
        """Return the fanned-out waste cards, topmost last."""

        return self.waste[-self.config.waste_shown :]

    # -- validation helpers -------------------------------------------------

    def _column(self, pile_index: int) -> list[PolarCard]:
        if not 1 <= pile_index <= len(self.board):
            raise IllegalMove(MoveFailure.OUT_OF_RANGE)
        return self.board[pile_index - 1]

    def _waste_top(self) -> PolarCard:
        if not self.waste:
            raise IllegalMove(MoveFailure.EMPTY_SOURCE)
        card = self.waste[-1]
        if not card.face_up:
            raise IllegalMove(MoveFailure.FACE_DOWN)
        return card

    def _check_target(self, card: PolarCard, target: list[PolarCard]) -> None:
        if not target:
            if not card.is_king:
                raise IllegalMove(MoveFailure.NEEDS_KING)
            return
        if not target[-1].face_up:
            raise IllegalMove(MoveFailure.FACE_DOWN)
        if not can_place_on(card, target[-1]):
            raise IllegalMove(MoveFailure.NOT_PLACEABLE)

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
        run = source[-amount:]
        if not all(card.face_up for card in run):
            raise IllegalMove(MoveFailure.FACE_DOWN)
        if not check_descending_pile(source, amount):
            raise IllegalMove(MoveFailure.NOT_DESCENDING)
        self._check_target(run[0], target)

        del source[-amount:]
        target.extend(run)
        _reveal_top(source)
        logger.debug("moved %d card(s) from column %d to column %d", amount, pile_from, pile_to)

    def move_board_to_stack(self, pile_from: int, stack: str | Suit | None = None) -> None:
        source = self._column(pile_from)
        if not source:
            raise IllegalMove(MoveFailure.EMPTY_SOURCE)
        card = source[-1]
        if not card.face_up:
            raise IllegalMove(MoveFailure.FACE_DOWN)
        foundation = self.stacks[require_stack(card, stack)]
        if not can_stack(card, foundation):
            raise IllegalMove(MoveFailure.RANK_MISMATCH)
        foundation.append(source.pop())
        _reveal_top(source)
        logger.debug("stacked %s from column %d", card, pile_from)

    def move_waste_to_board(self, pile_to: int) -> None:
        card = self._waste_top()
        target = self._column(pile_to)
        self._check_target(card, target)
        target.append(self.waste.pop())

    def move_waste_to_stack(self, stack: str | Suit | None = None) -> None:
        card = self._waste_top()
        foundation = self.stacks[require_stack(card, stack)]
        if not can_stack(card, foundation):
            raise IllegalMove(MoveFailure.RANK_MISMATCH)
        foundation.append(self.waste.pop())
        logger.debug("stacked %s from the waste", card)

    def move_stack_to_board(self, stack: str | Suit | None, pile_to: int) -> None:
        if stack is None:
            raise IllegalMove(MoveFailure.INVALID_STACK)
        stack_index = get_stack_suit(stack)
        if stack_index is None:
            raise IllegalMove(MoveFailure.INVALID_STACK)
        foundation = self.stacks[stack_index]
        target = self._column(pile_to)
        if not foundation:
            raise IllegalMove(MoveFailure.EMPTY_SOURCE)
        if not target:
            raise IllegalMove(MoveFailure.EMPTY_TARGET)
        self._check_target(foundation[-1], target)
        target.append(foundation.pop())

    # -- stock --------------------------------------------------------------

    def recycle_waste(self) -> None:
        """Turn the waste back over into the stock.

        Cards are popped off the waste and pushed onto the new stock, so the
        first card ever drawn ends up on top and the next pass repeats the
        first pass draw order.
        """

        recycled: list[PolarCard] = []
        while self.waste:
            card = self.waste.pop()
            if card.face_up:
                card.flip()
            recycled.append(card)
        self.stock.set_cards(recycled)
        logger.debug("recycled %d card(s) into the stock", len(recycled))

    def draw(self) -> int:
        """Draw ``draw_count`` cards onto the waste, recycling an empty stock first."""

        if not self.stock:
            if not self.waste:
                raise IllegalMove(MoveFailure.EMPTY_SOURCE)
            self.recycle_waste()

        drawn = self.stock.draw_multiple(self.config.draw_count)
        for card in drawn:
            if not card.face_up:
                card.flip()
            self.waste.append(card)
        return len(drawn)

    # -- automove -----------------------------------------------------------

    def _automove_waste(self) -> int:
        if not self.waste:
            return 0
        try:
            self.move_waste_to_stack()
        except IllegalMove:
            return 0
        return 1

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
        """Advance the waste top and every column top to the foundations."""

        return automove(self._automove_waste, self._automove_board)

    # -- dispatch -----------------------------------------------------------

    def apply(self, action: Action) -> int:
        """Perform ``action`` and return the number of cards moved."""

        if isinstance(action, AutoAction):
            return self.automove()
        if isinstance(action, DrawAction):
            return self.draw()

        source, target = action.source, action.target
        route = (source.zone, target.zone)
        if route == (Zone.BOARD, Zone.BOARD):
            self.move_board_to_board(source.index, target.index, action.amount)
            return action.amount
        if route == (Zone.BOARD, Zone.STACK):
            self.move_board_to_stack(source.index, target.suit)
        elif route == (Zone.FREE, Zone.BOARD):
            self.move_waste_to_board(target.index)
        elif route == (Zone.FREE, Zone.STACK):
            self.move_waste_to_stack(target.suit)
        elif route == (Zone.STACK, Zone.BOARD):
            self.move_stack_to_board(source.suit, target.index)
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
