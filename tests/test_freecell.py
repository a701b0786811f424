"""Tests covering the Freecell engine."""

from __future__ import annotations

import copy
import random
from collections import Counter

import pytest

from termcards.actions import AutoAction, Location, MoveAction
from termcards.cards import Card, Suit, iter_full_deck
from termcards.freecell import FreecellGame
from termcards.rules import STACK_ORDER, IllegalMove, MoveFailure
from termcards.state import FreecellConfig, FreecellState, deal_freecell

S, H, C, D = Suit.SPADE, Suit.HEART, Suit.CLUB, Suit.DIAMOND


def _make_game(
    board: list[list[Card]],
    free: list[Card] | None = None,
    stacks: list[list[Card]] | None = None,
    free_cells: int = 4,
) -> FreecellGame:
    config = FreecellConfig(columns=len(board), free_cells=free_cells)
    state = FreecellState(
        board=board,
        free=free or [],
        stacks=stacks if stacks is not None else [[], [], [], []],
        config=config,
    )
    return FreecellGame(state)


def _crowded_game() -> FreecellGame:
    return _make_game(
        board=[
            [Card(8, H), Card(7, S), Card(6, H), Card(5, S), Card(4, H)],
            [Card(9, C)],
            [Card(8, D)],
            [Card(13, D)],
            [Card(13, S)],
            [Card(12, H)],
            [Card(11, C)],
            [Card(2, D)],
        ],
        free=[Card(1, C)],
    )


def test_deal_distributes_every_card() -> None:
    state = deal_freecell(FreecellConfig(), random.Random(3))
    assert [len(pile) for pile in state.board] == [7, 7, 7, 7, 6, 6, 6, 6]
    assert Counter(state.all_cards()) == Counter(iter_full_deck())
    assert state.free == []


def test_seeded_deals_repeat() -> None:
    first = deal_freecell(rng=random.Random(11))
    second = deal_freecell(rng=random.Random(11))
    assert first.board == second.board


def test_capacity_blocks_oversized_supermove() -> None:
    game = _crowded_game()
    before = copy.deepcopy(game.board)

    assert game.max_movable(2) == 4
    with pytest.raises(IllegalMove) as excinfo:
        game.move_board_to_board(1, 2, 5)

    assert excinfo.value.failure is MoveFailure.OVER_CAPACITY
    assert game.board == before


def test_supermove_within_capacity() -> None:
    game = _crowded_game()
    game.move_board_to_board(1, 3, 4)
    assert game.board[0] == [Card(8, H)]
    assert game.board[2] == [Card(8, D), Card(7, S), Card(6, H), Card(5, S), Card(4, H)]


def test_empty_columns_double_capacity() -> None:
    game = _make_game(board=[[Card(9, C)], [], [], [Card(4, H)]])
    assert game.max_movable(1) == 20
    assert game.max_movable(2) == 10


def test_capacity_counts_free_cells_without_going_negative() -> None:
    game = _make_game(board=[[Card(9, C)], [Card(4, H)]], free=[Card(1, S), Card(2, S)], free_cells=1)
    assert game.free_cells_available() == 0
    assert game.max_movable(1) == 1


@pytest.mark.parametrize(
    ("move", "failure"),
    [
        (lambda game: game.move_board_to_board(1, 1, 1), MoveFailure.SAME_PILE),
        (lambda game: game.move_board_to_board(1, 9, 1), MoveFailure.OUT_OF_RANGE),
        (lambda game: game.move_board_to_board(1, 2, 6), MoveFailure.BAD_AMOUNT),
        (lambda game: game.move_board_to_board(4, 5, 1), MoveFailure.NOT_PLACEABLE),
        (lambda game: game.move_board_to_stack(4), MoveFailure.RANK_MISMATCH),
        (lambda game: game.move_board_to_stack(1, "spade"), MoveFailure.SUIT_MISMATCH),
        (lambda game: game.move_free_to_board(2, 1), MoveFailure.BAD_INDEX),
        (lambda game: game.move_stack_to_board("heart", 1), MoveFailure.EMPTY_SOURCE),
        (lambda game: game.move_stack_to_board("moon", 1), MoveFailure.INVALID_STACK),
    ],
)
def test_rejected_moves_leave_table_unchanged(move, failure: MoveFailure) -> None:
    game = _crowded_game()
    before = (copy.deepcopy(game.board), list(game.free), copy.deepcopy(game.stacks))

    with pytest.raises(IllegalMove) as excinfo:
        move(game)

    assert excinfo.value.failure is failure
    assert (game.board, game.free, game.stacks) == before


def test_board_to_free_until_full() -> None:
    game = _make_game(board=[[Card(3, S), Card(4, H), Card(5, C)]], free_cells=2)
    game.move_board_to_free(1)
    game.move_board_to_free(1)
    assert game.free == [Card(5, C), Card(4, H)]

    with pytest.raises(IllegalMove) as excinfo:
        game.move_board_to_free(1)
    assert excinfo.value.failure is MoveFailure.NO_FREE_CELL


def test_free_to_board_places_on_opposite_color() -> None:
    game = _make_game(board=[[Card(7, C)], []], free=[Card(6, D), Card(13, S)])
    game.move_free_to_board(1, 1)
    game.move_free_to_board(1, 2)
    assert game.board == [[Card(7, C), Card(6, D)], [Card(13, S)]]
    assert game.free == []


def test_free_to_stack_uses_chosen_card_suit() -> None:
    game = _make_game(board=[[Card(9, C)]], free=[Card(5, C), Card(1, H)])
    game.move_free_to_stack(2)
    assert game.stacks[STACK_ORDER.index(H)] == [Card(1, H)]
    assert game.free == [Card(5, C)]


def test_stack_round_trip_to_board_and_free() -> None:
    game = _make_game(
        board=[[Card(3, C)]],
        stacks=[[], [Card(1, H), Card(2, H)], [], []],
    )
    game.move_stack_to_board("heart", 1)
    assert game.board[0] == [Card(3, C), Card(2, H)]
    game.move_stack_to_free(Suit.HEART)
    assert game.free == [Card(1, H)]
    assert game.stacks[1] == []


def test_stack_to_empty_column_is_rejected() -> None:
    game = _make_game(board=[[]], stacks=[[Card(1, S)], [], [], []])
    with pytest.raises(IllegalMove) as excinfo:
        game.move_stack_to_board("spade", 1)
    assert excinfo.value.failure is MoveFailure.EMPTY_TARGET


def test_automove_drains_free_cells_and_columns() -> None:
    game = _make_game(
        board=[[Card(3, H), Card(2, S), Card(1, S)], [Card(13, D)], []],
        free=[Card(2, H), Card(1, H)],
    )

    moved = game.automove()

    assert moved == 5
    assert game.stacks[0] == [Card(1, S), Card(2, S)]
    assert game.stacks[1] == [Card(1, H), Card(2, H), Card(3, H)]
    assert game.free == []
    assert game.board == [[], [Card(13, D)], []]


def test_execute_reports_failures_without_raising() -> None:
    game = _make_game(board=[[], [Card(5, S)]])
    result = game.execute(MoveAction(Location.board(1), Location.board(2)))
    assert not result.ok
    assert result.failure is MoveFailure.EMPTY_SOURCE
    assert result.message == MoveFailure.EMPTY_SOURCE.hint


def test_execute_routes_every_move_kind() -> None:
    game = _make_game(board=[[Card(1, S), Card(7, D)], [Card(8, C)]])
    assert game.execute(MoveAction(Location.board(1), Location.board(2))).ok
    assert game.execute(MoveAction(Location.board(1), Location.stack())).ok
    assert game.execute(MoveAction(Location.stack(S), Location.free())).ok
    assert game.execute(MoveAction(Location.free(1), Location.stack(S))).ok
    assert game.execute(AutoAction()).moved == 0
    unsupported = game.execute(MoveAction(Location.free(1), Location.free()))
    assert unsupported.failure is MoveFailure.UNSUPPORTED


def test_won_when_all_foundations_complete() -> None:
    stacks = [[Card(rank, suit) for rank in range(1, 14)] for suit in STACK_ORDER]
    game = _make_game(board=[[] for _ in range(8)], stacks=stacks)
    assert game.is_won()
    assert not _crowded_game().is_won()


def _random_action(game: FreecellGame, rng: random.Random) -> MoveAction | AutoAction:
    columns = len(game.board)
    kinds = [
        lambda: MoveAction(Location.board(rng.randint(1, columns)), Location.board(rng.randint(1, columns)), rng.randint(1, 3)),
        lambda: MoveAction(Location.board(rng.randint(1, columns)), Location.free()),
        lambda: MoveAction(Location.board(rng.randint(1, columns)), Location.stack()),
        lambda: MoveAction(Location.free(rng.randint(1, 4)), Location.board(rng.randint(1, columns))),
        lambda: MoveAction(Location.free(rng.randint(1, 4)), Location.stack()),
        lambda: AutoAction(),
    ]
    return rng.choice(kinds)()


def test_random_play_keeps_foundations_ordered_and_cards_conserved() -> None:
    rng = random.Random(2024)
    game = FreecellGame(rng=random.Random(5))
    game.deal()

    for _ in range(2000):
        game.execute(_random_action(game, rng))
        assert len(game.free) <= game.config.free_cells
        for suit, stack in zip(STACK_ORDER, game.stacks):
            assert all(card.suit is suit for card in stack)
            assert [card.rank for card in stack] == list(range(1, len(stack) + 1))

    assert Counter(game.state.all_cards()) == Counter(iter_full_deck())
