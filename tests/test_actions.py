from __future__ import annotations

import logging

import pytest

from termcards import actions
from termcards.actions import AutoAction, DrawAction, Location, MoveAction, Zone
from termcards.cards import Suit


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("3", Location.board(3)),
        (" 8 ", Location.board(8)),
        ("free", Location.free()),
        ("F", Location.free()),
        ("waste", Location.free()),
        ("stack", Location.stack()),
        ("Hearts", Location.stack(Suit.HEART)),
        ("club", Location.stack(Suit.CLUB)),
    ],
)
def test_parse_location_accepts_known_tokens(token: str, expected: Location) -> None:
    assert actions.parse_location(token, 8) == expected


@pytest.mark.parametrize("token", ["0", "9", "-1", "moon", "", "stacks"])
def test_parse_location_rejects_everything_else(token: str) -> None:
    assert actions.parse_location(token, 8) is None


@pytest.mark.parametrize(
    ("token", "suit"),
    [("spade", Suit.SPADE), ("SPADES", Suit.SPADE), ("diamonds", Suit.DIAMOND), ("joker", None)],
)
def test_parse_suit(token: str, suit: Suit | None) -> None:
    assert actions.parse_suit(token) is suit


def test_parse_int_logs_malformed_numbers(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="termcards.actions"):
        assert actions.parse_int("seven") is None
    assert "Invalid number" in caplog.text
    assert actions.parse_int(" 12 ") == 12


def test_parse_column_checks_range() -> None:
    assert actions.parse_column("7", 7) == 7
    assert actions.parse_column("8", 7) is None


def test_location_stack_coerces_names() -> None:
    location = Location.stack("diamond")
    assert location.zone is Zone.STACK
    assert location.suit is Suit.DIAMOND


@pytest.mark.parametrize(
    ("action", "text"),
    [
        (DrawAction(), "Draw"),
        (AutoAction(), "Auto move"),
        (MoveAction(Location.board(1), Location.stack(Suit.HEART)), "Move column 1 → heart stack"),
        (MoveAction(Location.free(2), Location.board(4)), "Move free 2 → column 4"),
        (MoveAction(Location.board(3), Location.board(5), 3), "Move 3 card(s) column 3 → column 5"),
    ],
)
def test_describe_action(action: actions.Action, text: str) -> None:
    assert actions.describe_action(action) == text
