"""The card game War."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum

from .cards import Card
from .deck import default_rng
from .state import WarState

logger = logging.getLogger(__name__)

__all__ = [
    "Outcome",
    "RoundReport",
    "card_strength",
    "compare_cards",
    "go_to_war",
    "move_cards",
    "play_round",
    "play_auto_game",
    "is_over",
    "game_winner",
]

ACE_HIGH = 14


class Outcome(str, Enum):
    """Who took a round, or the whole game."""

    PLAYER = "player"
    OPPONENT = "opponent"
    DRAW = "draw"


@dataclass(frozen=True, slots=True)
class RoundReport:
    """Summary of a single round, including any wars it triggered."""

    winner: Outcome
    faceoffs: tuple[tuple[Card, Card], ...]
    wars: int
    burned: int
    cards_won: int

    @property
    def went_to_war(self) -> bool:
        return self.wars > 0


def card_strength(card: Card) -> int:
    """Return the comparison value of ``card``; aces rank above kings."""

    return ACE_HIGH if card.is_ace else card.rank


def compare_cards(opponent: Card, player: Card) -> int:
    """Return a positive number if the opponent wins, negative if the player does, 0 on a tie."""

    return card_strength(opponent) - card_strength(player)


def go_to_war(state: WarState) -> int:
    """Burn up to ``config.burn`` cards per side face-down into the pot.

    A side always keeps its last card to turn over, so fewer cards are burned
    when a hand runs low. Returns the number of cards burned per side.
    """

    burned = 0
    while burned < state.config.burn and len(state.opponent) > 1 and len(state.player) > 1:
        state.pot.append(state.opponent.pop())
        state.pot.append(state.player.pop())
        burned += 1
    return burned


def move_cards(state: WarState, winner: Outcome, rng: random.Random) -> int:
    """Shuffle the pot and slide it under the winner's hand."""

    hand = state.player if winner is Outcome.PLAYER else state.opponent
    won = list(state.pot)
    rng.shuffle(won)
    hand[:0] = won
    state.pot.clear()
    return len(won)


def is_over(state: WarState) -> bool:
    return not state.opponent or not state.player


def game_winner(state: WarState) -> Outcome | None:
    """Return the game winner, or ``None`` while both hands hold cards."""

    if state.opponent and state.player:
        return None
    if state.player:
        return Outcome.PLAYER
    if state.opponent:
        return Outcome.OPPONENT
    return Outcome.DRAW


def play_round(state: WarState, rng: random.Random | None = None) -> RoundReport:
    """Turn over the top cards and settle the round, going to war on ties."""

    if is_over(state):
        raise ValueError("cannot play a round once a hand is empty")
    rng = rng or default_rng()

    faceoffs: list[tuple[Card, Card]] = []
    wars = 0
    burned = 0
    while True:
        opponent_card = state.opponent.pop()
        player_card = state.player.pop()
        state.pot.extend((opponent_card, player_card))
        faceoffs.append((opponent_card, player_card))

        result = compare_cards(opponent_card, player_card)
        if result > 0:
            winner = Outcome.OPPONENT
            break
        if result < 0:
            winner = Outcome.PLAYER
            break

        if is_over(state):
            # Nobody can match the war; whoever still holds cards takes the pot.
            winner = game_winner(state) or Outcome.DRAW
            logger.info("the game ended on a war")
            break

        wars += 1
        burned += go_to_war(state)

    cards_won = 0
    if winner is not Outcome.DRAW:
        cards_won = move_cards(state, winner, rng)
    state.rounds_played += 1
    logger.debug("round %d won by %s (%d card(s))", state.rounds_played, winner.value, cards_won)
    return RoundReport(
        winner=winner,
        faceoffs=tuple(faceoffs),
        wars=wars,
        burned=burned,
        cards_won=cards_won,
    )


def play_auto_game(state: WarState, rng: random.Random | None = None) -> Outcome | None:
    """Play rounds until a hand is empty or ``config.max_rounds`` is reached.

    Returns the winner, or ``None`` when the round cap stopped the game.
    """

    rng = rng or default_rng()
    while not is_over(state) and state.rounds_played < state.config.max_rounds:
        play_round(state, rng)
    return game_winner(state)
