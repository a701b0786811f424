"""Core game state data structures and deals."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List

from .cards import Card, PolarCard
from .deck import StandardDeck, default_rng
from .rules import FOUNDATION_COUNT


@dataclass(slots=True)
class FreecellConfig:
    """Runtime configuration for a Freecell game."""

    columns: int = 8
    free_cells: int = 4

    def __post_init__(self) -> None:
        if self.columns <= 0:
            raise ValueError("columns must be positive")
        if self.free_cells < 0:
            raise ValueError("free_cells cannot be negative")


@dataclass(slots=True)
class KlondikeConfig:
    """Runtime configuration for a Klondike game."""

    columns: int = 7
    draw_count: int = 3

    def __post_init__(self) -> None:
        if self.draw_count not in (1, 3):
            raise ValueError("draw_count must be 1 or 3")
        if not 1 <= self.columns <= 9:
            raise ValueError("columns must be between 1 and 9")

    @property
    def waste_shown(self) -> int:
        """Number of waste cards fanned out on screen."""

        return self.draw_count


@dataclass(slots=True)
class WarConfig:
    """Runtime configuration for a game of War."""

    burn: int = 3
    max_rounds: int = 1000

    def __post_init__(self) -> None:
        if self.burn < 0:
            raise ValueError("burn cannot be negative")
        if self.max_rounds <= 0:
            raise ValueError("max_rounds must be positive")


def _empty_stacks() -> List[list]:
    return [[] for _ in range(FOUNDATION_COUNT)]


@dataclass(slots=True)
class FreecellState:
    """Board, free cells and foundations of a Freecell deal."""

    board: List[List[Card]] = field(default_factory=list)
    free: List[Card] = field(default_factory=list)
    stacks: List[List[Card]] = field(default_factory=_empty_stacks)
    config: FreecellConfig = field(default_factory=FreecellConfig)

    def all_cards(self) -> list[Card]:
        cards: list[Card] = [card for pile in self.board for card in pile]
        cards.extend(self.free)
        cards.extend(card for stack in self.stacks for card in stack)
        return cards


@dataclass(slots=True)
class KlondikeState:
    """Tableau, stock, waste and foundations of a Klondike deal."""

    board: List[List[PolarCard]] = field(default_factory=list)
    stock: StandardDeck[PolarCard] = field(default_factory=lambda: StandardDeck([]))
    waste: List[PolarCard] = field(default_factory=list)
    stacks: List[List[PolarCard]] = field(default_factory=_empty_stacks)
    config: KlondikeConfig = field(default_factory=KlondikeConfig)

    def all_cards(self) -> list[PolarCard]:
        cards: list[PolarCard] = [card for pile in self.board for card in pile]
        cards.extend(self.stock)
        cards.extend(self.waste)
        cards.extend(card for stack in self.stacks for card in stack)
        return cards


@dataclass(slots=True)
class WarState:
    """The two War hands; the top of each hand is its last card."""

    opponent: List[Card] = field(default_factory=list)
    player: List[Card] = field(default_factory=list)
    pot: List[Card] = field(default_factory=list)
    rounds_played: int = 0
    config: WarConfig = field(default_factory=WarConfig)

    def all_cards(self) -> list[Card]:
        return [*self.opponent, *self.player, *self.pot]


def deal_freecell(config: FreecellConfig | None = None, rng: random.Random | None = None) -> FreecellState:
    """Shuffle a fresh deck and deal every card round-robin onto the columns."""

    config = config or FreecellConfig()
    deck: StandardDeck[Card] = StandardDeck(rng=rng or default_rng())
    deck.randomize()

    board: list[list[Card]] = [[] for _ in range(config.columns)]
    for index, card in enumerate(deck.draw_multiple(len(deck))):
        board[index % config.columns].append(card)
    return FreecellState(board=board, config=config)


def deal_klondike(config: KlondikeConfig | None = None, rng: random.Random | None = None) -> KlondikeState:
    """Deal the Klondike triangle; column ``i`` gets ``i + 1`` cards, last one face-up."""

    config = config or KlondikeConfig()
    stock = StandardDeck.polar(rng=rng or default_rng())
    stock.randomize()

    board: list[list[PolarCard]] = []
    for column in range(config.columns):
        pile: list[PolarCard] = []
        for _ in range(column + 1):
            card = stock.draw_one()
            if card is None:
                raise ValueError("insufficient cards in deck for requested columns")
            pile.append(card)
        pile[-1].flip()
        board.append(pile)
    return KlondikeState(board=board, stock=stock, config=config)


def deal_war(config: WarConfig | None = None, rng: random.Random | None = None) -> WarState:
    """Shuffle and split the deck into two 26-card hands."""

    deck: StandardDeck[Card] = StandardDeck(rng=rng or default_rng())
    deck.randomize()
    opponent, player = deck.split(len(deck) // 2)
    return WarState(opponent=opponent, player=player, config=config or WarConfig())
