"""Read, validate and execute loop driving each game from the console."""

from __future__ import annotations

import random
from typing import Callable, Optional, TypeVar

from rich.console import Console, RenderableType
from rich.prompt import Prompt

from ..actions import (
    AUTO_TOKENS,
    DRAW_TOKENS,
    EXIT_TOKENS,
    FREE_TOKENS,
    MOVE_TOKENS,
    STOP_TOKENS,
    Action,
    AutoAction,
    DrawAction,
    Location,
    MoveAction,
    Zone,
    normalize,
    parse_int,
    parse_location,
    parse_suit,
)
from ..freecell import FreecellGame
from ..klondike import KlondikeGame
from ..rules import SolitaireEngine
from ..state import WarState
from ..war import Outcome, RoundReport, game_winner, is_over, play_auto_game, play_round
from .render import render_freecell, render_klondike, render_war

Reader = Callable[[str], str]
T = TypeVar("T")


class Cancelled(Exception):
    """The player typed ``stop``; the current command is discarded."""


class Forfeit(Exception):
    """The player typed ``exit``; the game ends immediately."""


def console_reader(console: Console) -> Reader:
    """Return a reader that prompts on ``console``."""

    def _read(prompt: str) -> str:
        return Prompt.ask(prompt, console=console)

    return _read


class SolitaireSession:
    """Shared prompt loop: render, read an action, execute it, repeat."""

    def __init__(self, game: SolitaireEngine, console: Console, reader: Reader | None = None) -> None:
        self.game = game
        self.console = console
        self.reader = reader or console_reader(console)
        self.message = ""

    # -- input --------------------------------------------------------------

    def read(self, prompt: str) -> str:
        """Read one token, turning ``stop``/``exit`` into control exceptions."""

        token = normalize(self.reader(prompt))
        if token in EXIT_TOKENS:
            raise Forfeit
        if token in STOP_TOKENS:
            raise Cancelled
        return token

    def ask_until(self, prompt: str, parse: Callable[[str], Optional[T]]) -> T:
        """Prompt until ``parse`` accepts the token."""

        while True:
            value = parse(self.read(prompt))
            if value is not None:
                return value

    def read_amount(self) -> int:
        """Ask for a positive card count; the engine checks it against the column."""

        def _parse(token: str) -> int | None:
            amount = parse_int(token)
            if amount is None or amount < 1:
                return None
            return amount

        return self.ask_until("How many cards would you like to move?", _parse)

    def read_action(self) -> Action:  # pragma: no cover - overridden
        raise NotImplementedError

    # -- loop ---------------------------------------------------------------

    def render(self) -> RenderableType:  # pragma: no cover - overridden
        raise NotImplementedError

    def redraw(self) -> None:
        self.console.clear()
        self.console.print(self.render())
        if self.message:
            self.console.print(f"[yellow]{self.message}[/yellow]")
            self.message = ""

    def step(self) -> bool:
        """Handle one command; returns ``False`` when the player gives up."""

        try:
            action = self.read_action()
        except Cancelled:
            return True
        except Forfeit:
            return False
        result = self.game.execute(action)
        if not result.ok:
            self.message = result.message
        return True

    def run(self) -> bool:
        """Play until the game is won or forfeited; returns ``True`` on a win."""

        while True:
            self.redraw()
            if self.game.is_won():
                return True
            if not self.step():
                return False


class FreecellSession(SolitaireSession):
    """Prompt flow for Freecell."""

    game: FreecellGame

    def __init__(self, game: FreecellGame, console: Console, reader: Reader | None = None) -> None:
        super().__init__(game, console, reader)

    def render(self) -> RenderableType:
        return render_freecell(self.game)

    def _parse_source(self, token: str) -> Action | Location | None:
        if token in AUTO_TOKENS:
            return AutoAction()
        return parse_location(token, len(self.game.board))

    def read_action(self) -> Action:
        columns = len(self.game.board)
        source = self.ask_until(
            f"Move from: [bold]free[/bold], [bold]stack[/bold], 1-{columns}, [bold]auto[/bold], stop or exit",
            self._parse_source,
        )
        if isinstance(source, AutoAction):
            return source

        if source.zone is Zone.FREE:
            index = self.ask_until(
                f"Which free cell? 1-{max(len(self.game.free), 1)}",
                lambda token: parse_int(token) if token.isdigit() else None,
            )
            target = self.ask_until(
                f"Move to: [bold]stack[/bold] or 1-{columns}",
                lambda token: self._target(token, allow_free=False),
            )
            return MoveAction(Location.free(index), target)

        if source.zone is Zone.STACK:
            suit = source.suit or self.ask_until("Which stack? spade, heart, club or diamond", parse_suit)
            target = self.ask_until(
                f"Move to: [bold]free[/bold] or 1-{columns}",
                lambda token: self._target(token, allow_stack=False),
            )
            return MoveAction(Location.stack(suit), target)

        target = self.ask_until(
            f"Move to: [bold]stack[/bold], [bold]free[/bold] or 1-{columns}",
            self._target,
        )
        amount = 1
        if target.zone is Zone.BOARD:
            amount = self.read_amount()
        return MoveAction(source, target, amount)

    def _target(self, token: str, *, allow_free: bool = True, allow_stack: bool = True) -> Location | None:
        location = parse_location(token, len(self.game.board))
        if location is None:
            return None
        if location.zone is Zone.FREE and not allow_free:
            return None
        if location.zone is Zone.STACK and not allow_stack:
            return None
        return location


class KlondikeSession(SolitaireSession):
    """Prompt flow for Klondike."""

    game: KlondikeGame

    def __init__(self, game: KlondikeGame, console: Console, reader: Reader | None = None) -> None:
        super().__init__(game, console, reader)

    def render(self) -> RenderableType:
        return render_klondike(self.game)

    def read_action(self) -> Action:
        columns = len(self.game.board)

        def _command(token: str) -> str | None:
            if token in DRAW_TOKENS | AUTO_TOKENS | MOVE_TOKENS:
                return token
            return None

        command = self.ask_until("[bold]draw[/bold], [bold]auto[/bold], [bold]move[/bold], stop or exit", _command)
        if command in DRAW_TOKENS:
            return DrawAction()
        if command in AUTO_TOKENS:
            return AutoAction()

        source = self.ask_until(
            f"Move from: [bold]free[/bold], [bold]stack[/bold] or 1-{columns}",
            lambda token: parse_location(token, columns),
        )
        if source.zone is Zone.FREE:
            target = self.ask_until(
                f"Move to: [bold]stack[/bold] or 1-{columns}",
                lambda token: self._target(token, allow_free=False),
            )
            return MoveAction(Location.free(), target)

        if source.zone is Zone.STACK:
            suit = source.suit or self.ask_until("Which stack? spade, heart, club or diamond", parse_suit)
            column = self.ask_until(
                f"Move to: 1-{columns}",
                lambda token: self._target(token, allow_free=False, allow_stack=False),
            )
            return MoveAction(Location.stack(suit), column)

        target = self.ask_until(
            f"Move to: [bold]stack[/bold] or 1-{columns}",
            lambda token: self._target(token, allow_free=False, exclude=source.index),
        )
        amount = 1
        if target.zone is Zone.BOARD:
            amount = self.read_amount()
        return MoveAction(source, target, amount)

    def _target(
        self,
        token: str,
        *,
        allow_free: bool = True,
        allow_stack: bool = True,
        exclude: int | None = None,
    ) -> Location | None:
        if token in FREE_TOKENS and not allow_free:
            return None
        location = parse_location(token, len(self.game.board))
        if location is None:
            return None
        if location.zone is Zone.STACK and not allow_stack:
            return None
        if location.zone is Zone.BOARD and location.index == exclude:
            return None
        return location


class WarSession:
    """Manual or automatic War game on the console."""

    def __init__(
        self,
        state: WarState,
        console: Console,
        reader: Reader | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        self.state = state
        self.console = console
        self.reader = reader or console_reader(console)
        self.rng = rng
        self.last_report: RoundReport | None = None

    def redraw(self) -> None:
        self.console.clear()
        self.console.print(render_war(self.state, self.last_report))

    def run_manual(self) -> Outcome | None:
        """Play a round per ``draw`` until a hand is empty or the player stops."""

        self.redraw()
        while not is_over(self.state):
            token = normalize(self.reader('Enter whether to "draw" a card or "stop" the game'))
            if token in STOP_TOKENS | EXIT_TOKENS:
                break
            if token not in DRAW_TOKENS:
                continue
            self.last_report = play_round(self.state, self.rng)
            self.redraw()
        return game_winner(self.state)

    def run_auto(self) -> Outcome | None:
        """Play the whole game without prompting."""

        winner = play_auto_game(self.state, self.rng)
        self.redraw()
        return winner
