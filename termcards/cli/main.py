"""Typer entry-point wiring for the termcards CLI."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..deck import default_rng
from ..freecell import FreecellGame
from ..klondike import KlondikeGame
from ..state import FreecellConfig, KlondikeConfig, WarConfig, deal_war
from ..war import Outcome
from .session import FreecellSession, KlondikeSession, WarSession

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, rich_markup_mode="rich", help="Freecell, Klondike and War in the terminal.")
console = Console()


@dataclass(slots=True)
class RunOptions:
    """Options shared by every game command."""

    seed: int | None = None
    verbose: bool = False

    def rng(self) -> random.Random:
        return random.Random(self.seed) if self.seed is not None else default_rng()


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich; DEBUG when ``verbose``."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _options(ctx: typer.Context) -> RunOptions:
    if isinstance(ctx.obj, RunOptions):
        return ctx.obj
    return RunOptions()


def _farewell(won: bool) -> None:
    if won:
        console.print("[bold green]YOU WIN![/bold green]")
    else:
        console.print("[bold red]YOU LOSE!![/bold red]")
    console.print("Thanks for playing!")


@app.callback()
def cli(
    ctx: typer.Context,
    seed: int | None = typer.Option(None, help="Random seed for reproducible deals (omit for randomness)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every move at debug level."),
) -> None:
    ctx.obj = RunOptions(seed=seed, verbose=verbose)
    configure_logging(verbose)


@app.command()
def freecell(ctx: typer.Context) -> None:
    """Play a game of Freecell."""

    options = _options(ctx)
    game = FreecellGame(config=FreecellConfig(), rng=options.rng())
    game.deal()
    logger.debug("dealt freecell with seed %s", options.seed)
    _farewell(FreecellSession(game, console).run())


@app.command()
def klondike(
    ctx: typer.Context,
    draw: int = typer.Option(3, "--draw", min=1, max=3, help="Cards drawn from the stock per turn (1 or 3)."),
) -> None:
    """Play a game of Klondike."""

    if draw not in (1, 3):
        raise typer.BadParameter("Draw count must be 1 or 3.", param_hint="--draw")
    options = _options(ctx)
    game = KlondikeGame(config=KlondikeConfig(draw_count=draw), rng=options.rng())
    game.deal()
    logger.debug("dealt klondike (draw %d) with seed %s", draw, options.seed)
    _farewell(KlondikeSession(game, console).run())


@app.command()
def war(
    ctx: typer.Context,
    auto: bool = typer.Option(False, "--auto", help="Play every round without prompting."),
) -> None:
    """Play a game of War against the computer."""

    options = _options(ctx)
    rng = options.rng()
    session = WarSession(deal_war(WarConfig(), rng), console, rng=rng)
    winner = session.run_auto() if auto else session.run_manual()

    if winner is None:
        console.print(f"[yellow]No winner after {session.state.rounds_played} round(s).[/yellow]")
        console.print("Thanks for playing!")
    elif winner is Outcome.DRAW:
        console.print("[yellow]The game ended on a WAR![/yellow]")
        console.print("Thanks for playing!")
    else:
        _farewell(winner is Outcome.PLAYER)


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
