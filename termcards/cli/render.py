"""Rendering helpers dedicated to the CLI experience."""

from __future__ import annotations

from typing import Sequence

from rich.console import RenderableType
from rich.panel import Panel
from rich.table import Table

from ..cards import Card, Color, PolarCard
from ..freecell import FreecellGame
from ..klondike import KlondikeGame
from ..state import WarState
from ..war import Outcome, RoundReport
from .views import FoundationView, FreeCellView, StockView, TableauView, TableView

_COLOR_STYLES = {
    Color.RED: "bold red",
    Color.BLACK: "bold white",
}

CARD_BACK = "[blue]##[/blue]"


def format_card(card: Card | PolarCard) -> str:
    """Return a Rich-rendered label for ``card``; face-down cards show their back."""

    if isinstance(card, PolarCard) and not card.face_up:
        return CARD_BACK
    style = _COLOR_STYLES[card.color]
    return f"[{style}]{card.label()}[/{style}]"


def render_freecell(game: FreecellGame, *, title: str = "Freecell") -> RenderableType:
    """Return a Rich panel describing the Freecell table."""

    view = TableView(
        top_row=[
            FreeCellView(game.free, game.config.free_cells, format_card).render(),
            FoundationView(game.stacks, format_card).render(),
        ],
        tableau=TableauView(game.board, format_card),
    )
    return Panel(view.render(), title=title, padding=(0, 1), border_style="cyan")


def render_klondike(game: KlondikeGame, *, title: str = "Klondike") -> RenderableType:
    """Return a Rich panel describing the Klondike table."""

    subtitle = f"draw {game.config.draw_count}"
    view = TableView(
        top_row=[
            StockView(len(game.stock), game.visible_waste(), format_card).render(),
            FoundationView(game.stacks, format_card).render(),
        ],
        tableau=TableauView(game.board, format_card),
    )
    return Panel(view.render(), title=title, subtitle=subtitle, padding=(0, 1), border_style="cyan")


def _faceoff_rows(faceoffs: Sequence[tuple[Card, Card]]) -> Table:
    table = Table.grid(padding=(0, 2))
    table.add_column("Opponent", justify="center")
    table.add_column("Player", justify="center")
    for opponent_card, player_card in faceoffs:
        table.add_row(format_card(opponent_card), format_card(player_card))
    return table


def render_war(state: WarState, report: RoundReport | None = None, *, title: str = "War") -> RenderableType:
    """Return a Rich panel with both hand sizes and the last round's result."""

    grid = Table.grid(expand=True)
    grid.add_column(justify="left")
    grid.add_row(f"[cyan]Opponent's deck[/cyan]: {len(state.opponent)}")
    if report is not None:
        grid.add_row(_faceoff_rows(report.faceoffs))
        if report.went_to_war:
            grid.add_row(f"[magenta]Let's go to war!![/magenta] ({report.wars}x, {report.burned} burned each)")
        if report.winner is Outcome.PLAYER:
            grid.add_row("[green]You won this round![/green]")
        elif report.winner is Outcome.OPPONENT:
            grid.add_row("[red]Your opponent won this round![/red]")
        else:
            grid.add_row("[yellow]The game ended on a WAR![/yellow]")
    grid.add_row(f"[cyan]Player's deck[/cyan]: {len(state.player)}")
    return Panel(grid, title=title, subtitle=f"round {state.rounds_played}", border_style="cyan")
