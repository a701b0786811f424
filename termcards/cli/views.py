"""Composable view primitives for the card table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table

from ..cards import PolarCard
from ..rules import STACK_ORDER

CardFormatter = Callable[[object], str]

EMPTY_SLOT = "[dim]· ·[/dim]"


@dataclass(slots=True)
class TableauView:
    """Renders the board columns side by side, bottom card first."""

    board: Sequence[Sequence[object]]
    card_formatter: CardFormatter

    def render(self) -> RenderableType:
        table = Table(box=box.SIMPLE, expand=False, show_edge=False, pad_edge=False)
        for index in range(1, len(self.board) + 1):
            table.add_column(str(index), justify="center", min_width=4)

        height = max((len(pile) for pile in self.board), default=0)
        if height == 0:
            table.add_row(*(EMPTY_SLOT for _ in self.board))
            return table

        for row in range(height):
            cells: list[str] = []
            for pile in self.board:
                if row < len(pile):
                    cells.append(self.card_formatter(pile[row]))
                elif row == 0:
                    cells.append(EMPTY_SLOT)
                else:
                    cells.append("")
            table.add_row(*cells)
        return table


@dataclass(slots=True)
class FoundationView:
    """Shows the top card of each suit stack."""

    stacks: Sequence[Sequence[object]]
    card_formatter: CardFormatter

    def render(self) -> RenderableType:
        grid = Table.grid(padding=(0, 2))
        for _ in self.stacks:
            grid.add_column(justify="center")
        cells = []
        for suit, stack in zip(STACK_ORDER, self.stacks):
            if stack:
                cells.append(self.card_formatter(stack[-1]))
            else:
                cells.append(f"[dim]{suit.symbol}[/dim]")
        grid.add_row(*cells)
        return Panel(grid, title="Stacks", box=box.SQUARE, border_style="green")


@dataclass(slots=True)
class FreeCellView:
    """Shows the free cells, padding unused cells with empty slots."""

    free: Sequence[object]
    slots: int
    card_formatter: CardFormatter

    def render(self) -> RenderableType:
        grid = Table.grid(padding=(0, 2))
        cells = [self.card_formatter(card) for card in self.free]
        cells.extend(EMPTY_SLOT for _ in range(max(self.slots - len(self.free), 0)))
        for _ in cells:
            grid.add_column(justify="center")
        if cells:
            grid.add_row(*cells)
        labels = " ".join(str(index) for index in range(1, len(self.free) + 1))
        return Panel(grid, title="Free", subtitle=labels or None, box=box.SQUARE, border_style="blue")


@dataclass(slots=True)
class StockView:
    """Shows the Klondike stock count and the fanned-out waste."""

    stock_size: int
    waste: Sequence[PolarCard]
    card_formatter: CardFormatter

    def render(self) -> RenderableType:
        grid = Table.grid(padding=(0, 2))
        grid.add_column(justify="center")
        grid.add_column(justify="left")
        stock = f"[blue]##[/blue] ({self.stock_size})" if self.stock_size else EMPTY_SLOT
        waste = " ".join(self.card_formatter(card) for card in self.waste) or EMPTY_SLOT
        grid.add_row(stock, waste)
        return Panel(grid, title="Stock / Waste", box=box.SQUARE, border_style="blue")


@dataclass(slots=True)
class TableView:
    """Stacks the top row over the tableau."""

    top_row: Sequence[RenderableType]
    tableau: TableauView

    def render(self) -> RenderableType:
        header = Table.grid(padding=(0, 1))
        for _ in self.top_row:
            header.add_column()
        header.add_row(*self.top_row)
        return Group(header, self.tableau.render())
