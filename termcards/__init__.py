"""Top-level package for the terminal card games."""

from . import actions, cards, deck, freecell, klondike, rules, state, war

__all__ = [
    "actions",
    "cards",
    "deck",
    "freecell",
    "klondike",
    "rules",
    "state",
    "war",
]
