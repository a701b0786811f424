from __future__ import annotations

import logging

from typer.testing import CliRunner

from termcards.cli.main import RunOptions, app, configure_logging

runner = CliRunner()


def test_seeded_options_give_repeatable_generators() -> None:
    first = RunOptions(seed=5).rng()
    second = RunOptions(seed=5).rng()
    assert [first.random() for _ in range(3)] == [second.random() for _ in range(3)]


def test_configure_logging_levels() -> None:
    configure_logging(verbose=True)
    assert logging.getLogger().level == logging.DEBUG
    configure_logging(verbose=False)
    assert logging.getLogger().level == logging.WARNING


def test_auto_war_plays_to_the_end() -> None:
    result = runner.invoke(app, ["--seed", "3", "war", "--auto"])
    assert result.exit_code == 0
    assert "Thanks for playing!" in result.output


def test_manual_war_stops_on_request() -> None:
    result = runner.invoke(app, ["--seed", "3", "war"], input="stop\n")
    assert result.exit_code == 0
    assert "No winner" in result.output


def test_freecell_exit_forfeits() -> None:
    result = runner.invoke(app, ["--seed", "1", "freecell"], input="exit\n")
    assert result.exit_code == 0
    assert "YOU LOSE!!" in result.output
    assert "Thanks for playing!" in result.output


def test_klondike_rejects_draw_two() -> None:
    result = runner.invoke(app, ["klondike", "--draw", "2"])
    assert result.exit_code != 0
