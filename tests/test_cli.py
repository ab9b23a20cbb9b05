"""Tests for the command line interface."""

import pandas as pd
import pytest
from conftest import pool_records
from typer.testing import CliRunner

from slate_optimizer.cli import main
from slate_optimizer.cli.optimize import parse_matchup
from slate_optimizer.optimization.slots import DK_SLOTS

runner = CliRunner()


@pytest.fixture
def players_csv(tmp_path, player_pool):
    path = tmp_path / "players.csv"
    pd.DataFrame(pool_records(player_pool)).to_csv(path, index=False)
    return path


def test_run_writes_draftkings_csv(tmp_path, players_csv):
    output = tmp_path / "lineups.csv"

    result = runner.invoke(
        main,
        ["optimize", "run", str(players_csv), "-n", "3", "--in-process", "-o", str(output), "--exposures"],
    )

    assert result.exit_code == 0, result.output
    df = pd.read_csv(output, dtype=str)
    assert list(df.columns) == list(DK_SLOTS)
    assert len(df) == 3
    assert "Exposures" in result.output


def test_run_with_lock_keeps_player_in_every_lineup(tmp_path, players_csv):
    output = tmp_path / "lineups.csv"

    result = runner.invoke(
        main,
        ["optimize", "run", str(players_csv), "-n", "3", "--in-process", "--lock", "p07", "-o", str(output)],
    )

    assert result.exit_code == 0, result.output
    df = pd.read_csv(output, dtype=str)
    assert all("p07" in row for row in df.values.tolist())


def test_run_fails_when_slot_cannot_be_filled(tmp_path, player_pool):
    path = tmp_path / "no_centers.csv"
    players = [p for p in player_pool if "C" not in p.eligible_slots]
    pd.DataFrame(pool_records(players)).to_csv(path, index=False)

    result = runner.invoke(main, ["optimize", "run", str(path), "-n", "2", "--in-process"])

    assert result.exit_code == 1
    assert "No eligible players for C" in result.output


def test_run_rejects_file_without_required_columns(tmp_path):
    path = tmp_path / "bad.csv"
    pd.DataFrame([{"player_id": "a", "position": "PG"}]).to_csv(path, index=False)

    result = runner.invoke(main, ["optimize", "run", str(path), "--in-process"])

    assert result.exit_code == 1
    assert "Missing required columns" in result.output


@pytest.mark.parametrize("value", ["BOS@LAL", "BOS-LAL", "BOS vs LAL", "bos vs. lal", "BOS/LAL"])
def test_parse_matchup(value):
    assert [team.upper() for team in parse_matchup(value)] == ["BOS", "LAL"]


def test_run_accepts_team_and_matchup_selections(tmp_path, players_csv):
    output = tmp_path / "lineups.csv"

    result = runner.invoke(
        main,
        [
            "optimize", "run", str(players_csv), "-n", "2", "--in-process",
            "--team", "BOS", "--matchup", "DEN@MIA", "-o", str(output),
        ],
    )

    assert result.exit_code == 0, result.output
    assert len(pd.read_csv(output, dtype=str)) == 2
