"""Tests for lineup export helpers."""

import pandas as pd
import pytest
from conftest import make_player

from slate_optimizer.optimization.export import (
    export_lineups_csv,
    exposure_table,
    lineups_to_dataframe,
)
from slate_optimizer.optimization.models import Lineup
from slate_optimizer.optimization.slots import DK_SLOTS


@pytest.fixture
def lineups() -> list[Lineup]:
    first = {slot: f"{slot.lower()}1" for slot in DK_SLOTS}
    second = dict(first, UTIL="x9")
    return [
        Lineup("opt_0_0", first, 49800, 250.5),
        Lineup("opt_1_3", second, 49650, 248.25),
    ]


def test_export_uses_draftkings_slot_order(tmp_path, lineups):
    path = export_lineups_csv(lineups, tmp_path / "upload.csv")

    df = pd.read_csv(path, dtype=str)

    assert list(df.columns) == list(DK_SLOTS)
    assert df.iloc[0].tolist() == [f"{slot.lower()}1" for slot in DK_SLOTS]
    assert df.iloc[1]["UTIL"] == "x9"


def test_lineups_dataframe_uses_names_when_available(lineups):
    players = [make_player("pg1", "PG", 6000, 30.0, name="Point Guard")]

    df = lineups_to_dataframe(lineups, players)

    assert df.loc[0, "PG"] == "Point Guard"
    assert df.loc[0, "SG"] == "sg1"
    assert df["salary"].tolist() == [49800, 49650]


def test_exposure_table_sorted_by_exposure(lineups):
    players = [make_player("x9", "PG", 6000, 30.0, name="Swing")]

    df = exposure_table(lineups, players)

    assert df.iloc[0]["exposure"] == 100.0
    swing = df[df["player_id"] == "x9"].iloc[0]
    assert swing["count"] == 1
    assert swing["exposure"] == 50.0
    assert swing["name"] == "Swing"
    assert df.iloc[-1]["exposure"] == 50.0


def test_exposure_table_empty_batch():
    df = exposure_table([])
    assert df.empty
    assert list(df.columns) == ["player_id", "name", "count", "exposure"]
