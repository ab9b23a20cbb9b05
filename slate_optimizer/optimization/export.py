"""Export helpers for generated lineups.

- DraftKings upload CSV: header PG,SG,SF,PF,C,G,F,UTIL with one row of
  player ids per lineup
- Lineup table with names, salary and projection totals for display
- Exposure table: how often each player appears across the batch
"""

import logging
from pathlib import Path

import pandas as pd

from .models import Lineup, PlayerProjection
from .slots import DK_SLOTS

logger = logging.getLogger(__name__)


def lineups_to_dataframe(
    lineups: list[Lineup], players: list[PlayerProjection] | None = None
) -> pd.DataFrame:
    """One row per lineup with a column per slot.

    Slot columns hold player names when ``players`` is given, ids otherwise.
    """
    names = {p.player_id: p.name for p in players or []}
    rows = []
    for lineup in lineups:
        row = {"lineup_id": lineup.lineup_id}
        for slot in DK_SLOTS:
            player_id = lineup.slots[slot]
            row[slot] = names.get(player_id, player_id)
        row["salary"] = lineup.total_salary
        row["projection"] = lineup.projected_points
        rows.append(row)
    return pd.DataFrame(rows, columns=["lineup_id", *DK_SLOTS, "salary", "projection"])


def export_lineups_csv(lineups: list[Lineup], filename: str | Path | None = None) -> str:
    """Export lineups in DraftKings bulk upload format.

    Args:
        lineups: Generated lineups
        filename: Output filename (defaults to a timestamped name)

    Returns:
        Path to exported file
    """
    if filename is None:
        filename = f"lineups_{int(pd.Timestamp.now().timestamp())}.csv"

    df = pd.DataFrame([lineup.player_ids for lineup in lineups], columns=list(DK_SLOTS))
    df.to_csv(filename, index=False)

    logger.info(f"Exported {len(lineups)} lineups to {filename}")
    return str(filename)


def exposure_table(
    lineups: list[Lineup], players: list[PlayerProjection] | None = None
) -> pd.DataFrame:
    """Appearance count and exposure percent per player, highest first."""
    columns = ["player_id", "name", "count", "exposure"]
    if not lineups:
        return pd.DataFrame(columns=columns)

    names = {p.player_id: p.name for p in players or []}
    counts = pd.Series(
        [player_id for lineup in lineups for player_id in lineup.slots.values()]
    ).value_counts()
    df = pd.DataFrame({"player_id": counts.index, "count": counts.values})
    df["name"] = df["player_id"].map(lambda pid: names.get(pid, "Unknown"))
    df["exposure"] = df["count"] / len(lineups) * 100
    return (
        df[columns]
        .sort_values(["exposure", "player_id"], ascending=[False, True])
        .reset_index(drop=True)
    )
