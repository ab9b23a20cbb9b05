"""Player pool preparation: loading candidates and applying user overrides.

Salary/projection files arrive with inconsistent column names ("Salary" vs
"salary", "Proj" vs "projection", "ID" vs "player_id"). Columns are matched
case-insensitively against a small alias table and turned into
PlayerProjection objects.

prepare_pool() then applies the per-player controls a user sets before a
run:
- exclude: drop the player
- projection: replace the projected points
- min_exposure / max_exposure: exposure bounds in percent (non-positive = unset)
- locked: force into every lineup; also pins both exposure bounds to 100 and
  adds LOCK_BONUS to the player's manual bonus

Selected teams and matchups each add one more point of manual bonus to every
player on those teams. A matchup is a pair (or any group) of team
abbreviations; a player counts once however many selected matchups include
their team.

Players without a positive salary and projection are dropped, since they
cannot contribute to a real lineup.
"""

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import pandas as pd

from .models import PlayerProjection

logger = logging.getLogger(__name__)

LOCK_BONUS = 3
TEAM_BONUS = 1
MATCHUP_BONUS = 1

COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "player_id": ("player_id", "id", "playerid", "dk_id"),
    "name": ("name", "player", "player_name"),
    "position": ("position", "pos", "roster_position"),
    "salary": ("salary", "cost"),
    "projected_points": ("projected_points", "projection", "proj", "fpts"),
    "ceiling": ("ceiling", "ceil"),
    "team_abbr": ("team_abbr", "team", "teamabbrev"),
    "priority": ("priority", "tier_priority"),
    "bonus": ("bonus", "manual_bonus"),
    "locked": ("locked", "lock"),
    "min_exposure": ("min_exposure", "min_exp"),
    "max_exposure": ("max_exposure", "max_exp"),
}

REQUIRED_FIELDS = ("player_id", "position", "salary", "projected_points")


@dataclass
class PlayerOverride:
    """User adjustments for one player."""

    projection: float | None = None
    min_exposure: float | None = None
    max_exposure: float | None = None
    exclude: bool = False
    locked: bool = False


def _resolve_columns(columns: Iterable[str]) -> dict[str, str]:
    lookup = {str(column).strip().lower(): column for column in columns}
    resolved = {}
    for field_name, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in lookup:
                resolved[field_name] = lookup[alias]
                break
    return resolved


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    number = float(value)
    return None if math.isnan(number) else number


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "x"}
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return False
    return bool(value)


def candidates_from_dataframe(df: pd.DataFrame) -> list[PlayerProjection]:
    """Convert a salary/projection table into PlayerProjection objects.

    Raises:
        ValueError: A required column (id, position, salary, projection) is missing
    """
    columns = _resolve_columns(df.columns)
    missing = [name for name in REQUIRED_FIELDS if name not in columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}. Found: {list(df.columns)}")

    players = []
    for row in df.to_dict("records"):
        def get(field_name: str, default: Any = None) -> Any:
            if field_name not in columns:
                return default
            value = row[columns[field_name]]
            return default if pd.isna(value) else value

        players.append(
            PlayerProjection(
                player_id=str(get("player_id")),
                name=str(get("name", get("player_id"))),
                position=str(get("position", "")),
                salary=int(get("salary", 0)),
                projected_points=float(get("projected_points", 0.0)),
                ceiling=_optional_float(get("ceiling")),
                team_abbr=str(get("team_abbr", "")),
                priority=int(get("priority", 0)),
                bonus=int(get("bonus", 0)),
                locked=_as_bool(get("locked", False)),
                min_exposure=_optional_float(get("min_exposure")),
                max_exposure=_optional_float(get("max_exposure")),
            )
        )
    return players


def candidates_from_records(records: Iterable[Mapping[str, Any]]) -> list[PlayerProjection]:
    """Convert dict records (e.g. parsed JSON) into PlayerProjection objects."""
    return candidates_from_dataframe(pd.DataFrame(list(records)))


def load_candidates_csv(path: str | Path) -> list[PlayerProjection]:
    """Load a salary/projection CSV into PlayerProjection objects."""
    df = pd.read_csv(path)
    players = candidates_from_dataframe(df)
    logger.info(f"Loaded {len(players)} players from {path}")
    return players


def prepare_pool(
    players: Iterable[PlayerProjection],
    overrides: Mapping[str, PlayerOverride] | None = None,
    locked_ids: Iterable[str] = (),
    selected_teams: Iterable[str] = (),
    selected_matchups: Iterable[Iterable[str]] = (),
) -> list[PlayerProjection]:
    """Apply user overrides and drop unusable players.

    Args:
        players: Raw candidates from the feed
        overrides: Per player id adjustments
        locked_ids: Additional player ids to lock
        selected_teams: Team abbreviations whose players get TEAM_BONUS
        selected_matchups: Groups of team abbreviations; players on any of
            them get MATCHUP_BONUS once

    Returns:
        New PlayerProjection objects; the inputs are not modified
    """
    overrides = overrides or {}
    locked_set = {str(pid) for pid in locked_ids}
    team_set = {team.upper() for team in selected_teams}
    matchups = [{team.upper() for team in matchup} for matchup in selected_matchups]
    pool = []
    dropped = 0

    for player in players:
        override = overrides.get(player.player_id, PlayerOverride())
        if override.exclude:
            dropped += 1
            continue

        projection = player.projected_points
        if override.projection is not None and math.isfinite(override.projection):
            projection = override.projection
        if player.salary <= 0 or projection <= 0:
            dropped += 1
            continue

        min_exposure = override.min_exposure if override.min_exposure is not None else player.min_exposure
        max_exposure = override.max_exposure if override.max_exposure is not None else player.max_exposure
        bonus = player.bonus
        team = (player.team_abbr or "").upper()
        if team and team in team_set:
            bonus += TEAM_BONUS
        if team and any(team in matchup for matchup in matchups):
            bonus += MATCHUP_BONUS
        locked = player.locked or override.locked or player.player_id in locked_set
        if locked:
            min_exposure = max_exposure = 100.0
            bonus += LOCK_BONUS

        pool.append(
            replace(
                player,
                projected_points=projection,
                min_exposure=min_exposure,
                max_exposure=max_exposure,
                bonus=bonus,
                locked=locked,
            )
        )

    if dropped:
        logger.info(f"Dropped {dropped} players (excluded or without salary/projection)")
    return pool
