"""Shared fixtures for the optimizer test suite."""

import pytest

from slate_optimizer.optimization.models import OptimizerConfig, PlayerProjection

POSITIONS = ["PG", "SG", "SF", "PF", "C", "PG/SG", "SF/PF", "PF/C"]


def make_player(player_id: str, position: str, salary: int, projection: float, **kwargs) -> PlayerProjection:
    return PlayerProjection(
        player_id=player_id,
        name=kwargs.pop("name", f"Player {player_id}"),
        position=position,
        salary=salary,
        projected_points=projection,
        **kwargs,
    )


def build_pool(size: int = 40) -> list[PlayerProjection]:
    """Deterministic pool with salaries between $3,500 and $11,000.

    Salaries are spread in $100 steps so near-cap lineups are plentiful.
    """
    players = []
    for i in range(size):
        salary = 3500 + (i * 1300) % 7600
        projection = round(salary / 1000 * 5 + (i % 7), 2)
        players.append(
            make_player(
                f"p{i:02d}",
                POSITIONS[i % len(POSITIONS)],
                salary,
                projection,
                ceiling=round(projection * 1.3, 2),
                team_abbr=["BOS", "LAL", "DEN", "MIA"][i % 4],
            )
        )
    return players


@pytest.fixture
def player_pool() -> list[PlayerProjection]:
    return build_pool()


@pytest.fixture
def small_config() -> OptimizerConfig:
    return OptimizerConfig(num_lineups=10, salary_cap=50000, max_exposure=60)


def pool_records(players: list[PlayerProjection]) -> list[dict]:
    """JSON-ready records for API and feed tests."""
    return [
        {
            "player_id": p.player_id,
            "name": p.name,
            "position": p.position,
            "salary": p.salary,
            "projected_points": p.projected_points,
            "ceiling": p.ceiling,
            "team_abbr": p.team_abbr,
        }
        for p in players
    ]
