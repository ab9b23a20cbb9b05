"""
Pydantic schemas for API request/response models.

Request schemas validate incoming candidate pools and batch configuration and
convert them into the optimizer's dataclasses. Response schemas describe the
generated lineups and the portfolio exposure table.
"""

from pydantic import BaseModel, ConfigDict, Field

from slate_optimizer.config.settings import settings
from slate_optimizer.optimization.models import Lineup, OptimizerConfig, PlayerProjection

# ========== REQUEST SCHEMAS ==========


class PlayerIn(BaseModel):
    """One candidate in the request pool."""

    player_id: str = Field(..., description="Unique player id (DraftKings id)")
    name: str = Field(default="", description="Display name")
    position: str = Field(..., description="Position string, e.g. 'PG/SG'")
    salary: int = Field(..., gt=0, description="DraftKings salary")
    projected_points: float = Field(..., description="Projected fantasy points")
    ceiling: float | None = Field(default=None, description="Upside projection")
    team_abbr: str = ""
    priority: int = Field(default=0, description="Externally computed tier priority")
    bonus: int = Field(default=0, description="Manual bonus (locks, team/matchup picks)")
    locked: bool = False
    min_exposure: float | None = Field(default=None, ge=0, le=100)
    max_exposure: float | None = Field(default=None, ge=0, le=100)

    def to_projection(self) -> PlayerProjection:
        return PlayerProjection(
            player_id=self.player_id,
            name=self.name or self.player_id,
            position=self.position,
            salary=self.salary,
            projected_points=self.projected_points,
            ceiling=self.ceiling,
            team_abbr=self.team_abbr,
            priority=self.priority,
            bonus=self.bonus,
            locked=self.locked,
            min_exposure=self.min_exposure,
            max_exposure=self.max_exposure,
        )


class OptimizerConfigIn(BaseModel):
    """Batch configuration."""

    num_lineups: int = Field(default_factory=lambda: settings.default_num_lineups, ge=1, le=500)
    salary_cap: int = Field(default_factory=lambda: settings.dk_classic_salary_cap, gt=0)
    max_exposure: float = Field(default_factory=lambda: settings.default_max_exposure, ge=0, le=100)

    def to_config(self) -> OptimizerConfig:
        return OptimizerConfig(
            num_lineups=self.num_lineups,
            salary_cap=self.salary_cap,
            max_exposure=self.max_exposure,
        )


class OptimizeRequest(BaseModel):
    """Request body for lineup generation."""

    players: list[PlayerIn]
    config: OptimizerConfigIn = Field(default_factory=OptimizerConfigIn)


# ========== RESPONSE SCHEMAS ==========


class LineupOut(BaseModel):
    """A generated lineup."""

    model_config = ConfigDict(from_attributes=True)

    lineup_id: str
    slots: dict[str, str]  # Slot -> player id
    player_ids: list[str]
    total_salary: int
    projected_points: float

    @classmethod
    def from_lineup(cls, lineup: Lineup) -> "LineupOut":
        return cls(**lineup.to_dict())


class ExposureOut(BaseModel):
    player_id: str
    name: str
    count: int
    exposure: float  # Percent of lineups


class OptimizeResponse(BaseModel):
    """Response for a completed batch."""

    lineups: list[LineupOut]
    requested: int
    attempts: int
    complete: bool
    message: str | None = None
    exposures: list[ExposureOut] = []
