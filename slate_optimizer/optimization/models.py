"""Core data structures shared by the optimizer components.

- PlayerProjection: one candidate in the pool (cost, projection, eligibility,
  lock and exposure settings)
- OptimizerConfig: batch configuration (lineup count, cap, exposure ceiling,
  search tunables)
- Lineup: one generated roster, immutable once produced
- ExposureState: appearance counts across the batch being generated

Candidates and configuration are read-only for the duration of a batch.
ExposureState is the only mutable state and is owned by the iteration
controller.
"""

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any

from ..config.settings import settings
from .exceptions import InvalidConfigError
from .slots import DK_SLOTS, eligible_slots_for, parse_positions


@dataclass
class PlayerProjection:
    """Player projection for optimization.

    Core Data:
    - player_id, name, position: Player identification ("PG/SG" style position)
    - salary: Cost against the salary cap
    - projected_points: Expected fantasy points
    - ceiling: Optional upside estimate

    Externally computed ranking inputs:
    - priority: Tier priority; dominates every other scoring term
    - bonus: Manual bonus from user selections (locks, teams, matchups)

    Portfolio controls:
    - locked: Must appear in every lineup of the batch
    - min_exposure / max_exposure: Percent of lineups (0-100). None (or a
      non-positive value) means unset; an unset ceiling falls back to the
      batch-wide max exposure.

    The position string is parsed once here into ``eligible_slots`` so the
    search never re-parses it.
    """

    player_id: str
    name: str
    position: str
    salary: int
    projected_points: float
    ceiling: float | None = None
    team_abbr: str = ""
    priority: int = 0
    bonus: int = 0
    locked: bool = False
    min_exposure: float | None = None
    max_exposure: float | None = None
    value: float = 0.0  # Points per $1000
    position_tags: frozenset[str] = field(init=False, repr=False, compare=False)
    eligible_slots: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self.player_id = str(self.player_id)
        self.position_tags = parse_positions(self.position)
        self.eligible_slots = eligible_slots_for(self.position_tags)
        if self.min_exposure is not None and self.min_exposure <= 0:
            self.min_exposure = None
        if self.max_exposure is not None and self.max_exposure <= 0:
            self.max_exposure = None
        if self.salary > 0:
            self.value = self.projected_points / (self.salary / 1000)


@dataclass
class OptimizerConfig:
    """Configuration for one batch run.

    The search tunables default to the values in Settings and rarely need to
    be set per batch.
    """

    num_lineups: int = field(default_factory=lambda: settings.default_num_lineups)
    salary_cap: int = field(default_factory=lambda: settings.dk_classic_salary_cap)
    max_exposure: float = field(default_factory=lambda: settings.default_max_exposure)
    cap_slack_threshold: int = field(default_factory=lambda: settings.cap_slack_threshold)
    shuffle_window: int = field(default_factory=lambda: settings.shuffle_window)
    attempts_per_lineup: int = field(default_factory=lambda: settings.attempts_per_lineup)
    min_attempts: int = field(default_factory=lambda: settings.min_attempts)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise InvalidConfigError when a field is out of range."""
        if self.num_lineups < 1:
            raise InvalidConfigError(f"num_lineups must be at least 1, got {self.num_lineups}")
        if self.salary_cap <= 0:
            raise InvalidConfigError(f"salary_cap must be positive, got {self.salary_cap}")
        if not 0 <= self.max_exposure <= 100:
            raise InvalidConfigError(f"max_exposure must be within 0-100, got {self.max_exposure}")
        for name in ("cap_slack_threshold", "shuffle_window", "attempts_per_lineup", "min_attempts"):
            if getattr(self, name) <= 0:
                raise InvalidConfigError(f"{name} must be positive, got {getattr(self, name)}")

    @property
    def max_attempts(self) -> int:
        """Attempt budget for the whole batch."""
        return max(self.num_lineups * self.attempts_per_lineup, self.min_attempts)


@dataclass(frozen=True)
class Lineup:
    """A generated lineup.

    ``slots`` maps every roster slot to the id of the player filling it.
    """

    lineup_id: str
    slots: dict[str, str]
    total_salary: int
    projected_points: float

    @property
    def player_ids(self) -> list[str]:
        """Player ids in roster slot order."""
        return [self.slots[slot] for slot in DK_SLOTS]

    @property
    def signature(self) -> str:
        """Order-independent identity of the player set."""
        return "|".join(sorted(self.slots.values()))

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["player_ids"] = self.player_ids
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Lineup":
        return cls(
            lineup_id=data["lineup_id"],
            slots=dict(data["slots"]),
            total_salary=int(data["total_salary"]),
            projected_points=float(data["projected_points"]),
        )


class ExposureState:
    """Appearance counts per player across the batch so far."""

    def __init__(self):
        self._counts: Counter[str] = Counter()

    def count(self, player_id: str) -> int:
        return self._counts[player_id]

    def record(self, lineup: Lineup) -> None:
        self._counts.update(lineup.slots.values())

    def as_dict(self) -> dict[str, int]:
        return dict(self._counts)
