"""Lineup portfolio optimization package."""

from .exceptions import (
    ConstraintInfeasibleError,
    InvalidConfigError,
    PoolValidationError,
    WorkerError,
)
from .lineup_builder import BatchResult, LineupBuilder, validate_pool
from .models import ExposureState, Lineup, OptimizerConfig, PlayerProjection
from .slots import DK_SLOTS, eligible
from .worker import (
    ErrorMessage,
    OptimizerRequest,
    OptimizerWorker,
    ProgressMessage,
    ResultMessage,
    iter_messages,
)

__all__ = [
    "DK_SLOTS",
    "BatchResult",
    "ConstraintInfeasibleError",
    "ErrorMessage",
    "ExposureState",
    "InvalidConfigError",
    "Lineup",
    "LineupBuilder",
    "OptimizerConfig",
    "OptimizerRequest",
    "OptimizerWorker",
    "PlayerProjection",
    "PoolValidationError",
    "ProgressMessage",
    "ResultMessage",
    "WorkerError",
    "eligible",
    "iter_messages",
    "validate_pool",
]
