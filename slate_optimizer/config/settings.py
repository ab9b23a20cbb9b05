"""Application settings and configuration management.

This file implements a centralized configuration system using Pydantic Settings.
It handles environment variables, default values, and configuration validation
for the lineup optimizer, its API server and its CLI.

Key Benefits:
- Type safety: All settings have defined types with validation
- Environment integration: Automatically loads from .env files
- Flexibility: Easy to override for different environments

The optimizer tunables (attempt budget, shuffle window, cap slack) live here
rather than as literals in the search code so they can be adjusted per
deployment. Example: SHUFFLE_WINDOW=25 uvicorn slate_optimizer.api.main:app
"""

import logging
import sys
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    Configuration Sources (in priority order):
    1. Environment variables (highest priority)
    2. .env file values
    3. Default values defined here (lowest priority)

    Example Usage:
    - In code: `settings.dk_classic_salary_cap`
    - Environment variable: `DK_CLASSIC_SALARY_CAP=60000`
    - .env file: `cap_slack_threshold=300`
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API Configuration - FastAPI web server settings
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    # DraftKings Configuration - Contest format settings
    dk_classic_salary_cap: int = Field(default=50000, gt=0)  # Classic NBA cap ($50,000)
    default_num_lineups: int = Field(default=20, ge=1)
    default_max_exposure: float = Field(default=50.0, ge=0, le=100)  # Percent of lineups

    # Search tunables
    cap_slack_threshold: int = Field(default=500, gt=0)  # Completed lineup must leave < this unused
    shuffle_window: int = Field(default=40, ge=1)  # Top-K candidates shuffled per slot
    attempts_per_lineup: int = Field(default=120, ge=1)
    min_attempts: int = Field(default=600, ge=1)

    # Background worker
    worker_start_method: Literal["spawn", "fork", "forkserver"] = "spawn"

    # Logging Configuration - Application logging settings
    log_level: str = "INFO"  # Log level (DEBUG, INFO, WARNING, ERROR)
    log_file: Path | None = None  # Optional log file; console logging is always on

    @property
    def project_root(self) -> Path:
        """Get the project root directory.

        slate_optimizer/config/settings.py -> slate_optimizer/config -> slate_optimizer -> root
        """
        return Path(__file__).parent.parent.parent


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for entry points (CLI, API server).

    Sets up console logging, plus file logging when ``settings.log_file``
    is configured. Library modules only ever create module loggers.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file))

    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


# Global settings instance shared by the whole application
# Example: from slate_optimizer.config.settings import settings; print(settings.shuffle_window)
settings = Settings()
