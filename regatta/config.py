"""
Regatta configuration module.

Engine settings read from environment variables: the race data
directory, sailing mode bands, search limits and logging. A .env file
next to the package is loaded first when present.

Usage:
    from regatta.config import settings

    print(settings.data_dir)
    print(settings.sailing_mode_thresholds())
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
import logging

from dotenv import load_dotenv

from regatta.optimization.performance import SailingModeThresholds

# Load .env file if present
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_bool(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")


def get_float(key: str, default: float) -> float:
    """Get float from environment variable."""
    try:
        return float(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default


def get_int(key: str, default: int) -> int:
    """Get int from environment variable."""
    try:
        return int(os.getenv(key, str(default)))
    except (ValueError, TypeError):
        return default


@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Data
    data_dir: str = field(default_factory=lambda: os.getenv("REGATTA_DATA_DIR", "data"))

    # Sailing mode bands (upper bound of each band, degrees of relative bearing)
    mode_beating_max: float = field(default_factory=lambda: get_float("MODE_BEATING_MAX", 35.0))
    mode_close_hauled_max: float = field(default_factory=lambda: get_float("MODE_CLOSE_HAULED_MAX", 60.0))
    mode_close_reach_max: float = field(default_factory=lambda: get_float("MODE_CLOSE_REACH_MAX", 80.0))
    mode_beam_reach_max: float = field(default_factory=lambda: get_float("MODE_BEAM_REACH_MAX", 100.0))
    mode_broad_reach_max: float = field(default_factory=lambda: get_float("MODE_BROAD_REACH_MAX", 160.0))

    # Search limits enforced by the API and CLI
    max_steps_limit: int = field(default_factory=lambda: get_int("MAX_STEPS_LIMIT", 10))
    max_paths_limit: int = field(default_factory=lambda: get_int("MAX_PATHS_LIMIT", 100_000))
    max_race_hours: float = field(default_factory=lambda: get_float("MAX_RACE_HOURS", 24.0))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_format: str = field(
        default_factory=lambda: os.getenv(
            "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.max_steps_limit < 1:
            logging.warning(
                f"MAX_STEPS_LIMIT {self.max_steps_limit} must be at least 1, using 10"
            )
            self.max_steps_limit = 10

        if self.max_paths_limit < 1:
            logging.warning(
                f"MAX_PATHS_LIMIT {self.max_paths_limit} must be at least 1, using 100000"
            )
            self.max_paths_limit = 100_000

        if self.max_race_hours <= 0:
            logging.warning(
                f"MAX_RACE_HOURS {self.max_race_hours} must be positive, using 24"
            )
            self.max_race_hours = 24.0

    def sailing_mode_thresholds(self) -> SailingModeThresholds:
        """Sailing mode bands; raises ConfigurationError if inconsistent."""
        return SailingModeThresholds(
            beating_max=self.mode_beating_max,
            close_hauled_max=self.mode_close_hauled_max,
            close_reach_max=self.mode_close_reach_max,
            beam_reach_max=self.mode_beam_reach_max,
            broad_reach_max=self.mode_broad_reach_max,
        )

    def configure_logging(self):
        """Configure logging based on settings."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        logging.basicConfig(level=level, format=self.log_format)


# Singleton instance
settings = Settings()


def get_settings() -> Settings:
    """Return the module settings instance."""
    return settings
