"""
HTTP layer settings for the Regatta API.

Engine settings (data directory, sailing mode bands, search limits) live in
``regatta.config``; this module only covers serving concerns.
"""
from typing import List
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server settings read from ``API_*``-style environment variables or ``.env``."""

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Browser clients (race dashboard)
    cors_origins: str = "http://localhost:3000"
    cors_credentials: bool = False

    # Load race data when the app starts instead of on the first request
    preload_race_data: bool = True

    environment: str = "development"
    log_level: str = "info"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Comma-separated CORS_ORIGINS as a list; empty entries dropped."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

if settings.is_production and any("localhost" in o for o in settings.cors_origins_list):
    raise ValueError("CORS_ORIGINS must not include localhost in production!")
