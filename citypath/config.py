"""
Runtime settings for the route finder API.

Values come from CITYPATH_* environment variables and are validated once,
when this module is imported.
"""

from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from citypath.models import Algorithm


class Settings(BaseSettings):
    """Configuration settings for the route finder."""

    model_config = SettingsConfigDict(env_prefix="CITYPATH_")

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Oldest events are dropped once the in-memory log grows past this
    MAX_EVENTS: int = Field(500, gt=0)

    DEFAULT_ALGORITHM: Algorithm = Algorithm.DIJKSTRA

    # Comma separated; Vite / Next.js dev servers by default
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
