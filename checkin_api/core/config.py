from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "Daily Check-in API"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite+aiosqlite:///./checkins.db"
    DB_AUTO_CREATE: bool = True

    # Day boundaries for "today" and for date-range queries
    REFERENCE_TIMEZONE: str = "UTC"

    OPENROUTER_API_KEY: Optional[str] = None
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    OPENROUTER_MODEL: str = "meta-llama/llama-4-maverick:free"
    SUGGESTION_TEMPERATURE: float = 0.7
    SUGGESTION_TIMEOUT_SECONDS: float = 12.0

    RECENT_DAYS_DEFAULT: int = 10

    CORS_ORIGINS: str = "*"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, frozen=True)

    @field_validator("REFERENCE_TIMEZONE")
    @classmethod
    def _known_zone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @field_validator("DATABASE_URL")
    @classmethod
    def _async_driver(cls, v: str) -> str:
        # asyncpg is the only PostgreSQL driver the async engine is set up for
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+asyncpg://", 1)
        return v

    @property
    def reference_tz(self) -> ZoneInfo:
        return ZoneInfo(self.REFERENCE_TIMEZONE)

    def get_cors_origins(self) -> list[str]:
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]


@lru_cache
def get_settings() -> Settings:
    return Settings()
