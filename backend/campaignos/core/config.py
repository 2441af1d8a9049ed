from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """CampaignOS settings, read from the environment and ``.env``."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    PROJECT_NAME: str = "CampaignOS API"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "local"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./campaignos.db"

    # Auth
    SECRET_KEY: str = "changeme"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    LOGIN_RATE_LIMIT: str = "10/minute"

    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Notification fan-out
    REDIS_URL: str = "redis://localhost:6379/0"
    NOTIFICATIONS_CHANNEL: str = "notifications"
    NOTIFICATIONS_PUBLISH_ENABLED: bool = True

    # Planner
    DEFAULT_SWIMLANES: List[str] = ["Content Marketing", "Events", "Digital Campaigns"]
    HISTORY_DEFAULT_LIMIT: int = 50
    HISTORY_MAX_LIMIT: int = 200
    BULK_MAX_ACTIVITIES: int = 100

    @field_validator("BACKEND_CORS_ORIGINS", "DEFAULT_SWIMLANES", mode="before")
    @classmethod
    def split_comma_separated(cls, value: List[str] | str) -> List[str]:
        """Accept ``a,b,c`` from the environment as well as JSON lists."""
        if isinstance(value, str) and not value.lstrip().startswith("["):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def database_is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
