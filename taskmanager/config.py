"""
Configuration for the Task Manager
Settings are read from TASKMANAGER_* environment variables and an optional .env file
"""
import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

INSECURE_DEV_SECRET = "development-only-insecure-secret-key-32ch"


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_prefix="TASKMANAGER_",
        env_file=".env",
        extra="ignore",
    )

    environment: str = Field(default="development", description="development, test or production")
    log_level: str = Field(default="INFO", description="Root log level")

    # Database
    database_url: str = Field(default="sqlite:///./taskmanager.db", description="SQLAlchemy database URL")
    echo_sql: bool = Field(default=False, description="Log every SQL statement")

    # Auth
    jwt_secret: str = Field(default=INSECURE_DEV_SECRET, description="HS256 signing key")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60, ge=1)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, description="bcrypt work factor")

    # Task views
    upcoming_days: int = Field(default=7, ge=1, description="Default window for upcoming tasks")
    due_soon_hours: int = Field(default=24, ge=1, description="Window for the due-soon display flag")

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def is_development(self) -> bool:
        return self.environment != "production"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    settings = Settings()
    if settings.jwt_secret == INSECURE_DEV_SECRET:
        if not settings.is_development:
            raise RuntimeError("TASKMANAGER_JWT_SECRET must be set in production")
        logger.warning("TASKMANAGER_JWT_SECRET not set - using insecure development default")
    return settings


settings = get_settings()
