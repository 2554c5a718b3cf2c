from pydantic import ValidationError as SettingsValidationError
from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache

from app.core.exceptions import StartupError


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Transaction Ledger"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int

    # Database
    DATABASE_URL: str
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10

    # Error responses
    EXPOSE_ERROR_DETAILS: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    SENTRY_DSN: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    try:
        return Settings()
    except SettingsValidationError as e:
        missing = [str(err["loc"][0]) for err in e.errors() if err["type"] == "missing"]
        if missing:
            raise StartupError(f"Missing required configuration: {', '.join(missing)}") from e
        raise StartupError(f"Invalid configuration: {e}") from e
