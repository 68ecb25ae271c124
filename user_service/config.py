"""Configuration management and validation using Pydantic."""

import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    """Service configuration loaded from environment variables or .env files."""

    @staticmethod
    def get_env_file() -> str | None:
        """Pick the .env file for the current environment.

        Returns:
            None if SKIP_ENV_FILE is set (Docker/direct env vars)
            .env.{APP_ENV} file path otherwise (defaults to .env.dev)
        """
        if os.getenv("SKIP_ENV_FILE"):
            return None
        env = os.getenv("APP_ENV", "dev")
        env_file = f".env.{env}"
        if not os.path.exists(env_file):
            raise FileNotFoundError(
                f"Environment file '{env_file}' not found. "
                f"Create it, set APP_ENV, or set SKIP_ENV_FILE=1."
            )
        return env_file

    model_config = SettingsConfigDict(
        env_file=get_env_file.__func__(),
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # ==================== Application Settings ====================
    APP_NAME: str = "User Identity Service"
    APP_ENV: str = "dev"
    DB_URL: str  # Required

    # ==================== Database Pool ====================
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30  # Seconds to wait for a free connection
    DB_POOL_RECYCLE: int = 3600
    DB_CONNECT_TIMEOUT: int = 10
    DB_QUERY_TIMEOUT: int = 60

    # ==================== Health Check ====================
    HEALTH_RETRY_ATTEMPTS: int = 2
    HEALTH_RETRY_BASE_DELAY: float = 0.1

    # ==================== Identity Cookie ====================
    SESSION_SECRET_KEY: str  # Required, signs the identity cookie
    SESSION_COOKIE_NAME: str = "identity"
    SESSION_MAX_AGE: int = 60 * 60 * 24 * 7  # One week
    SESSION_HTTPS_ONLY: bool = False

    # ==================== CORS Settings ====================
    CORS_ORIGINS: str = "http://localhost:3000"  # Comma-separated

    # ==================== Field Validation ====================
    USER_NAME_MAX_LENGTH: int = 255
    USER_EMAIL_MAX_LENGTH: int = 255
    PASSWORD_MIN_LENGTH: int = 8
    PASSWORD_MAX_LENGTH: int = 72  # bcrypt only looks at the first 72 bytes

    # ==================== Rate Limiting ====================
    RATE_LIMIT_WRITE: str = "30/minute"
    RATE_LIMIT_READ: str = "120/minute"

    # ==================== Logging ====================
    LOG_LEVEL: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    LOG_FILE: str | None = None  # Path enables file logging
    LOG_FORMAT: str = "console"  # "console" or "json"

    @field_validator('DB_URL')
    @classmethod
    def validate_db_url(cls, v: str) -> str:
        """Validate that DB_URL is a PostgreSQL connection string."""
        if not v:
            raise ValueError("DB_URL is required but not provided in environment variables")
        if not v.startswith(("postgresql://", "postgresql+asyncpg://")):
            raise ValueError("DB_URL must be a valid PostgreSQL connection string")
        return v

    @field_validator('SESSION_SECRET_KEY')
    @classmethod
    def validate_session_secret(cls, v: str) -> str:
        """Validate that SESSION_SECRET_KEY is long enough to sign cookies."""
        if not v:
            raise ValueError("SESSION_SECRET_KEY is required but not provided in environment variables")
        if len(v) < 32:
            raise ValueError("SESSION_SECRET_KEY must be at least 32 characters long for security")
        return v

    @field_validator('LOG_FORMAT')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in ("console", "json"):
            raise ValueError("LOG_FORMAT must be 'console' or 'json'")
        return v

    def get_cors_origins(self) -> list[str]:
        """Parse CORS_ORIGINS into a list of allowed origins."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def get_async_db_url(self) -> str:
        """Return DB_URL with the asyncpg driver selected."""
        if self.DB_URL.startswith("postgresql://"):
            return "postgresql+asyncpg://" + self.DB_URL[len("postgresql://"):]
        return self.DB_URL

settings = Settings()
