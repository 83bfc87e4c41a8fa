"""
Application configuration using Pydantic settings.

This module contains all configuration settings for the application,
loaded from environment variables with sensible defaults.
"""

import os
from typing import List, Literal, Optional, Union

from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden with environment variables.
    """

    # API Configuration
    PROJECT_NAME: str = "Painting Gateway"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Session tokens
    # No default on purpose: the codec refuses to start without a secret.
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    USER_TOKEN_TTL_SECONDS: int = 60 * 60 * 24 * 30  # 30 days
    ADMIN_TOKEN_TTL_SECONDS: int = 60 * 60 * 24 * 7  # 7 days
    USER_SESSION_COOKIE: str = "pw_user_session"
    ADMIN_SESSION_COOKIE: str = "pw_admin_session"

    # Credentials
    BCRYPT_ROUNDS: int = 12
    USER_KEY_POLICY: Literal["custom", "generated"] = "custom"
    ADMIN_PASSWORD_MIN_LENGTH: int = 6

    # Upstream generation API
    UPSTREAM_TIMEOUT_SECONDS: float = 300.0
    UPSTREAM_CONNECT_TIMEOUT_SECONDS: float = 10.0

    # CORS Configuration
    # Note: Using Union[str, List] to avoid pydantic-settings 2.6+ JSON parsing issues
    BACKEND_CORS_ORIGINS: Union[str, List[str]] = "http://localhost:3000,http://localhost:5173"

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(
        cls, v: Union[str, List[str]]
    ) -> List[str]:
        """
        Parse CORS origins from environment variable.

        Supports:
        - Comma-separated string: "http://localhost,http://example.com"
        - Already parsed list: ["http://localhost"]
        - Empty string: returns empty list
        """
        if v is None or v == "":
            return []
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, list):
            return v
        raise ValueError(f"Invalid CORS origins format: {v}")

    # Database Configuration
    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    @field_validator("SQLALCHEMY_DATABASE_URI", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        """Resolve the async database URL."""
        if isinstance(v, str) and v:
            return v

        # Check for DATABASE_URL (Render/Railway/Heroku style)
        database_url = os.getenv("DATABASE_URL")
        if database_url:
            if database_url.startswith("postgres://"):
                database_url = database_url.replace("postgres://", "postgresql+asyncpg://", 1)
            elif database_url.startswith("postgresql://"):
                database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
            return database_url

        return "sqlite+aiosqlite:///./painting.db"

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "10/minute"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True
    LOG_DIR: str = "logs"

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


# Create global settings instance
settings = Settings()
