"""
Users Backend — Application Configuration
==========================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time.

Environment variables:
    DB_HOST, DB_USER, DB_PASSWORD, DB_NAME, DB_PORT  → PostgreSQL connection parts
    DATABASE_URL                                     → full URL, overrides the parts
    APP_HOST, APP_PORT                               → listen address (port 9000 by default)
    CORS_ORIGINS                                     → comma-separated allowed origins
    LOG_LEVEL                                        → logging verbosity
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development against a
    PostgreSQL instance on localhost.
    """

    # ── Database ──────────────────────────────────────────────────────────
    db_host: str = Field(default="localhost")
    db_user: str = Field(default="postgres")
    db_password: str = Field(default="")
    db_name: str = Field(default="postgres")
    db_port: int = Field(default=5432, ge=1, le=65535)

    # Full SQLAlchemy URL; when set, the DB_* parts above are ignored.
    # Tests point this at sqlite+aiosqlite.
    database_url: Optional[str] = Field(default=None)

    db_pool_size: int = Field(default=10, ge=1, le=100)
    db_max_overflow: int = Field(default=5, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Only the frontend dev server may call the API.
    cors_origins: str = Field(default="http://localhost:9001")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=9000, ge=1, le=65535)

    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DB_HOST and db_host both work
    }

    @property
    def sqlalchemy_url(self) -> str:
        """
        What:  The async connection URL handed to SQLAlchemy.
        How:   DATABASE_URL wins when set; otherwise the DB_* parts are
               assembled with URL.create, which escapes the password.
        """
        if self.database_url:
            return self.database_url
        url = URL.create(
            drivername="postgresql+asyncpg",
            username=self.db_user or None,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )
        return url.render_as_string(hide_password=False)

    @property
    def is_sqlite(self) -> bool:
        return self.sqlalchemy_url.startswith("sqlite")


# Singleton instance, imported throughout the application
settings = Settings()
