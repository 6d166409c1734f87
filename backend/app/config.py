"""
GeoFeatures Backend — Application Configuration
=================================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before app starts.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for a local MongoDB instance.
    Attributes are grouped by concern for readability.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # Format: mongodb://[user:password@]host:port
    mongo_uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI",
    )
    mongo_database: str = Field(default="gisdb")
    mongo_collection: str = Field(default="features")

    # Seconds allowed for the startup connection check
    mongo_connect_timeout: int = Field(default=10, ge=1, le=60)

    # Seconds allowed for each individual database call
    mongo_operation_timeout: int = Field(default=5, ge=1, le=60)

    # False: start without a database and serve degraded responses.
    # True:  refuse to start when the database is unreachable.
    database_required: bool = Field(default=False)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Format: Comma-separated origins, or "*" for any origin
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8080, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
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

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # MONGO_URI and mongo_uri both work
    }


# Singleton instance imported throughout the application
settings = Settings()
