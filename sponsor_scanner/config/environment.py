"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

DEFAULT_DATABASE_URL = "sqlite:///./data/h1b_jobs.db"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        serp_api_key: str,
        database_url: Optional[str] = None,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        self.serp_api_key = serp_api_key
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.log_level = log_level.upper() if log_level else None
        self.environment = environment or "local"

    def __repr__(self) -> str:
        # Never echo the API key
        return (
            f"EnvironmentConfig(database_url={self.database_url!r}, "
            f"log_level={self.log_level!r}, environment={self.environment!r})"
        )


def load_environment_config(require_api_key: bool = True) -> EnvironmentConfig:
    """Load and validate environment variables.

    Required environment variables:
    - SERP_API_KEY: SerpAPI key (only when ``require_api_key`` is set)

    Optional environment variables:
    - DATABASE_URL: SQLite database URL (default: sqlite:///./data/h1b_jobs.db)
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Label attached to log records (default: local)

    Args:
        require_api_key: False for commands that never call the search API
            (export, stats)

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    serp_api_key = (os.getenv("SERP_API_KEY") or "").strip()
    database_url = (os.getenv("DATABASE_URL") or "").strip() or None
    log_level = (os.getenv("LOG_LEVEL") or "").strip() or None
    environment = (os.getenv("ENVIRONMENT") or "").strip() or None

    if require_api_key and not serp_api_key:
        errors.append("Missing required environment variable: SERP_API_KEY")

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    if database_url and not database_url.startswith("sqlite"):
        errors.append(f"Invalid DATABASE_URL: '{database_url}'. Only sqlite URLs are supported.")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your SerpAPI key",
                "Ensure all required environment variables are set",
            ],
        )

    return EnvironmentConfig(
        serp_api_key=serp_api_key,
        database_url=database_url,
        log_level=log_level,
        environment=environment,
    )
