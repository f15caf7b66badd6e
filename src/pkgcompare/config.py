"""Runtime configuration loaded from the environment and an optional .env file."""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


class Settings(BaseModel):
    """Application settings."""

    github_token: str | None = None
    http_timeout: float = 30.0  # seconds
    categories_file: Path | None = None  # JSON hash store of discovered categories
    log_level: str = "WARNING"


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Load settings from environment variables.

    Args:
        env: Mapping to read from. Defaults to ``os.environ`` after
            loading a ``.env`` file from the working directory.

    Returns:
        Settings instance.

    Raises:
        ConfigError: If a value cannot be parsed.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    timeout_raw = env.get("PKGCOMPARE_HTTP_TIMEOUT")
    try:
        http_timeout = float(timeout_raw) if timeout_raw else 30.0
    except ValueError as e:
        raise ConfigError(f"PKGCOMPARE_HTTP_TIMEOUT must be a number, got {timeout_raw!r}") from e
    if http_timeout <= 0:
        raise ConfigError("PKGCOMPARE_HTTP_TIMEOUT must be positive")

    log_level = (env.get("PKGCOMPARE_LOG_LEVEL") or "WARNING").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"PKGCOMPARE_LOG_LEVEL must be a logging level name, got {log_level!r}")

    categories_file = env.get("PKGCOMPARE_CATEGORIES_FILE")

    return Settings(
        github_token=env.get("GITHUB_TOKEN") or None,
        http_timeout=http_timeout,
        categories_file=Path(categories_file) if categories_file else None,
        log_level=log_level,
    )
