"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        proxy: Optional[str] = None,
        log_level: Optional[str] = None,
        cache_url: Optional[str] = None,
    ):
        self.proxy = proxy
        self.log_level = log_level
        self.cache_url = cache_url


def load_environment_config() -> EnvironmentConfig:
    """Load and validate environment variables.

    All variables are optional:
    - JOB_HUNTER_PROXY: default proxy for the aggregated board scraper
    - LOG_LEVEL: override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - JOB_HUNTER_CACHE_URL: override the cache database URL

    Returns:
        EnvironmentConfig with validated values

    Raises:
        ConfigurationError: If a variable is set to an invalid value
    """
    errors = []

    proxy = os.getenv("JOB_HUNTER_PROXY") or None
    log_level = os.getenv("LOG_LEVEL") or None
    cache_url = os.getenv("JOB_HUNTER_CACHE_URL") or None

    if log_level:
        log_level = log_level.strip().upper()
        if log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

    if cache_url and "://" not in cache_url:
        errors.append(
            f"Invalid JOB_HUNTER_CACHE_URL: '{cache_url}'. "
            "Expected a database URL such as sqlite:///./data/job_hunt_cache.db"
        )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Check the values in your .env file",
                "Unset variables you do not need; all of them are optional",
            ],
        )

    return EnvironmentConfig(proxy=proxy, log_level=log_level, cache_url=cache_url)
