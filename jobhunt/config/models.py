"""Configuration schema models using Pydantic."""

from datetime import timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .duration import DurationParseError, parse_duration, validate_duration_range

CACHE_TTL_MIN_SECONDS = 60
CACHE_TTL_MAX_SECONDS = 7 * 86400


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


def _normalize_identifiers(values: List[str]) -> List[str]:
    """Strip identifiers, drop empties and keep first occurrence of each."""
    seen = set()
    normalized = []
    for value in values:
        stripped = value.strip()
        if stripped and stripped not in seen:
            seen.add(stripped)
            normalized.append(stripped)
    return normalized


class PreferencesConfig(BaseModel):
    """Search defaults merged into every CLI search."""

    model_config = {"extra": "forbid"}

    greenhouse_boards: List[str] = Field(
        default_factory=list, description="Greenhouse board tokens to search"
    )
    lever_sites: List[str] = Field(
        default_factory=list, description="Lever site handles to search"
    )
    proxies: List[str] = Field(
        default_factory=list, description="Proxies for the aggregated board scraper"
    )
    location: Optional[str] = Field(None, description="Default search location")
    remote: bool = Field(False, description="Search remote jobs by default")

    @field_validator("greenhouse_boards", "lever_sites", "proxies")
    @classmethod
    def normalize_lists(cls, v: List[str]) -> List[str]:
        return _normalize_identifiers(v)

    @property
    def default_proxy(self) -> Optional[str]:
        return self.proxies[0] if self.proxies else None


class CacheConfig(BaseModel):
    """On-disk search cache settings."""

    model_config = {"extra": "forbid"}

    database_url: str = Field(
        "sqlite:///./data/job_hunt_cache.db", min_length=1, description="SQLite database URL"
    )
    ttl: str = Field("30m", description="How long cached search results stay fresh")

    @field_validator("ttl")
    @classmethod
    def validate_ttl(cls, v: str) -> str:
        try:
            seconds = parse_duration(v)
            validate_duration_range(
                seconds, min_seconds=CACHE_TTL_MIN_SECONDS, max_seconds=CACHE_TTL_MAX_SECONDS
            )
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @property
    def ttl_delta(self) -> timedelta:
        return timedelta(seconds=parse_duration(self.ttl))


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(LogFormat.KEY_VALUE, description="Log output format")

    model_config = {"use_enum_values": True, "extra": "forbid"}


class AdvancedConfig(BaseModel):
    """HTTP and fan-out settings for the source adapters."""

    model_config = {"extra": "forbid"}

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Request timeout for board API calls (seconds)"
    )
    user_agent: str = Field(
        "JobHunt/1.0", min_length=1, description="User-Agent string for HTTP requests"
    )
    max_jobs_per_source: int = Field(
        100, ge=0, description="Maximum jobs kept per board identifier (0 = unlimited)"
    )
    max_workers: int = Field(3, ge=1, le=16, description="Concurrent adapter calls per search")

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object for job-hunt. Every section is optional."""

    model_config = {"extra": "forbid"}

    preferences: PreferencesConfig = Field(default_factory=PreferencesConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)
