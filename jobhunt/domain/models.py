"""Core domain models for search results, search options and cache entries.

This module defines the data structures used throughout the application:
- JobSource: tag identifying which adapter produced a job
- NormalizedJob: canonical, source-agnostic job posting
- SearchOptions: immutable configuration for one search
- CacheEntry: a stored value with the time it was written
"""

import json
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from jobhunt.utils.hashing import compute_job_id, hash_string, normalize_job_url
from jobhunt.utils.timestamps import ensure_utc

SEARCH_CACHE_TTL = timedelta(minutes=30)

AGGREGATED_SITES = ("linkedin", "indeed")
SUPPORTED_SITES = AGGREGATED_SITES + ("greenhouse", "lever")
SUPPORTED_JOB_TYPES = ("fulltime", "parttime", "contract", "internship")


class JobSource(str, Enum):
    """Adapters that can produce a NormalizedJob."""

    JOBSPY = "jobspy"
    GREENHOUSE = "greenhouse"
    LEVER = "lever"


class NormalizedJob(BaseModel):
    """Canonical job posting produced by every source adapter.

    The job_url is the identity anchor: dedup_key and job_id are both
    derived from it, so two sources listing the same posting collapse to
    one entry during aggregation.
    """

    title: str = Field(..., description="Job title")
    company: str = Field(..., description="Company name or board identifier")
    location: str = Field("Unknown", description="Job location")
    is_remote: bool = Field(False, description="Whether the job is remote")
    job_url: str = Field(..., description="Direct link to the job posting")
    source: JobSource = Field(..., description="Adapter that produced this job")
    site: Optional[str] = Field(None, description="Underlying board for aggregated results")
    date_posted: Optional[datetime] = Field(None, description="When job was posted (UTC)")
    salary: Optional[str] = Field(None, description="Formatted salary range")
    description: str = Field("", description="Job description text")

    @field_validator("title", "company", "job_url")
    @classmethod
    def require_text(cls, v: str) -> str:
        """Strip whitespace and reject empty values."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("location", mode="before")
    @classmethod
    def default_location(cls, v: Optional[str]) -> str:
        if v is None or not str(v).strip():
            return "Unknown"
        return str(v).strip()

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v: Optional[str]) -> str:
        return v or ""

    @field_validator("date_posted")
    @classmethod
    def ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)

    @property
    def dedup_key(self) -> str:
        """Normalized URL used to detect duplicates across sources."""
        return normalize_job_url(self.job_url)

    @computed_field
    @property
    def job_id(self) -> str:
        """Short content-derived identifier for tracking this posting."""
        return compute_job_id(self.job_url)

    model_config = {"json_schema_extra": {"example": {
        "title": "Senior Software Engineer",
        "company": "examplecorp",
        "location": "Remote - US",
        "is_remote": True,
        "job_url": "https://boards.greenhouse.io/examplecorp/jobs/12345",
        "source": "greenhouse",
        "site": None,
        "date_posted": "2025-11-01T12:00:00Z",
        "salary": None,
        "description": "We are looking for a talented engineer...",
    }}}


class SearchOptions(BaseModel):
    """Immutable configuration for one search.

    Two option sets that compare equal always serialize to the same
    cache_params() string, so they share a cache entry.
    """

    model_config = ConfigDict(frozen=True)

    site: Optional[str] = Field(None, description="Restrict to one board")
    location: Optional[str] = Field(None, description="Location filter")
    remote: bool = Field(False, description="Remote jobs only")
    results: int = Field(15, ge=1, description="Results requested per source")
    job_type: Optional[str] = Field(None, description="Job type filter")
    hours_old: Optional[int] = Field(None, ge=1, description="Maximum posting age in hours")
    greenhouse_boards: Tuple[str, ...] = Field(default_factory=tuple)
    lever_sites: Tuple[str, ...] = Field(default_factory=tuple)
    proxy: Optional[str] = Field(None, description="Proxy for the aggregated board scraper")

    @field_validator("site")
    @classmethod
    def normalize_site(cls, v: Optional[str]) -> Optional[str]:
        """Lower-case the site. Sites jobspy does not serve only exclude it."""
        if v is None:
            return None
        site = v.strip().lower()
        return site or None

    @field_validator("job_type")
    @classmethod
    def validate_job_type(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        job_type = v.strip().lower()
        if job_type not in SUPPORTED_JOB_TYPES:
            raise ValueError(
                f"job_type must be one of {', '.join(SUPPORTED_JOB_TYPES)}, got: {v}"
            )
        return job_type

    @field_validator("greenhouse_boards", "lever_sites", mode="before")
    @classmethod
    def normalize_identifiers(cls, v: Any) -> Tuple[str, ...]:
        """Strip identifiers and drop empty entries."""
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        return tuple(item.strip() for item in v if isinstance(item, str) and item.strip())

    @field_validator("location", "proxy")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    def cache_params(self) -> str:
        """Serialize options deterministically for use as a cache key.

        The proxy is stored as its SHA256 digest so credentials embedded in
        it never reach the cache table.
        """
        params = self.model_dump(mode="json")
        if params["proxy"] is not None:
            params["proxy"] = hash_string(params["proxy"])
        return json.dumps(params, sort_keys=True, separators=(",", ":"))


class CacheEntry(BaseModel):
    """A cached value and the time it was stored. Entries are never mutated."""

    model_config = ConfigDict(frozen=True)

    value: Any = Field(..., description="JSON-compatible cached value")
    stored_at: datetime = Field(..., description="When the entry was written (UTC)")

    @field_validator("stored_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def is_expired(self, now: datetime, ttl: timedelta) -> bool:
        """An entry is fresh while now - stored_at <= ttl."""
        return ensure_utc(now) - self.stored_at > ttl
