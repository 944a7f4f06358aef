"""Domain models for job-hunt."""

from .models import (
    AGGREGATED_SITES,
    SEARCH_CACHE_TTL,
    SUPPORTED_JOB_TYPES,
    SUPPORTED_SITES,
    CacheEntry,
    JobSource,
    NormalizedJob,
    SearchOptions,
)

__all__ = [
    "NormalizedJob",
    "JobSource",
    "SearchOptions",
    "CacheEntry",
    "SEARCH_CACHE_TTL",
    "AGGREGATED_SITES",
    "SUPPORTED_SITES",
    "SUPPORTED_JOB_TYPES",
]
