"""Utility functions for hashing, time handling, and result formatting."""

from .formatting import (
    format_job_result,
    format_salary,
    format_search_results,
    time_ago,
    truncate,
)
from .hashing import compute_cache_key, compute_job_id, hash_string, normalize_job_url
from .timestamps import (
    date_to_timestamp,
    ensure_utc,
    format_timestamp,
    parse_iso_datetime,
    unix_ms_to_timestamp,
    utc_now,
)

__all__ = [
    # Hashing
    "normalize_job_url",
    "compute_job_id",
    "compute_cache_key",
    "hash_string",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "date_to_timestamp",
    "unix_ms_to_timestamp",
    "format_timestamp",
    # Formatting
    "format_salary",
    "format_job_result",
    "format_search_results",
    "time_ago",
    "truncate",
]
