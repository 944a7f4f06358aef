"""Hashing utilities for job identity and cache keys.

This module provides deterministic helpers for:
- dedup key: normalized job URL used to detect cross-source duplicates
- job id: short content-derived identifier a tracker can use
- cache key: primary key for a (namespace, params) cache entry
"""

import hashlib
import re

_QUERY_STRING = re.compile(r"\?.*$", re.DOTALL)
_TRAILING_SLASHES = re.compile(r"/+$")


def normalize_job_url(url: str) -> str:
    """Normalize a job URL into its dedup key.

    The query string is dropped first, then any trailing slashes, and the
    result is case-folded. Two postings whose URLs differ only in tracking
    parameters, a trailing slash or letter case share the same key.

    Args:
        url: Job posting URL

    Returns:
        Normalized URL string

    Example:
        >>> normalize_job_url("https://Example.com/jobs/1/?utm_source=x")
        'https://example.com/jobs/1'
    """
    key = _QUERY_STRING.sub("", url.strip())
    key = _TRAILING_SLASHES.sub("", key)
    return key.casefold()


def compute_job_id(url: str) -> str:
    """Compute the short identifier for a job posting.

    The id is the first 8 hex characters of the MD5 digest of the job URL,
    which keeps it stable across runs and short enough to type on a CLI.

    Args:
        url: Job posting URL

    Returns:
        8-character hexadecimal string
    """
    return hashlib.md5(url.encode("utf-8")).hexdigest()[:8]


def compute_cache_key(namespace_key: str, params_key: str) -> str:
    """Compute the primary key for a cache entry.

    The NUL separator keeps ("ab", "c") and ("a", "bc") apart.

    Args:
        namespace_key: Cache namespace (the search query)
        params_key: Serialized parameters (sorted-key JSON of search options)

    Returns:
        Hexadecimal SHA256 digest (64 characters)
    """
    return hash_string(f"{namespace_key}\x00{params_key}")


def hash_string(value: str) -> str:
    """Compute SHA256 hash of a string value."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()
