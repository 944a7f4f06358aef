"""Multi-source search with caching and deduplication."""

from .exceptions import InvalidQueryError
from .models import SearchRunResult
from .service import JobSearchService, dedupe_jobs

__all__ = ["JobSearchService", "SearchRunResult", "InvalidQueryError", "dedupe_jobs"]
