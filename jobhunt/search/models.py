"""Data models for search execution reporting."""

from dataclasses import dataclass, field
from typing import List

from jobhunt.adapters.models import AdapterResult
from jobhunt.domain.models import NormalizedJob


@dataclass
class SearchRunResult:
    """
    Outcome of one JobSearchService.run() call.

    Attributes:
        jobs: Deduplicated jobs in source order
        cache_hit: Whether the jobs came from the cache (no adapters ran)
        outcomes: Per-adapter results, in adapter order; empty on a cache hit
        duration_seconds: Total time for the call
        total_fetched: Jobs returned by all adapters before deduplication
        duplicates_removed: total_fetched - len(jobs)
        had_errors: Whether any adapter or identifier failed
    """

    jobs: List[NormalizedJob] = field(default_factory=list)
    cache_hit: bool = False
    outcomes: List[AdapterResult] = field(default_factory=list)
    duration_seconds: float = 0.0
    total_fetched: int = 0
    duplicates_removed: int = 0
    had_errors: bool = False

    def __post_init__(self):
        """Compute aggregate statistics from adapter outcomes if not already set."""
        if self.outcomes and self.total_fetched == 0:
            self.total_fetched = sum(len(o.jobs) for o in self.outcomes)
            self.duplicates_removed = self.total_fetched - len(self.jobs)
        if self.outcomes and not self.had_errors:
            self.had_errors = any(o.had_errors for o in self.outcomes)

