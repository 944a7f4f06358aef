"""Test doubles for adapters, scrapers and clocks.

StaticAdapter and ExplodingAdapter go through BaseAdapter.fetch(), so they
exercise the same timing, log-context and failure handling as the real
adapters without touching the network.
"""

import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from jobhunt.adapters.base import BaseAdapter
from jobhunt.domain.models import JobSource, NormalizedJob, SearchOptions


def make_job(
    url: str,
    title: str = "Software Engineer",
    company: str = "examplecorp",
    source: JobSource = JobSource.GREENHOUSE,
    **overrides,
) -> NormalizedJob:
    """Build a NormalizedJob with sensible defaults."""
    data: Dict[str, Any] = {
        "title": title,
        "company": company,
        "location": "Remote",
        "is_remote": True,
        "job_url": url,
        "source": source,
        "date_posted": datetime(2025, 11, 1, 12, 0, tzinfo=timezone.utc),
        "description": "Build things.",
    }
    data.update(overrides)
    return NormalizedJob(**data)


class StaticAdapter(BaseAdapter):
    """Adapter returning a fixed job list and counting calls."""

    def __init__(
        self,
        jobs: List[NormalizedJob],
        source: JobSource = JobSource.GREENHOUSE,
        errors: Optional[List[str]] = None,
        delay: float = 0.0,
    ):
        super().__init__(timeout=30, user_agent="JobHunt-Test/1.0")
        self.SOURCE = source
        self._jobs = list(jobs)
        self._errors = list(errors or [])
        self._delay = delay
        self.calls = 0
        self.seen_queries: List[str] = []

    def _fetch(self, query: str, options: SearchOptions, errors: List[str]) -> List[NormalizedJob]:
        self.calls += 1
        self.seen_queries.append(query)
        if self._delay:
            threading.Event().wait(self._delay)
        errors.extend(self._errors)
        return list(self._jobs)


class ExplodingAdapter(BaseAdapter):
    """Adapter whose fetch always fails with the given exception."""

    def __init__(self, exc: Exception, source: JobSource = JobSource.LEVER):
        super().__init__(timeout=30, user_agent="JobHunt-Test/1.0")
        self.SOURCE = source
        self._exc = exc
        self.calls = 0

    def _fetch(self, query: str, options: SearchOptions, errors: List[str]) -> List[NormalizedJob]:
        self.calls += 1
        raise self._exc


class FakeClock:
    """Manually advanced UTC clock for cache expiry tests."""

    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeScraper:
    """Stand-in for jobspy.scrape_jobs that records its keyword arguments."""

    def __init__(self, rows: Any = None, exc: Optional[Exception] = None):
        self.rows = rows if rows is not None else []
        self.exc = exc
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, **kwargs) -> Any:
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        return self.rows
