"""Search orchestration: cache lookup, concurrent fan-out, merge and dedup."""

import contextvars
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from typing import Callable, Iterable, List, Optional
from uuid import uuid4

from pydantic import ValidationError

from jobhunt.adapters.base import BaseAdapter
from jobhunt.adapters.exceptions import AdapterConfigurationError
from jobhunt.adapters.factory import build_adapters
from jobhunt.adapters.models import AdapterResult
from jobhunt.cache.base import CacheError, CacheStore
from jobhunt.config.models import AdvancedConfig
from jobhunt.domain.models import SEARCH_CACHE_TTL, NormalizedJob, SearchOptions
from jobhunt.logging import get_logger
from jobhunt.logging.context import log_context

from .exceptions import InvalidQueryError
from .models import SearchRunResult

logger = get_logger(__name__, component="search")

AdapterBuilder = Callable[[SearchOptions, AdvancedConfig], List[BaseAdapter]]


def dedupe_jobs(jobs: Iterable[NormalizedJob]) -> List[NormalizedJob]:
    """Drop jobs whose dedup_key was already seen, keeping the first occurrence.

    Order of the survivors is preserved, and applying the function twice
    gives the same result as applying it once.
    """
    seen = set()
    unique = []
    for job in jobs:
        key = job.dedup_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(job)
    return unique


class JobSearchService:
    """
    Runs a search across every applicable source.

    Each call does at most one cache read (before fan-out) and one cache
    write (after merge). Adapter and cache failures are logged and absorbed;
    the only error a caller sees is InvalidQueryError.
    """

    def __init__(
        self,
        cache: CacheStore,
        adapter_builder: AdapterBuilder = build_adapters,
        advanced: Optional[AdvancedConfig] = None,
        ttl: timedelta = SEARCH_CACHE_TTL,
        max_workers: Optional[int] = None,
    ):
        """
        Initialize the search service.

        Args:
            cache: Store holding previous results
            adapter_builder: Callable returning the adapters for a search
            advanced: HTTP and per-source limits passed to the builder
            ttl: Maximum age of a cached result that is still served
            max_workers: Upper bound on concurrent adapters (default: one per adapter)
        """
        self.cache = cache
        self.adapter_builder = adapter_builder
        self.advanced = advanced or AdvancedConfig()
        self.ttl = ttl
        self.max_workers = max_workers

    def search(self, query: str, options: Optional[SearchOptions] = None) -> List[NormalizedJob]:
        """Return deduplicated jobs for query.

        Raises:
            InvalidQueryError: If query is empty or whitespace-only
        """
        return self.run(query, options).jobs

    def run(self, query: str, options: Optional[SearchOptions] = None) -> SearchRunResult:
        """Execute a search and report how it went.

        Raises:
            InvalidQueryError: If query is empty or whitespace-only
        """
        if not isinstance(query, str) or not query.strip():
            raise InvalidQueryError("Search query cannot be empty")

        options = options or SearchOptions()
        params_key = options.cache_params()
        started = time.monotonic()

        with log_context(search_id=uuid4().hex):
            logger.info(
                f"Search started: {query!r}",
                extra={"event": "search.run.started", "query": query, "site": options.site},
            )

            cached = self._read_cache(query, params_key)
            if cached is not None:
                result = SearchRunResult(
                    jobs=cached,
                    cache_hit=True,
                    duration_seconds=time.monotonic() - started,
                )
                self._log_completed(result)
                return result

            try:
                adapters = self.adapter_builder(options, self.advanced)
            except AdapterConfigurationError as e:
                logger.error(
                    f"Could not build adapters: {e}",
                    extra={"event": "search.run.failed", "error_type": type(e).__name__},
                )
                return SearchRunResult(duration_seconds=time.monotonic() - started, had_errors=True)

            outcomes = self._fan_out(adapters, query, options)
            jobs = dedupe_jobs(job for outcome in outcomes for job in outcome.jobs)

            self._write_cache(query, params_key, jobs)

            result = SearchRunResult(
                jobs=jobs,
                outcomes=outcomes,
                duration_seconds=time.monotonic() - started,
            )
            self._log_completed(result)
            return result

    def _fan_out(
        self, adapters: List[BaseAdapter], query: str, options: SearchOptions
    ) -> List[AdapterResult]:
        """Run every adapter concurrently; results come back in adapter order."""
        if not adapters:
            logger.warning(
                "No sources apply to this search",
                extra={"event": "search.sources.empty", "site": options.site},
            )
            return []

        workers = min(self.max_workers or len(adapters), len(adapters))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="job-hunt") as executor:
            # Each worker runs in a copy of the caller's context so search_id
            # reaches adapter log records.
            futures = [
                executor.submit(contextvars.copy_context().run, adapter.fetch, query, options)
                for adapter in adapters
            ]
            return [self._collect(adapter, future) for adapter, future in zip(adapters, futures)]

    @staticmethod
    def _collect(adapter: BaseAdapter, future) -> AdapterResult:
        try:
            return future.result()
        except Exception as e:
            # fetch() does not raise; a custom adapter that does still only empties its slot
            logger.error(
                f"Source {adapter.name} raised out of fetch(): {e}",
                exc_info=True,
                extra={"event": "adapter.source.failed", "source": adapter.name},
            )
            return AdapterResult.failed(adapter.SOURCE, f"{type(e).__name__}: {e}")

    def _read_cache(self, query: str, params_key: str) -> Optional[List[NormalizedJob]]:
        try:
            value = self.cache.get(query, params_key, self.ttl)
        except CacheError as e:
            logger.warning(
                f"Cache read failed, treating as miss: {e}",
                extra={"event": "search.cache.error", "operation": "get"},
            )
            return None

        if value is None:
            logger.debug("Cache miss", extra={"event": "search.cache.miss"})
            return None

        try:
            jobs = [NormalizedJob.model_validate(item) for item in value]
        except (ValidationError, TypeError) as e:
            logger.warning(
                f"Cached entry is unreadable, treating as miss: {e}",
                extra={"event": "search.cache.error", "operation": "decode"},
            )
            return None

        logger.info(
            f"Serving {len(jobs)} cached results",
            extra={"event": "search.cache.hit", "count": len(jobs)},
        )
        return jobs

    def _write_cache(self, query: str, params_key: str, jobs: List[NormalizedJob]) -> None:
        try:
            self.cache.set(query, params_key, [job.model_dump(mode="json") for job in jobs])
        except CacheError as e:
            logger.warning(
                f"Cache write failed, results not cached: {e}",
                extra={"event": "search.cache.error", "operation": "set"},
            )

    @staticmethod
    def _log_completed(result: SearchRunResult) -> None:
        logger.info(
            "Search completed",
            extra={
                "event": "search.run.completed",
                "duration_ms": int(result.duration_seconds * 1000),
                "cache_hit": result.cache_hit,
                "count": len(result.jobs),
                "total_fetched": result.total_fetched,
                "duplicates_removed": result.duplicates_removed,
                "had_errors": result.had_errors,
            },
        )
