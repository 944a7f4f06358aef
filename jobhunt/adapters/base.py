"""Base adapter classes with shared functionality for all job sources.

BaseAdapter owns the failure boundary: fetch() never raises, so one broken
source can only ever empty its own slot in a search. BoardAdapter adds the
per-identifier loop shared by the public ATS job-board APIs.
"""

import html
import logging
import re
import time
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import requests

from jobhunt.domain.models import JobSource, NormalizedJob, SearchOptions
from jobhunt.logging import get_logger
from jobhunt.logging.context import log_context
from jobhunt.utils.timestamps import parse_iso_datetime

from .exceptions import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)
from .models import AdapterResult

logger = get_logger(__name__, component="adapter")

_REMOTE_PATTERN = re.compile(r"remote", re.IGNORECASE)


def matches_query(query: str, *fields: Any) -> bool:
    """Return True if any query token occurs in the joined fields.

    Matching is case-insensitive substring matching, so "engineer" matches
    "Backend Engineer" and "eng" does too.

    Example:
        >>> matches_query("engineer remote", "Backend Engineer", "Remote")
        True
        >>> matches_query("nurse", "Backend Engineer", "Remote")
        False
    """
    tokens = query.lower().split()
    if not tokens:
        return True
    haystack = " ".join(f for f in fields if isinstance(f, str)).lower()
    return any(token in haystack for token in tokens)


def is_remote_location(location: Optional[str]) -> bool:
    """Return True if the location string mentions remote work."""
    return bool(location) and bool(_REMOTE_PATTERN.search(location))


class BaseAdapter(ABC):
    """Base class for all job source adapters.

    Subclasses set SOURCE and implement _fetch(). Callers use fetch() (or
    fetch_jobs()), which times the call, scopes the log context to the
    source and converts any exception into a failed AdapterResult.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
        max_jobs: Maximum jobs to keep per identifier (0 = unlimited)
    """

    SOURCE: JobSource

    def __init__(
        self,
        timeout: int = 30,
        user_agent: str = "JobHunt/1.0",
        max_jobs: int = 100,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize adapter with configuration.

        Args:
            timeout: HTTP request timeout in seconds (range 5-300)
            user_agent: User-Agent header for requests
            max_jobs: Maximum jobs to keep per identifier (0 = unlimited)
            session: Shared HTTP session; a new one is created if omitted

        Raises:
            AdapterConfigurationError: If timeout is outside valid range or user_agent is empty
        """
        if not 5 <= timeout <= 300:
            raise AdapterConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise AdapterConfigurationError("user_agent cannot be empty")
        if max_jobs < 0:
            raise AdapterConfigurationError(f"max_jobs cannot be negative, got: {max_jobs}")

        self.timeout = timeout
        self.user_agent = user_agent.strip()
        self.max_jobs = max_jobs
        self._session = session if session is not None else requests.Session()

    @property
    def name(self) -> str:
        return self.SOURCE.value

    def fetch(self, query: str, options: SearchOptions) -> AdapterResult:
        """Fetch and normalize postings for query. Never raises.

        Returns:
            AdapterResult with ok=False and no jobs if the adapter failed as a
            whole; per-identifier failures are listed in errors with ok=True.
        """
        started = time.monotonic()
        errors: List[str] = []

        with log_context(source=self.name):
            try:
                jobs = self._fetch(query, options, errors)
            except AdapterError as e:
                duration = time.monotonic() - started
                logger.warning(
                    f"Source {self.name} failed: {e}",
                    extra={
                        "event": "adapter.source.failed",
                        "error_type": type(e).__name__,
                        "error": str(e),
                    },
                )
                return AdapterResult.failed(self.SOURCE, str(e), duration)
            except Exception as e:
                duration = time.monotonic() - started
                logger.error(
                    f"Source {self.name} failed unexpectedly: {e}",
                    exc_info=True,
                    extra={
                        "event": "adapter.source.failed",
                        "error_type": type(e).__name__,
                        "error": str(e),
                    },
                )
                return AdapterResult.failed(self.SOURCE, f"{type(e).__name__}: {e}", duration)

        return AdapterResult(
            source=self.SOURCE,
            jobs=jobs,
            ok=True,
            errors=errors,
            duration_seconds=time.monotonic() - started,
        )

    def fetch_jobs(self, query: str, options: SearchOptions) -> List[NormalizedJob]:
        """Convenience wrapper returning only the normalized jobs."""
        return self.fetch(query, options).jobs

    @abstractmethod
    def _fetch(self, query: str, options: SearchOptions, errors: List[str]) -> List[NormalizedJob]:
        """Fetch postings from the source.

        Implementations append a message to errors for each identifier they
        skip. Raising (anything) fails the whole adapter.
        """

    def _make_request(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        """Make an HTTP GET request and return the decoded JSON body.

        Raises:
            AdapterHTTPError: On 4xx/5xx status or transport failure (status_code=0)
            AdapterTimeoutError: On request timeout
            AdapterResponseError: On a body that is not valid JSON
        """
        try:
            logger.debug(
                f"HTTP GET request to {url}",
                extra={
                    "event": "adapter.fetch.request",
                    "url": url,
                    "timeout": self.timeout,
                },
            )

            response = self._session.get(
                url,
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )

            if response.status_code >= 400:
                # 5xx may succeed on the next search, 4xx will not
                is_retryable = response.status_code >= 500
                event_name = "adapter.fetch.retryable_error" if is_retryable else "adapter.fetch.error"
                log_level = logging.WARNING if is_retryable else logging.ERROR

                logger.log(
                    log_level,
                    f"HTTP {response.status_code} error from {url}",
                    extra={
                        "event": event_name,
                        "status_code": response.status_code,
                        "url": url,
                    },
                )

                raise AdapterHTTPError(
                    f"HTTP {response.status_code}: {response.reason}",
                    status_code=response.status_code,
                    url=url,
                )

            try:
                data = response.json()
            except ValueError as e:
                logger.error(
                    f"Failed to parse JSON response from {url}",
                    extra={
                        "event": "adapter.fetch.error",
                        "error_type": "JSONDecodeError",
                        "url": url,
                    },
                )
                raise AdapterResponseError(
                    f"Failed to parse JSON response from {url}: {e}"
                ) from e

            logger.debug(
                "HTTP request succeeded",
                extra={
                    "event": "adapter.fetch.succeeded",
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            return data

        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "adapter.fetch.retryable_error",
                    "error_type": "Timeout",
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            raise AdapterTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "adapter.fetch.error",
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise AdapterHTTPError(
                f"Request to {url} failed: {e}",
                status_code=0,
                url=url,
            ) from e

    def _clean_html(self, html_text: Optional[str]) -> str:
        """Convert an HTML fragment to plain text.

        Entities are decoded before and after tag stripping, so escaped
        markup (as Greenhouse returns it) is stripped and its double-encoded
        entities come out as plain characters. <br> and </p> become line breaks.
        """
        if not html_text:
            return ""

        text = html.unescape(html_text)
        text = re.sub(r"<br\s*/?>", "\n", text, flags=re.IGNORECASE)
        text = re.sub(r"</p>", "\n\n", text, flags=re.IGNORECASE)
        text = re.sub(r"<[^>]+>", " ", text)
        text = html.unescape(text)
        text = re.sub(r"[ \t]+", " ", text)
        text = re.sub(r" ?\n ?", "\n", text)
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()

    def _parse_timestamp(self, timestamp_str: Optional[str]) -> Optional[datetime]:
        """Parse an ISO 8601 timestamp to a UTC datetime, or None."""
        if not timestamp_str:
            return None

        parsed = parse_iso_datetime(timestamp_str)
        if parsed is None:
            logger.warning(
                "Failed to parse timestamp",
                extra={"timestamp": timestamp_str},
            )
        return parsed

    def _truncate_jobs(self, jobs: List[NormalizedJob], identifier: str) -> List[NormalizedJob]:
        """Truncate job list to the max_jobs limit if configured."""
        if self.max_jobs > 0 and len(jobs) > self.max_jobs:
            logger.warning(
                "Truncating jobs to max_jobs limit",
                extra={
                    "identifier": identifier,
                    "total": len(jobs),
                    "max": self.max_jobs,
                },
            )
            return jobs[: self.max_jobs]

        return jobs


class BoardAdapter(BaseAdapter):
    """Adapter over a public per-company job-board API.

    Identifiers (board tokens, site handles) are fetched one after another.
    A failing identifier is skipped whole, so no partial records from it
    reach the result, and the remaining identifiers still run.
    """

    @abstractmethod
    def _identifiers(self, options: SearchOptions) -> Iterable[str]:
        """Identifiers to query for this search."""

    @abstractmethod
    def _fetch_identifier(self, identifier: str, query: str) -> List[NormalizedJob]:
        """Fetch, filter and map the postings of one identifier."""

    def _fetch(self, query: str, options: SearchOptions, errors: List[str]) -> List[NormalizedJob]:
        jobs: List[NormalizedJob] = []

        for identifier in self._identifiers(options):
            try:
                found = self._fetch_identifier(identifier, query)
            except AdapterError as e:
                logger.warning(
                    f"Skipping {self.name} identifier {identifier}: {e}",
                    extra={
                        "event": "adapter.identifier.failed",
                        "identifier": identifier,
                        "error_type": type(e).__name__,
                    },
                )
                errors.append(f"{identifier}: {e}")
                continue
            except Exception as e:
                logger.error(
                    f"Unexpected error fetching {self.name} identifier {identifier}: {e}",
                    extra={
                        "event": "adapter.identifier.failed",
                        "identifier": identifier,
                        "error_type": type(e).__name__,
                    },
                    exc_info=True,
                )
                errors.append(f"{identifier}: {type(e).__name__}: {e}")
                continue

            jobs.extend(self._truncate_jobs(found, identifier))

        return jobs
