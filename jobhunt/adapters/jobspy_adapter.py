"""Aggregated board adapter backed by python-jobspy (LinkedIn and Indeed)."""

from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

import pandas as pd
from jobspy import scrape_jobs

from jobhunt.domain.models import AGGREGATED_SITES, JobSource, NormalizedJob, SearchOptions
from jobhunt.logging import get_logger
from jobhunt.utils.formatting import format_salary
from jobhunt.utils.timestamps import date_to_timestamp, parse_iso_datetime

from .base import BaseAdapter, is_remote_location

logger = get_logger(__name__, component="adapter")

Scraper = Callable[..., Any]


def _present(value: Any) -> Any:
    """Map pandas missing markers (NaN, NaT, None) to None."""
    if value is None or isinstance(value, (list, tuple, dict)):
        return value
    try:
        return None if pd.isna(value) else value
    except (TypeError, ValueError):
        return value


class JobSpyAdapter(BaseAdapter):
    """Adapter for the LinkedIn/Indeed scraper.

    The scraper is injectable so tests (and alternative backends) can stand
    in for jobspy.scrape_jobs. It must accept jobspy's keyword arguments and
    return a DataFrame or an iterable of row mappings.
    """

    SOURCE = JobSource.JOBSPY

    def __init__(self, scraper: Optional[Scraper] = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self._scraper = scraper if scraper is not None else scrape_jobs

    def build_scrape_kwargs(self, query: str, options: SearchOptions) -> Dict[str, Any]:
        """Translate a search into scraper keyword arguments."""
        if options.site in AGGREGATED_SITES:
            site_name: Any = options.site
        else:
            site_name = list(AGGREGATED_SITES)

        kwargs: Dict[str, Any] = {
            "site_name": site_name,
            "search_term": query,
            "location": options.location,
            "is_remote": options.remote,
            "results_wanted": options.results,
            "job_type": options.job_type,
            "hours_old": options.hours_old,
            "description_format": "markdown",
            "linkedin_fetch_description": True,
        }
        if options.proxy:
            kwargs["proxies"] = [options.proxy]
        return kwargs

    def _fetch(self, query: str, options: SearchOptions, errors: List[str]) -> List[NormalizedJob]:
        kwargs = self.build_scrape_kwargs(query, options)

        logger.info(
            "Scraping aggregated job boards",
            extra={
                "event": "adapter.fetch.request",
                "sites": kwargs["site_name"],
                "results_wanted": options.results,
            },
        )

        rows = self._rows(self._scraper(**kwargs))

        jobs = []
        for row in rows:
            try:
                job = self._transform_row(row)
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(
                    "Failed to transform scraped job",
                    extra={"job_url": row.get("job_url"), "error": str(e)},
                )
                continue
            if job is not None:
                jobs.append(job)

        logger.info(
            "Scraped aggregated job boards",
            extra={"event": "adapter.fetch.succeeded", "total": len(rows), "count": len(jobs)},
        )
        return self._truncate_jobs(jobs, "+".join(AGGREGATED_SITES))

    @staticmethod
    def _rows(frame: Any) -> List[Mapping[str, Any]]:
        if frame is None:
            return []
        if isinstance(frame, pd.DataFrame):
            return frame.to_dict("records")
        return [row for row in frame if isinstance(row, Mapping)]

    def _transform_row(self, row: Mapping[str, Any]) -> Optional[NormalizedJob]:
        """Map one scraper row to a NormalizedJob, or None if it has no URL."""
        job_url = _present(row.get("job_url"))
        if not job_url:
            logger.warning(
                "Skipping scraped job without URL",
                extra={"title": _present(row.get("title"))},
            )
            return None

        location = _present(row.get("location")) or "Unknown"
        is_remote = _present(row.get("is_remote"))
        if is_remote is None:
            is_remote = is_remote_location(location)

        site = _present(row.get("site"))

        return NormalizedJob(
            title=_present(row.get("title")) or "Untitled",
            company=_present(row.get("company")) or "Unknown",
            location=str(location),
            is_remote=bool(is_remote),
            job_url=str(job_url),
            source=self.SOURCE,
            site=str(getattr(site, "value", site)) if site else None,
            date_posted=self._parse_date(_present(row.get("date_posted"))),
            salary=format_salary(
                _present(row.get("min_amount")),
                _present(row.get("max_amount")),
                _present(row.get("interval")),
                _present(row.get("currency")),
            ),
            description=_present(row.get("description")) or "",
        )

    @staticmethod
    def _parse_date(value: Any) -> Optional[datetime]:
        if value is None:
            return None
        if isinstance(value, pd.Timestamp):
            value = value.to_pydatetime()
        if isinstance(value, (date, datetime)):
            return date_to_timestamp(value)
        if isinstance(value, str):
            return parse_iso_datetime(value)
        return None
