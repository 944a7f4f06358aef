"""Greenhouse job board adapter implementation."""

from typing import Iterable, List, Optional

from jobhunt.domain.models import JobSource, NormalizedJob, SearchOptions
from jobhunt.logging import get_logger

from .base import BoardAdapter, is_remote_location, matches_query
from .exceptions import AdapterResponseError

logger = get_logger(__name__, component="adapter")


class GreenhouseAdapter(BoardAdapter):
    """Adapter for Greenhouse public job boards.

    API Details:
        Endpoint: https://boards-api.greenhouse.io/v1/boards/{token}/jobs?content=true
        Method: GET
        Authentication: None (public)
        Response: JSON object with 'jobs' array; 'content' is HTML-escaped
    """

    SOURCE = JobSource.GREENHOUSE
    API_BASE_URL = "https://boards-api.greenhouse.io/v1/boards"

    def _identifiers(self, options: SearchOptions) -> Iterable[str]:
        return options.greenhouse_boards

    def _fetch_identifier(self, identifier: str, query: str) -> List[NormalizedJob]:
        url = f"{self.API_BASE_URL}/{identifier}/jobs"

        logger.info(
            "Fetching jobs from Greenhouse",
            extra={"identifier": identifier, "url": url},
        )

        response = self._make_request(url, params={"content": "true"})

        if not isinstance(response, dict):
            raise AdapterResponseError(
                f"Expected JSON object response, got {type(response).__name__}"
            )

        postings = response.get("jobs", [])
        if not isinstance(postings, list):
            raise AdapterResponseError(
                f"Expected 'jobs' field to be array, got {type(postings).__name__}"
            )

        jobs = []
        for posting in postings:
            if not isinstance(posting, dict):
                continue

            location = self._location_name(posting)
            if not matches_query(query, posting.get("title"), location):
                continue

            if not posting.get("title") or not posting.get("absolute_url"):
                logger.warning(
                    "Skipping Greenhouse posting without title or URL",
                    extra={"identifier": identifier, "posting_id": posting.get("id")},
                )
                continue

            try:
                jobs.append(self._transform_job(posting, identifier, location))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(
                    "Failed to transform Greenhouse posting",
                    extra={
                        "identifier": identifier,
                        "posting_id": posting.get("id"),
                        "error": str(e),
                    },
                )

        logger.info(
            "Fetched jobs from Greenhouse",
            extra={"identifier": identifier, "total": len(postings), "count": len(jobs)},
        )
        return jobs

    @staticmethod
    def _location_name(posting: dict) -> Optional[str]:
        location = posting.get("location")
        if isinstance(location, dict):
            return location.get("name")
        return None

    def _transform_job(self, posting: dict, board: str, location: Optional[str]) -> NormalizedJob:
        """Transform a Greenhouse posting to a NormalizedJob."""
        return NormalizedJob(
            title=posting["title"],
            company=board,
            location=location,
            is_remote=is_remote_location(location),
            job_url=posting["absolute_url"],
            source=self.SOURCE,
            date_posted=self._parse_timestamp(posting.get("updated_at")),
            salary=None,
            description=self._clean_html(posting.get("content")),
        )
