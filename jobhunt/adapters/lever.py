"""Lever postings adapter implementation."""

from typing import Iterable, List

from jobhunt.domain.models import JobSource, NormalizedJob, SearchOptions
from jobhunt.logging import get_logger
from jobhunt.utils.timestamps import unix_ms_to_timestamp

from .base import BoardAdapter, is_remote_location, matches_query
from .exceptions import AdapterResponseError

logger = get_logger(__name__, component="adapter")


class LeverAdapter(BoardAdapter):
    """Adapter for Lever public postings.

    API Details:
        Endpoint: https://api.lever.co/v0/postings/{site}?mode=json
        Method: GET
        Authentication: None (public)
        Response: JSON array of posting objects (not wrapped in object)
    """

    SOURCE = JobSource.LEVER
    API_BASE_URL = "https://api.lever.co/v0/postings"

    def _identifiers(self, options: SearchOptions) -> Iterable[str]:
        return options.lever_sites

    def _fetch_identifier(self, identifier: str, query: str) -> List[NormalizedJob]:
        url = f"{self.API_BASE_URL}/{identifier}"

        logger.info(
            "Fetching jobs from Lever",
            extra={"identifier": identifier, "url": url},
        )

        response = self._make_request(url, params={"mode": "json"})

        # Lever returns a bare array; accept a wrapped object too
        if isinstance(response, list):
            postings = response
        elif isinstance(response, dict):
            postings = response.get("postings", [])
        else:
            raise AdapterResponseError(
                f"Expected JSON array or object, got {type(response).__name__}"
            )

        if not isinstance(postings, list):
            raise AdapterResponseError(
                f"Expected postings to be array, got {type(postings).__name__}"
            )

        jobs = []
        for posting in postings:
            if not isinstance(posting, dict):
                continue

            categories = posting.get("categories")
            if not isinstance(categories, dict):
                categories = {}
            if not matches_query(
                query,
                posting.get("text"),
                categories.get("location"),
                categories.get("team"),
            ):
                continue

            if not posting.get("text") or not (posting.get("hostedUrl") or posting.get("applyUrl")):
                logger.warning(
                    "Skipping Lever posting without title or URL",
                    extra={"identifier": identifier, "posting_id": posting.get("id")},
                )
                continue

            try:
                jobs.append(self._transform_job(posting, identifier))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(
                    "Failed to transform Lever posting",
                    extra={
                        "identifier": identifier,
                        "posting_id": posting.get("id"),
                        "error": str(e),
                    },
                )

        logger.info(
            "Fetched jobs from Lever",
            extra={"identifier": identifier, "total": len(postings), "count": len(jobs)},
        )
        return jobs

    def _transform_job(self, posting: dict, site: str) -> NormalizedJob:
        """Transform a Lever posting to a NormalizedJob.

        Lever returns both HTML and plain text descriptions; plain text wins.
        """
        categories = posting.get("categories")
        location = categories.get("location") if isinstance(categories, dict) else None
        description = posting.get("descriptionPlain") or self._clean_html(posting.get("description"))

        return NormalizedJob(
            title=posting["text"],
            company=site,
            location=location,
            is_remote=is_remote_location(location),
            job_url=posting.get("hostedUrl") or posting["applyUrl"],
            source=self.SOURCE,
            date_posted=unix_ms_to_timestamp(posting.get("createdAt")),
            salary=None,
            description=description,
        )
