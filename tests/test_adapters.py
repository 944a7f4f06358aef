"""Unit tests for job source adapters."""

from datetime import date, datetime, timezone
from unittest.mock import Mock, patch

import pandas as pd
import pytest
import requests

from jobhunt.adapters import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
    GreenhouseAdapter,
    JobSpyAdapter,
    LeverAdapter,
    build_adapters,
    is_remote_location,
    matches_query,
)
from jobhunt.adapters.base import BaseAdapter
from jobhunt.config.models import AdvancedConfig
from jobhunt.domain.models import JobSource, SearchOptions
from jobhunt.logging.context import get_log_context
from tests.helpers import ExplodingAdapter, FakeScraper, StaticAdapter, make_job


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def base_config():
    """Create base advanced config."""
    return AdvancedConfig(
        http_request_timeout=30,
        user_agent="JobHunt/1.0",
        max_jobs_per_source=100,
    )


@pytest.fixture
def greenhouse_options():
    return SearchOptions(greenhouse_boards=["examplecorp"])


@pytest.fixture
def lever_options():
    return SearchOptions(lever_sites=["examplesite"])


def _response(status_code=200, payload=None, reason="OK"):
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    response.json.return_value = payload
    return response


# ============================================================================
# Relevance Filter Tests
# ============================================================================


class TestMatchesQuery:
    """Tests for the token relevance filter."""

    def test_any_token_matches(self):
        """Test a posting is kept when one token matches."""
        assert matches_query("engineer remote", "Backend Engineer", "Remote")

    def test_no_token_matches(self):
        """Test a posting is dropped when no token matches."""
        assert not matches_query("nurse", "Backend Engineer", "Remote")

    def test_case_insensitive_substring(self):
        """Test matching ignores case and matches inside words."""
        assert matches_query("ENG", "Backend Engineer")

    def test_token_matches_secondary_field(self):
        """Test tokens are searched across all fields."""
        assert matches_query("infrastructure", "Platform Engineer", "Remote", "Infrastructure")

    def test_none_fields_ignored(self):
        """Test missing fields do not break matching."""
        assert matches_query("engineer", "Backend Engineer", None)
        assert not matches_query("remote", "Backend Engineer", None)

    def test_non_string_fields_ignored(self):
        """Test mistyped payload values are skipped instead of raising."""
        assert matches_query("engineer", {"en": "Engineer"}, ["Remote"], "Backend Engineer")
        assert not matches_query("remote", {"en": "Remote"}, ["Remote"], 42)


class TestIsRemoteLocation:
    """Tests for remote detection from location strings."""

    @pytest.mark.parametrize("location", ["Remote", "Remote - US", "US (remote)", "REMOTE"])
    def test_remote_locations(self, location):
        assert is_remote_location(location)

    @pytest.mark.parametrize("location", [None, "", "New York, NY", "Unknown"])
    def test_non_remote_locations(self, location):
        assert not is_remote_location(location)


# ============================================================================
# Base Adapter Tests
# ============================================================================


class TestBaseAdapter:
    """Tests for BaseAdapter shared behavior."""

    def test_cannot_instantiate_abstract_class(self):
        """Test that BaseAdapter cannot be instantiated directly."""
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            BaseAdapter(timeout=30)

    def test_clean_html_strips_tags(self):
        """Test HTML cleaning removes tags."""
        adapter = GreenhouseAdapter(timeout=30)

        result = adapter._clean_html("<p>This is <strong>bold</strong> text</p>")

        assert result == "This is bold text"

    def test_clean_html_strips_escaped_markup(self):
        """Test entity-escaped markup is decoded and stripped."""
        adapter = GreenhouseAdapter(timeout=30)

        result = adapter._clean_html("&lt;p&gt;Build APIs &amp;amp; services.&lt;/p&gt;")

        assert result == "Build APIs & services."

    def test_clean_html_handles_br_tags(self):
        """Test <br> tags become newlines."""
        adapter = GreenhouseAdapter(timeout=30)

        result = adapter._clean_html("Line 1<br>Line 2<br/>Line 3")

        assert result == "Line 1\nLine 2\nLine 3"

    def test_clean_html_empty_input(self):
        """Test HTML cleaning with empty or missing input."""
        adapter = GreenhouseAdapter(timeout=30)

        assert adapter._clean_html("") == ""
        assert adapter._clean_html(None) == ""

    def test_parse_timestamp_valid_iso8601(self):
        """Test parsing ISO timestamps with offsets into UTC."""
        adapter = GreenhouseAdapter(timeout=30)

        result = adapter._parse_timestamp("2025-11-03T14:22:10-05:00")

        assert result == datetime(2025, 11, 3, 19, 22, 10, tzinfo=timezone.utc)

    def test_parse_timestamp_none_and_invalid(self):
        """Test missing or invalid timestamps return None."""
        adapter = GreenhouseAdapter(timeout=30)

        assert adapter._parse_timestamp(None) is None
        assert adapter._parse_timestamp("") is None
        assert adapter._parse_timestamp("not-a-date") is None

    def test_init_with_invalid_timeout(self):
        """Test adapter rejects out-of-range timeout."""
        with pytest.raises(AdapterConfigurationError, match="Timeout must be between"):
            GreenhouseAdapter(timeout=1)

    def test_init_with_empty_user_agent(self):
        """Test adapter rejects empty user agent."""
        with pytest.raises(AdapterConfigurationError, match="user_agent cannot be empty"):
            GreenhouseAdapter(timeout=30, user_agent="   ")

    def test_init_with_negative_max_jobs(self):
        with pytest.raises(AdapterConfigurationError):
            GreenhouseAdapter(timeout=30, max_jobs=-1)

    def test_truncate_jobs_respects_limit(self):
        """Test truncation to max_jobs."""
        adapter = GreenhouseAdapter(timeout=30, max_jobs=2)
        jobs = [make_job(f"https://example.com/jobs/{i}") for i in range(5)]

        result = adapter._truncate_jobs(jobs, "examplecorp")

        assert [j.job_url for j in result] == ["https://example.com/jobs/0", "https://example.com/jobs/1"]

    def test_truncate_jobs_unlimited(self):
        """Test max_jobs=0 disables truncation."""
        adapter = GreenhouseAdapter(timeout=30, max_jobs=0)
        jobs = [make_job(f"https://example.com/jobs/{i}") for i in range(5)]

        assert len(adapter._truncate_jobs(jobs, "examplecorp")) == 5

    def test_fetch_converts_unexpected_exception_to_failed_result(self):
        """Test fetch never raises for arbitrary exceptions."""
        adapter = ExplodingAdapter(RuntimeError("boom"))

        result = adapter.fetch("engineer", SearchOptions())

        assert result.ok is False
        assert result.jobs == []
        assert result.errors == ["RuntimeError: boom"]
        assert result.source == JobSource.LEVER

    def test_fetch_converts_adapter_error_to_failed_result(self):
        """Test fetch never raises for adapter errors."""
        adapter = ExplodingAdapter(AdapterTimeoutError("timed out", url="https://example.com"))

        result = adapter.fetch("engineer", SearchOptions())

        assert result.ok is False
        assert result.errors == ["timed out"]

    def test_fetch_success_reports_jobs_and_duration(self):
        """Test successful fetch wraps jobs in an ok result."""
        jobs = [make_job("https://example.com/jobs/1")]
        adapter = StaticAdapter(jobs, errors=["other-board: HTTP 404"])

        result = adapter.fetch("engineer", SearchOptions())

        assert result.ok is True
        assert result.jobs == jobs
        assert result.errors == ["other-board: HTTP 404"]
        assert result.had_errors is True
        assert result.duration_seconds >= 0

    def test_fetch_jobs_returns_job_list(self):
        jobs = [make_job("https://example.com/jobs/1")]
        adapter = StaticAdapter(jobs)

        assert adapter.fetch_jobs("engineer", SearchOptions()) == jobs

    def test_fetch_scopes_log_context_to_source(self):
        """Test the source name is in the log context during fetch only."""
        seen = {}

        class ContextProbe(StaticAdapter):
            def _fetch(self, query, options, errors):
                seen.update(get_log_context())
                return []

        ContextProbe([], source=JobSource.GREENHOUSE).fetch("engineer", SearchOptions())

        assert seen["source"] == "greenhouse"
        assert "source" not in get_log_context()


class TestMakeRequest:
    """Tests for HTTP handling in _make_request."""

    def test_success_returns_json(self):
        """Test a 200 response returns decoded JSON."""
        session = Mock(spec=requests.Session)
        session.get.return_value = _response(payload={"jobs": []})
        adapter = GreenhouseAdapter(timeout=15, user_agent="JobHunt-Test/2.0", session=session)

        result = adapter._make_request("https://example.com/jobs", params={"content": "true"})

        assert result == {"jobs": []}
        session.get.assert_called_once_with(
            "https://example.com/jobs",
            params={"content": "true"},
            headers={"User-Agent": "JobHunt-Test/2.0"},
            timeout=15,
        )

    def test_error_status_raises_http_error(self):
        """Test 4xx responses raise AdapterHTTPError with the status code."""
        session = Mock(spec=requests.Session)
        session.get.return_value = _response(status_code=404, reason="Not Found")
        adapter = GreenhouseAdapter(timeout=30, session=session)

        with pytest.raises(AdapterHTTPError) as exc_info:
            adapter._make_request("https://example.com/jobs")

        assert exc_info.value.status_code == 404
        assert exc_info.value.url == "https://example.com/jobs"

    def test_server_error_raises_http_error(self):
        session = Mock(spec=requests.Session)
        session.get.return_value = _response(status_code=503, reason="Service Unavailable")
        adapter = GreenhouseAdapter(timeout=30, session=session)

        with pytest.raises(AdapterHTTPError, match="HTTP 503"):
            adapter._make_request("https://example.com/jobs")

    def test_timeout_raises_timeout_error(self):
        """Test request timeouts raise AdapterTimeoutError."""
        session = Mock(spec=requests.Session)
        session.get.side_effect = requests.exceptions.Timeout("slow")
        adapter = GreenhouseAdapter(timeout=30, session=session)

        with pytest.raises(AdapterTimeoutError):
            adapter._make_request("https://example.com/jobs")

    def test_connection_error_raises_http_error_with_status_zero(self):
        """Test transport failures raise AdapterHTTPError(status_code=0)."""
        session = Mock(spec=requests.Session)
        session.get.side_effect = requests.exceptions.ConnectionError("refused")
        adapter = GreenhouseAdapter(timeout=30, session=session)

        with pytest.raises(AdapterHTTPError) as exc_info:
            adapter._make_request("https://example.com/jobs")

        assert exc_info.value.status_code == 0

    def test_invalid_json_raises_response_error(self):
        """Test an undecodable body raises AdapterResponseError."""
        session = Mock(spec=requests.Session)
        response = _response()
        response.json.side_effect = ValueError("Expecting value")
        session.get.return_value = response
        adapter = GreenhouseAdapter(timeout=30, session=session)

        with pytest.raises(AdapterResponseError):
            adapter._make_request("https://example.com/jobs")


# ============================================================================
# Greenhouse Adapter Tests
# ============================================================================


class TestGreenhouseAdapter:
    """Tests for GreenhouseAdapter."""

    def test_fetch_jobs_success(self, greenhouse_options, greenhouse_response):
        """Test successful job fetch and mapping from Greenhouse."""
        adapter = GreenhouseAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value=greenhouse_response) as mock_request:
            jobs = adapter.fetch_jobs("engineer", greenhouse_options)

        mock_request.assert_called_once_with(
            "https://boards-api.greenhouse.io/v1/boards/examplecorp/jobs",
            params={"content": "true"},
        )
        assert [j.title for j in jobs] == [
            "Senior Software Engineer",
            "Backend Engineer",
            "Site Reliability Engineer",
        ]

        first = jobs[0]
        assert first.company == "examplecorp"
        assert first.location == "San Francisco, CA"
        assert first.is_remote is False
        assert first.source == JobSource.GREENHOUSE
        assert first.salary is None
        assert first.date_posted == datetime(2025, 11, 3, 19, 22, 10, tzinfo=timezone.utc)
        assert "<" not in first.description
        assert "Senior Software Engineer" in first.description
        assert "PostgreSQL" in first.description

    def test_fetch_jobs_remote_detection(self, greenhouse_options, greenhouse_response):
        """Test is_remote is derived from the location name."""
        adapter = GreenhouseAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value=greenhouse_response):
            jobs = adapter.fetch_jobs("backend", greenhouse_options)

        assert len(jobs) == 1
        assert jobs[0].is_remote is True
        assert jobs[0].description == "Build APIs & services."

    def test_fetch_jobs_missing_location(self, greenhouse_options, greenhouse_response):
        """Test postings without a location get the default."""
        adapter = GreenhouseAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value=greenhouse_response):
            jobs = adapter.fetch_jobs("reliability", greenhouse_options)

        assert len(jobs) == 1
        assert jobs[0].location == "Unknown"
        assert jobs[0].date_posted is None
        assert jobs[0].description == ""

    def test_filter_matches_location(self, greenhouse_options, greenhouse_response):
        """Test the relevance filter also searches location names."""
        adapter = GreenhouseAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value=greenhouse_response):
            jobs = adapter.fetch_jobs("remote", greenhouse_options)

        assert [j.title for j in jobs] == ["Backend Engineer"]

    def test_filter_excludes_unrelated_postings(self, greenhouse_options, greenhouse_response):
        adapter = GreenhouseAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value=greenhouse_response):
            jobs = adapter.fetch_jobs("nurse", greenhouse_options)

        assert jobs == []

    def test_posting_without_url_is_skipped(self, greenhouse_options, greenhouse_response):
        """Test postings missing absolute_url are dropped without failing the board."""
        adapter = GreenhouseAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value=greenhouse_response):
            result = adapter.fetch("data", greenhouse_options)

        assert result.jobs == []
        assert result.ok is True
        assert result.errors == []

    def test_fetch_jobs_empty_response(self, greenhouse_options, greenhouse_empty_response):
        """Test fetch with empty jobs array."""
        adapter = GreenhouseAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value=greenhouse_empty_response):
            assert adapter.fetch_jobs("engineer", greenhouse_options) == []

    def test_failing_board_is_isolated(self, greenhouse_response):
        """Test one failing board does not affect the others."""
        adapter = GreenhouseAdapter(timeout=30)
        options = SearchOptions(greenhouse_boards=["broken", "examplecorp"])

        def fake_request(url, params=None):
            if "/broken/" in url:
                raise AdapterHTTPError("HTTP 404: Not Found", status_code=404, url=url)
            return greenhouse_response

        with patch.object(adapter, "_make_request", side_effect=fake_request):
            result = adapter.fetch("engineer", options)

        assert result.ok is True
        assert len(result.jobs) == 3
        assert all(j.company == "examplecorp" for j in result.jobs)
        assert result.errors == ["broken: HTTP 404: Not Found"]

    def test_mistyped_posting_fields_do_not_drop_other_boards(self, greenhouse_response):
        """Test a board whose postings carry wrong field types keeps the others."""
        adapter = GreenhouseAdapter(timeout=30)
        options = SearchOptions(greenhouse_boards=["examplecorp", "mistyped"])
        mistyped = {
            "jobs": [
                {
                    "id": 1,
                    "title": {"en": "Engineer"},
                    "location": {"name": ["Remote"]},
                    "absolute_url": "https://boards.greenhouse.io/mistyped/jobs/1",
                }
            ]
        }

        def fake_request(url, params=None):
            if "/mistyped/" in url:
                return mistyped
            return greenhouse_response

        with patch.object(adapter, "_make_request", side_effect=fake_request):
            result = adapter.fetch("engineer", options)

        assert result.ok is True
        assert len(result.jobs) == 3
        assert all(j.company == "examplecorp" for j in result.jobs)

    def test_unexpected_error_skips_only_that_board(self, greenhouse_response):
        """Test a non-adapter exception is recorded per board, not per adapter."""
        adapter = GreenhouseAdapter(timeout=30)
        options = SearchOptions(greenhouse_boards=["broken", "examplecorp"])

        def fake_request(url, params=None):
            if "/broken/" in url:
                raise RuntimeError("boom")
            return greenhouse_response

        with patch.object(adapter, "_make_request", side_effect=fake_request):
            result = adapter.fetch("engineer", options)

        assert result.ok is True
        assert len(result.jobs) == 3
        assert result.errors == ["broken: RuntimeError: boom"]

    def test_malformed_response_skips_board(self, greenhouse_options):
        """Test a non-object payload is recorded as a board error."""
        adapter = GreenhouseAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value=["not", "an", "object"]):
            result = adapter.fetch("engineer", greenhouse_options)

        assert result.jobs == []
        assert len(result.errors) == 1
        assert "Expected JSON object" in result.errors[0]

    def test_jobs_field_not_a_list_skips_board(self, greenhouse_options):
        adapter = GreenhouseAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value={"jobs": "nope"}):
            result = adapter.fetch("engineer", greenhouse_options)

        assert result.jobs == []
        assert len(result.errors) == 1

    def test_fetch_jobs_truncates_to_max(self, greenhouse_response):
        """Test max_jobs applies per board after filtering."""
        adapter = GreenhouseAdapter(timeout=30, max_jobs=1)
        options = SearchOptions(greenhouse_boards=["one", "two"])

        with patch.object(adapter, "_make_request", return_value=greenhouse_response):
            jobs = adapter.fetch_jobs("engineer", options)

        assert [j.company for j in jobs] == ["one", "two"]
        assert all(j.title == "Senior Software Engineer" for j in jobs)


# ============================================================================
# Lever Adapter Tests
# ============================================================================


class TestLeverAdapter:
    """Tests for LeverAdapter."""

    def test_fetch_jobs_success(self, lever_options, lever_response):
        """Test successful job fetch and mapping from Lever."""
        adapter = LeverAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value=lever_response) as mock_request:
            jobs = adapter.fetch_jobs("engineer", lever_options)

        mock_request.assert_called_once_with(
            "https://api.lever.co/v0/postings/examplesite",
            params={"mode": "json"},
        )
        assert [j.title for j in jobs] == ["Platform Engineer", "Support Specialist"]

        first = jobs[0]
        assert first.company == "examplesite"
        assert first.location == "Remote"
        assert first.is_remote is True
        assert first.job_url == "https://jobs.lever.co/examplesite/a1b2c3d4-0001"
        assert first.source == JobSource.LEVER
        assert first.description == "Run the platform that runs everything."

    def test_fetch_jobs_unix_timestamp_conversion(self, lever_options, lever_response):
        """Test createdAt milliseconds are converted to UTC datetimes."""
        adapter = LeverAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value=lever_response):
            jobs = adapter.fetch_jobs("platform", lever_options)

        assert jobs[0].date_posted == datetime.fromtimestamp(1730635200, tz=timezone.utc)

    def test_apply_url_fallback_and_html_description(self, lever_options, lever_response):
        """Test applyUrl and HTML description are used when preferred fields are empty."""
        adapter = LeverAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value=lever_response):
            jobs = adapter.fetch_jobs("specialist", lever_options)

        assert len(jobs) == 1
        assert jobs[0].job_url == "https://jobs.lever.co/examplesite/a1b2c3d4-0003/apply"
        assert jobs[0].description == "Help customers & engineers."

    def test_filter_matches_team(self, lever_options, lever_response):
        """Test the relevance filter searches the team category."""
        adapter = LeverAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value=lever_response):
            jobs = adapter.fetch_jobs("sales", lever_options)

        assert [j.title for j in jobs] == ["Account Executive"]

    def test_fetch_jobs_dict_response_fallback(self, lever_options, lever_response):
        """Test a wrapped {"postings": [...]} payload is accepted."""
        adapter = LeverAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value={"postings": lever_response}):
            jobs = adapter.fetch_jobs("engineer", lever_options)

        assert len(jobs) == 2

    def test_fetch_jobs_empty_array_response(self, lever_options):
        adapter = LeverAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value=[]):
            assert adapter.fetch_jobs("engineer", lever_options) == []

    def test_unexpected_payload_skips_site(self, lever_options):
        """Test a scalar payload is recorded as a site error."""
        adapter = LeverAdapter(timeout=30)

        with patch.object(adapter, "_make_request", return_value="oops"):
            result = adapter.fetch("engineer", lever_options)

        assert result.ok is True
        assert result.jobs == []
        assert "Expected JSON array or object" in result.errors[0]

    def test_failing_site_is_isolated(self, lever_response):
        adapter = LeverAdapter(timeout=30)
        options = SearchOptions(lever_sites=["examplesite", "down"])

        def fake_request(url, params=None):
            if url.endswith("/down"):
                raise AdapterTimeoutError("timed out", url=url)
            return lever_response

        with patch.object(adapter, "_make_request", side_effect=fake_request):
            result = adapter.fetch("engineer", options)

        assert len(result.jobs) == 2
        assert result.errors == ["down: timed out"]

    def test_mistyped_location_does_not_drop_other_sites(self, lever_response):
        """Test a posting with a list location is skipped and other sites survive."""
        adapter = LeverAdapter(timeout=30)
        options = SearchOptions(lever_sites=["examplesite", "mistyped"])
        mistyped = [
            {
                "id": "x1",
                "text": "Engineer",
                "categories": {"location": ["Remote"], "team": "Platform"},
                "hostedUrl": "https://jobs.lever.co/mistyped/x1",
            }
        ]

        def fake_request(url, params=None):
            if url.endswith("/mistyped"):
                return mistyped
            return lever_response

        with patch.object(adapter, "_make_request", side_effect=fake_request):
            result = adapter.fetch("engineer", options)

        assert result.ok is True
        assert len(result.jobs) == 2
        assert all(j.company == "examplesite" for j in result.jobs)


# ============================================================================
# JobSpy Adapter Tests
# ============================================================================


@pytest.fixture
def scraped_frame():
    return pd.DataFrame(
        [
            {
                "site": "indeed",
                "title": "Python Developer",
                "company": "Acme",
                "location": "Austin, TX",
                "is_remote": False,
                "job_url": "https://www.indeed.com/viewjob?jk=abc123",
                "date_posted": date(2025, 11, 2),
                "min_amount": 100000.0,
                "max_amount": 130000.0,
                "interval": "yearly",
                "currency": "USD",
                "description": "Write **Python**.",
            },
            {
                "site": "linkedin",
                "title": None,
                "company": None,
                "location": "Remote",
                "is_remote": None,
                "job_url": "https://www.linkedin.com/jobs/view/987",
                "date_posted": None,
                "min_amount": float("nan"),
                "max_amount": float("nan"),
                "interval": None,
                "currency": None,
                "description": None,
            },
            {
                "site": "linkedin",
                "title": "No Link",
                "company": "Ghost",
                "location": "Nowhere",
                "is_remote": False,
                "job_url": None,
                "date_posted": None,
                "min_amount": float("nan"),
                "max_amount": float("nan"),
                "interval": None,
                "currency": None,
                "description": "",
            },
        ]
    )


class TestJobSpyAdapter:
    """Tests for JobSpyAdapter."""

    def test_scraper_called_with_both_sites_by_default(self):
        """Test default scraper arguments."""
        scraper = FakeScraper()
        adapter = JobSpyAdapter(scraper=scraper, timeout=30)

        adapter.fetch("python developer", SearchOptions())

        assert scraper.calls == [
            {
                "site_name": ["linkedin", "indeed"],
                "search_term": "python developer",
                "location": None,
                "is_remote": False,
                "results_wanted": 15,
                "job_type": None,
                "hours_old": None,
                "description_format": "markdown",
                "linkedin_fetch_description": True,
            }
        ]

    def test_single_site_and_proxy(self):
        """Test site restriction and proxy are passed through."""
        scraper = FakeScraper()
        adapter = JobSpyAdapter(scraper=scraper, timeout=30)
        options = SearchOptions(
            site="linkedin",
            location="Berlin",
            remote=True,
            results=5,
            job_type="contract",
            hours_old=24,
            proxy="user:pass@proxy.example.com:8080",
        )

        adapter.fetch("data engineer", options)

        kwargs = scraper.calls[0]
        assert kwargs["site_name"] == "linkedin"
        assert kwargs["location"] == "Berlin"
        assert kwargs["is_remote"] is True
        assert kwargs["results_wanted"] == 5
        assert kwargs["job_type"] == "contract"
        assert kwargs["hours_old"] == 24
        assert kwargs["proxies"] == ["user:pass@proxy.example.com:8080"]

    def test_dataframe_rows_are_mapped(self, scraped_frame):
        """Test DataFrame rows map to NormalizedJob with defaults for missing values."""
        adapter = JobSpyAdapter(scraper=FakeScraper(scraped_frame), timeout=30)

        result = adapter.fetch("python", SearchOptions())

        assert result.ok is True
        assert len(result.jobs) == 2

        first, second = result.jobs
        assert first.title == "Python Developer"
        assert first.company == "Acme"
        assert first.site == "indeed"
        assert first.source == JobSource.JOBSPY
        assert first.is_remote is False
        assert first.date_posted == datetime(2025, 11, 2, tzinfo=timezone.utc)
        assert first.salary == "USD 100,000-130,000/yearly"
        assert first.description == "Write **Python**."

        assert second.title == "Untitled"
        assert second.company == "Unknown"
        assert second.location == "Remote"
        assert second.is_remote is True
        assert second.site == "linkedin"
        assert second.date_posted is None
        assert second.salary is None
        assert second.description == ""

    def test_iterable_of_mappings_is_accepted(self):
        rows = [
            {
                "site": "linkedin",
                "title": "ML Engineer",
                "company": "Initech",
                "location": "Toronto, ON",
                "job_url": "https://www.linkedin.com/jobs/view/555",
                "date_posted": "2025-11-01",
                "min_amount": 90,
                "max_amount": None,
                "interval": "hourly",
                "currency": "CAD",
            }
        ]
        adapter = JobSpyAdapter(scraper=FakeScraper(rows), timeout=30)

        jobs = adapter.fetch_jobs("ml", SearchOptions())

        assert len(jobs) == 1
        assert jobs[0].is_remote is False
        assert jobs[0].salary == "CAD 90+/hourly"
        assert jobs[0].date_posted == datetime(2025, 11, 1, tzinfo=timezone.utc)

    def test_bad_row_is_skipped(self):
        """Test a row that fails validation does not drop the others."""
        rows = [
            {"title": 12345, "job_url": "https://www.indeed.com/viewjob?jk=bad"},
            {"title": "Good Row", "job_url": "https://www.indeed.com/viewjob?jk=good"},
        ]
        adapter = JobSpyAdapter(scraper=FakeScraper(rows), timeout=30)

        jobs = adapter.fetch_jobs("row", SearchOptions())

        assert [j.title for j in jobs] == ["Good Row"]

    def test_scraper_failure_fails_adapter(self):
        """Test scraper exceptions become a failed result."""
        adapter = JobSpyAdapter(scraper=FakeScraper(exc=RuntimeError("blocked")), timeout=30)

        result = adapter.fetch("python", SearchOptions())

        assert result.ok is False
        assert result.jobs == []
        assert result.errors == ["RuntimeError: blocked"]

    def test_none_result_is_empty(self):
        adapter = JobSpyAdapter(scraper=lambda **kwargs: None, timeout=30)

        assert adapter.fetch_jobs("python", SearchOptions()) == []


# ============================================================================
# Factory Tests
# ============================================================================


class TestBuildAdapters:
    """Tests for the adapter factory."""

    def test_default_options_use_only_aggregated_board(self, base_config):
        """Test no configured boards means jobspy only."""
        adapters = build_adapters(SearchOptions(), base_config)

        assert [type(a) for a in adapters] == [JobSpyAdapter]

    def test_all_sources_in_order(self, base_config):
        """Test adapters come back in source order."""
        options = SearchOptions(greenhouse_boards=["stripe"], lever_sites=["netflix"])

        adapters = build_adapters(options, base_config)

        assert [type(a) for a in adapters] == [JobSpyAdapter, GreenhouseAdapter, LeverAdapter]

    @pytest.mark.parametrize("site", ["greenhouse", "lever"])
    def test_board_site_skips_aggregated_board(self, base_config, site):
        """Test a greenhouse/lever site excludes the aggregated board."""
        options = SearchOptions(site=site, greenhouse_boards=["stripe"], lever_sites=["netflix"])

        adapters = build_adapters(options, base_config)

        assert JobSpyAdapter not in [type(a) for a in adapters]
        assert [type(a) for a in adapters] == [GreenhouseAdapter, LeverAdapter]

    @pytest.mark.parametrize("site", ["linkedin", "indeed"])
    def test_aggregated_site_keeps_boards(self, base_config, site):
        options = SearchOptions(site=site, greenhouse_boards=["stripe"])

        adapters = build_adapters(options, base_config)

        assert [type(a) for a in adapters] == [JobSpyAdapter, GreenhouseAdapter]

    def test_unserved_site_skips_aggregated_board(self, base_config):
        """Test a site jobspy does not scrape excludes it but keeps the boards."""
        options = SearchOptions(site="monster", greenhouse_boards=["stripe"])

        adapters = build_adapters(options, base_config)

        assert [type(a) for a in adapters] == [GreenhouseAdapter]

    def test_board_site_without_boards_yields_nothing(self, base_config):
        adapters = build_adapters(SearchOptions(site="lever"), base_config)

        assert adapters == []

    def test_factory_passes_advanced_config(self):
        """Test factory passes advanced config and shared dependencies."""
        custom_config = AdvancedConfig(
            http_request_timeout=60,
            user_agent="CustomAgent/2.0",
            max_jobs_per_source=500,
        )
        session = Mock(spec=requests.Session)
        scraper = FakeScraper()

        adapters = build_adapters(
            SearchOptions(greenhouse_boards=["stripe"]), custom_config, session=session, scraper=scraper
        )

        for adapter in adapters:
            assert adapter.timeout == 60
            assert adapter.user_agent == "CustomAgent/2.0"
            assert adapter.max_jobs == 500
            assert adapter._session is session
        assert adapters[0]._scraper is scraper


# ============================================================================
# Exception Tests
# ============================================================================


class TestAdapterExceptions:
    """Tests for adapter exception hierarchy."""

    def test_adapter_http_error_attributes(self):
        error = AdapterHTTPError("Test error", status_code=404, url="https://example.com")

        assert error.status_code == 404
        assert error.url == "https://example.com"

    def test_exception_inheritance(self):
        assert issubclass(AdapterHTTPError, AdapterError)
        assert issubclass(AdapterTimeoutError, AdapterError)
        assert issubclass(AdapterResponseError, AdapterError)
        assert issubclass(AdapterConfigurationError, AdapterError)
