"""Shared pytest fixtures."""

import json
import logging
from pathlib import Path

import pytest

from jobhunt.logging.context import clear_log_context
from jobhunt.persistence import close_database, init_database
from tests.helpers import FakeClock

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "ats_responses"

ENV_VARS = ("JOB_HUNTER_PROXY", "LOG_LEVEL", "JOB_HUNTER_CACHE_URL", "ENVIRONMENT")


def load_fixture(name: str):
    """Load a recorded API response from tests/fixtures/ats_responses."""
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep developer .env values out of the tests."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_log_context():
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def memory_db():
    """Initialize an in-memory SQLite database for the test."""
    init_database("sqlite:///:memory:")
    yield
    close_database()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def greenhouse_response():
    return load_fixture("greenhouse_sample_response.json")


@pytest.fixture
def greenhouse_empty_response():
    return load_fixture("greenhouse_empty_response.json")


@pytest.fixture
def lever_response():
    return load_fixture("lever_sample_response.json")


@pytest.fixture
def restore_root_logger():
    """configure_logging replaces root handlers; put the originals back."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
