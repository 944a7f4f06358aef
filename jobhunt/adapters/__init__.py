"""Job source adapters.

This module provides adapters for each job source:
- Aggregated boards (LinkedIn, Indeed via python-jobspy): jobspy_adapter.JobSpyAdapter
- Greenhouse public boards: greenhouse.GreenhouseAdapter
- Lever public postings: lever.LeverAdapter

Use the factory to get the adapters that apply to a search:
    from jobhunt.adapters import build_adapters
    for adapter in build_adapters(options, advanced_config):
        result = adapter.fetch(query, options)
"""

from .base import BaseAdapter, BoardAdapter, is_remote_location, matches_query
from .exceptions import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)
from .factory import build_adapters
from .greenhouse import GreenhouseAdapter
from .jobspy_adapter import JobSpyAdapter
from .lever import LeverAdapter
from .models import AdapterResult

__all__ = [
    # Base and factory
    "BaseAdapter",
    "BoardAdapter",
    "build_adapters",
    "AdapterResult",
    "matches_query",
    "is_remote_location",
    # Adapters
    "JobSpyAdapter",
    "GreenhouseAdapter",
    "LeverAdapter",
    # Exceptions
    "AdapterError",
    "AdapterHTTPError",
    "AdapterTimeoutError",
    "AdapterResponseError",
    "AdapterConfigurationError",
]
