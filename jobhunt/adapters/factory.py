"""Factory for the adapter set that serves one search."""

import logging
from typing import List, Optional

import requests

from jobhunt.config.models import AdvancedConfig
from jobhunt.domain.models import AGGREGATED_SITES, SearchOptions

from .base import BaseAdapter
from .exceptions import AdapterConfigurationError
from .greenhouse import GreenhouseAdapter
from .jobspy_adapter import JobSpyAdapter, Scraper
from .lever import LeverAdapter

logger = logging.getLogger(__name__)


def build_adapters(
    options: SearchOptions,
    advanced_config: AdvancedConfig,
    session: Optional[requests.Session] = None,
    scraper: Optional[Scraper] = None,
) -> List[BaseAdapter]:
    """Instantiate the adapters that apply to a search, in source order.

    - JobSpyAdapter unless options.site names a board it does not serve
    - GreenhouseAdapter iff options.greenhouse_boards is non-empty
    - LeverAdapter iff options.lever_sites is non-empty

    Args:
        options: Search options deciding which sources apply
        advanced_config: Timeout, user-agent and max_jobs settings
        session: Optional HTTP session shared by the board adapters
        scraper: Optional replacement for jobspy.scrape_jobs

    Returns:
        Adapters in order jobspy, greenhouse, lever (possibly empty)

    Raises:
        AdapterConfigurationError: If an adapter rejects the configuration

    Example:
        >>> options = SearchOptions(greenhouse_boards=["stripe"])
        >>> [a.name for a in build_adapters(options, AdvancedConfig())]
        ['jobspy', 'greenhouse']
    """
    common = {
        "timeout": advanced_config.http_request_timeout,
        "user_agent": advanced_config.user_agent,
        "max_jobs": advanced_config.max_jobs_per_source,
        "session": session,
    }

    plan = []
    if options.site is None or options.site in AGGREGATED_SITES:
        plan.append((JobSpyAdapter, {"scraper": scraper}))
    if options.greenhouse_boards:
        plan.append((GreenhouseAdapter, {}))
    if options.lever_sites:
        plan.append((LeverAdapter, {}))

    adapters: List[BaseAdapter] = []
    for adapter_class, extra in plan:
        try:
            adapters.append(adapter_class(**common, **extra))
        except AdapterConfigurationError:
            raise
        except Exception as e:
            raise AdapterConfigurationError(
                f"Failed to create {adapter_class.__name__}: {e}"
            ) from e

    logger.debug(
        "Built adapters for search",
        extra={"adapters": [a.name for a in adapters]},
    )
    return adapters
