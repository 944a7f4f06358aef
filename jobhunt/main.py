"""Command-line entry point for job-hunt."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from jobhunt.cache import CacheError, CacheStore, InMemoryCacheStore, SqlCacheStore
from jobhunt.config.environment import EnvironmentConfig
from jobhunt.config.exceptions import ConfigurationError
from jobhunt.config.loader import load_config
from jobhunt.config.models import AppConfig
from jobhunt.domain.models import SUPPORTED_JOB_TYPES, SUPPORTED_SITES, SearchOptions
from jobhunt.logging import get_logger
from jobhunt.logging.config import configure_logging
from jobhunt.persistence import DatabaseConnectionError, close_database, init_database
from jobhunt.search import InvalidQueryError, JobSearchService
from jobhunt.utils.formatting import format_search_results

logger = get_logger(__name__, component="cli")

NO_RESULTS_MESSAGE = "No jobs found. Try broadening your search."


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="job-hunt",
        description="job-hunt - search LinkedIn, Indeed, Greenhouse and Lever in one go",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml or config/config.yaml if present)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Search for jobs across all sources")
    search.add_argument("query", nargs="+", help="Search terms")
    search.add_argument("--site", choices=SUPPORTED_SITES, help="Restrict to one board")
    search.add_argument("--location", help="Location filter (default: preferences.location)")
    search.add_argument("--remote", action="store_true", help="Remote jobs only")
    search.add_argument("--results", type=int, default=15, help="Results per source (default: 15)")
    search.add_argument("--hours-old", type=int, default=None, help="Only jobs posted within N hours")
    search.add_argument("--job-type", choices=SUPPORTED_JOB_TYPES, help="Employment type")
    search.add_argument("--proxy", help="Proxy for LinkedIn/Indeed scraping")
    search.add_argument("--json", action="store_true", help="Print results as JSON")
    search.add_argument("--no-cache", action="store_true", help="Skip the on-disk result cache")

    cache = commands.add_parser("cache", help="Manage the search result cache")
    cache.add_argument("action", choices=["clear", "prune"], help="clear: remove all; prune: remove expired")

    return parser


def resolve_log_level(
    log_level_override: Optional[str], app_config: AppConfig, env_config: EnvironmentConfig
) -> str:
    """Apply log level priority: CLI > environment > config."""
    if log_level_override:
        return log_level_override
    if env_config.log_level:
        return env_config.log_level
    return app_config.logging.level or "INFO"


def build_search_options(
    args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig
) -> SearchOptions:
    """Merge CLI flags with configured preferences.

    Proxy priority is --proxy, then JOB_HUNTER_PROXY, then the first
    configured proxy.
    """
    preferences = app_config.preferences
    return SearchOptions(
        site=args.site,
        location=args.location or preferences.location,
        remote=args.remote or preferences.remote,
        results=args.results,
        job_type=args.job_type,
        hours_old=args.hours_old,
        greenhouse_boards=preferences.greenhouse_boards,
        lever_sites=preferences.lever_sites,
        proxy=args.proxy or env_config.proxy or preferences.default_proxy,
    )


def open_cache(app_config: AppConfig) -> CacheStore:
    """Open the on-disk cache, falling back to memory if the database is unusable."""
    try:
        init_database(app_config.cache.database_url)
    except DatabaseConnectionError as e:
        logger.warning(
            f"Cache database unavailable, results will not be persisted: {e}",
            extra={"event": "cache.unavailable", "database_url": app_config.cache.database_url},
        )
        return InMemoryCacheStore()
    return SqlCacheStore()


def run_search(
    args: argparse.Namespace,
    app_config: AppConfig,
    env_config: EnvironmentConfig,
    cache: CacheStore,
) -> int:
    options = build_search_options(args, app_config, env_config)
    query = " ".join(args.query).strip()

    service = JobSearchService(
        cache=cache,
        advanced=app_config.advanced,
        ttl=app_config.cache.ttl_delta,
        max_workers=app_config.advanced.max_workers,
    )

    print(f'Searching for: "{query}"...', file=sys.stderr)
    result = service.run(query, options)
    jobs = result.jobs

    source_count = len({job.site or job.source.value for job in jobs})
    summary = f"{len(jobs)} results from {source_count} source(s)"
    if result.cache_hit:
        summary += " (cached)"
    print(summary, file=sys.stderr)

    if not jobs:
        print(NO_RESULTS_MESSAGE)
        return 0

    if args.json:
        print(json.dumps([job.model_dump(mode="json") for job in jobs], indent=2))
    else:
        print(format_search_results(jobs, query=query, limit=options.results))
    return 0


def run_cache_command(args: argparse.Namespace, app_config: AppConfig, cache: CacheStore) -> int:
    if args.action == "clear":
        removed = cache.clear()
        print(f"Cleared {removed} cached entries.")
    else:
        removed = cache.prune(app_config.cache.ttl_delta)
        print(f"Pruned {removed} expired entries.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for job-hunt.

    Returns:
        Exit code (0 success, 1 configuration or runtime failure, 2 usage error).
    """
    start_time = time.time()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config, env_config = load_config(args.config)

        log_level = resolve_log_level(args.log_level, app_config, env_config)
        environment = os.environ.get("ENVIRONMENT", "local")
        configure_logging(
            level=log_level, format_type=app_config.logging.format, environment=environment
        )

        logger.info(
            "job-hunt starting",
            extra={
                "event": "service.starting",
                "command": args.command,
                "config_path": str(args.config) if args.config else None,
                "log_level": log_level,
            },
        )

        if args.command == "search" and args.no_cache:
            cache: CacheStore = InMemoryCacheStore()
        else:
            cache = open_cache(app_config)

        try:
            if args.command == "search":
                return run_search(args, app_config, env_config, cache)
            return run_cache_command(args, app_config, cache)
        finally:
            close_database()
            logger.info(
                "job-hunt stopped",
                extra={
                    "event": "service.stopping",
                    "uptime_seconds": round(time.time() - start_time, 2),
                },
            )

    except InvalidQueryError as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 2
    except ValidationError as e:
        print(f"Error: invalid search options: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 2
    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except CacheError as e:
        print(f"Cache Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        logger.critical(
            "Fatal error",
            extra={
                "event": "service.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
