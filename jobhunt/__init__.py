"""job-hunt: multi-source job search with normalization, deduplication and caching."""

__version__ = "0.1.0"
