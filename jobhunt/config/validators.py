"""Soft validation for configuration values that are legal but suspicious."""

import warnings
from typing import Any, Dict, List

from .duration import DurationParseError, parse_duration


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """Check a raw configuration dict for likely mistakes.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    preferences = config_dict.get("preferences") or {}
    if isinstance(preferences, dict):
        for key in ("greenhouse_boards", "lever_sites"):
            identifiers = preferences.get(key) or []
            if not isinstance(identifiers, list):
                continue
            normalized = [i.strip() for i in identifiers if isinstance(i, str) and i.strip()]
            duplicates = sorted({i for i in normalized if normalized.count(i) > 1})
            if duplicates:
                warning_messages.append(
                    f"Duplicate entries in preferences.{key} will be ignored: {', '.join(duplicates)}"
                )

    cache = config_dict.get("cache") or {}
    if isinstance(cache, dict) and isinstance(cache.get("ttl"), str):
        try:
            if parse_duration(cache["ttl"]) < 300:
                warning_messages.append(
                    f"Short cache ttl ({cache['ttl']}) will re-query every source on most searches"
                )
        except DurationParseError:
            # Reported as a validation error by the model
            pass

    advanced = config_dict.get("advanced") or {}
    if isinstance(advanced, dict):
        max_jobs = advanced.get("max_jobs_per_source")
        if isinstance(max_jobs, int) and max_jobs > 1000:
            warning_messages.append(
                f"Large max_jobs_per_source ({max_jobs}) may make searches slow"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
