"""Formatters for salaries and console display of search results."""

import math
from datetime import datetime
from typing import TYPE_CHECKING, Optional, Sequence, Union

from .timestamps import ensure_utc, utc_now

if TYPE_CHECKING:
    from jobhunt.domain.models import NormalizedJob

Number = Union[int, float]


def _has_amount(value: Optional[Number]) -> bool:
    """Return True for a usable salary bound (not None, NaN or zero)."""
    if value is None:
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def _format_amount(value: Number) -> str:
    """Format a salary amount with thousands separators.

    Integral values print without decimals; others keep up to 3 places.
    """
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def format_salary(
    min_amount: Optional[Number],
    max_amount: Optional[Number],
    interval: Optional[str],
    currency: Optional[str],
) -> Optional[str]:
    """Format a salary range into a single display string.

    Args:
        min_amount: Lower bound, or None
        max_amount: Upper bound, or None
        interval: Pay interval such as "yearly" or "hourly", or None
        currency: ISO currency code; defaults to "USD"

    Returns:
        Formatted salary, or None when neither bound is present

    Example:
        >>> format_salary(120000, 150000, "yearly", "USD")
        'USD 120,000-150,000/yearly'
        >>> format_salary(None, 150000, "yearly", "USD")
        'up to USD 150,000/yearly'
    """
    has_min = _has_amount(min_amount)
    has_max = _has_amount(max_amount)
    if not has_min and not has_max:
        return None

    curr = currency if isinstance(currency, str) and currency.strip() else "USD"
    per = f"/{interval}" if isinstance(interval, str) and interval.strip() else ""

    if has_min and has_max:
        return f"{curr} {_format_amount(min_amount)}-{_format_amount(max_amount)}{per}"
    if has_min:
        return f"{curr} {_format_amount(min_amount)}+{per}"
    return f"up to {curr} {_format_amount(max_amount)}{per}"


def truncate(text: str, max_len: int) -> str:
    """Truncate text to max_len characters, ending in '...' when cut."""
    if len(text) <= max_len:
        return text
    return text[: max(max_len - 3, 0)] + "..."


def time_ago(dt: datetime, now: Optional[datetime] = None) -> str:
    """Describe how long ago a timestamp was, e.g. '5m ago', '3h ago', '2d ago'."""
    reference = ensure_utc(now) if now else utc_now()
    minutes = int((reference - ensure_utc(dt)).total_seconds() // 60)
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def format_job_result(
    job: "NormalizedJob", index: Optional[int] = None, now: Optional[datetime] = None
) -> str:
    """Format a single search result for console display.

    Produces three lines: title and company, location details, and the
    source tag with the posting URL.
    """
    prefix = f"{index + 1}. " if index is not None else ""
    remote = " (remote)" if job.is_remote else ""
    salary = f" | {job.salary}" if job.salary else ""
    posted = f" | {time_ago(job.date_posted, now)}" if job.date_posted else ""
    tag = job.site or job.source.value

    return (
        f"{prefix}{job.title} @ {job.company}\n"
        f"   {job.location}{remote}{salary}{posted}\n"
        f"   [{tag}] {job.job_url}"
    )


def format_search_results(
    jobs: Sequence["NormalizedJob"],
    query: Optional[str] = None,
    limit: int = 15,
    now: Optional[datetime] = None,
) -> str:
    """Format a list of search results, showing at most `limit` entries."""
    shown = jobs[:limit]

    out = ""
    if query:
        out += f'Search: "{query}" - {len(jobs)} results\n\n'

    out += "\n\n".join(format_job_result(job, i, now) for i, job in enumerate(shown))

    if len(jobs) > limit:
        out += f"\n\n... +{len(jobs) - limit} more"

    return out
