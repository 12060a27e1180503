"""
Date-range helpers for stop arrival and departure dates.

Stops carry their dates as strings. Anything unparseable is reported as
None and never overlaps, so one bad stop cannot fail a whole match query.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a stop date into a timezone-aware UTC datetime.

    Accepts calendar dates ("2024-06-01") and ISO timestamps
    ("2024-06-01T10:00:00Z"). Calendar dates map to UTC midnight and naive
    timestamps are read as UTC.

    Returns:
        Parsed datetime, or None when the value is missing or malformed
    """
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Unparseable stop date: {value!r}")
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_date(value: datetime) -> str:
    """Format as a UTC calendar date (YYYY-MM-DD)."""
    return value.astimezone(timezone.utc).date().isoformat()


def _parse_range(start: Optional[str], end: Optional[str]) -> Optional[Tuple[datetime, datetime]]:
    start_dt = parse_date(start)
    end_dt = parse_date(end)
    if start_dt is None or end_dt is None:
        return None
    return start_dt, end_dt


def dates_overlap(start1: str, end1: str, start2: str, end2: str) -> bool:
    """
    Check whether two date ranges intersect, bounds inclusive.

    Ranges touching on a single boundary date overlap. Any malformed bound
    makes the ranges non-overlapping.
    """
    first = _parse_range(start1, end1)
    second = _parse_range(start2, end2)
    if first is None or second is None:
        return False

    s1, e1 = first
    s2, e2 = second
    return s1 <= e2 and s2 <= e1


def overlap_window(
    start1: str, end1: str,
    start2: str, end2: str
) -> Optional[Tuple[str, str]]:
    """
    Intersection of two date ranges as (start, end) UTC calendar dates.

    Returns:
        Inclusive window, or None when the ranges do not overlap
    """
    if not dates_overlap(start1, end1, start2, end2):
        return None

    s1, e1 = _parse_range(start1, end1)
    s2, e2 = _parse_range(start2, end2)
    start = max(s1, s2)
    end = min(e1, e2)
    return format_date(start), format_date(end)
