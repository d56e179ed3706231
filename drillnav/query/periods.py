"""
Date ranges of rendered time periods.

A chart renders a time dimension bucketed at some granularity; the label of
a bucket is its start (``2024``, ``2024-04``, ``2024-04-01T00:00:00.000``).
`get_period_bounds` turns such a label back into the inclusive range of
calendar dates the bucket spans.
"""

from __future__ import annotations

import re
from calendar import monthrange
from datetime import date, datetime, timedelta

from ..logging import get_logger

__all__ = ["get_period_bounds", "parse_period"]

_YEAR_PATTERN = re.compile(r"^\s*(\d{4})\s*$")
_YEAR_MONTH_PATTERN = re.compile(r"^\s*(\d{4})-(\d{1,2})\s*$")


def parse_period(label: str) -> date | None:
    """Calendar date a period label starts at, or ``None`` if the label is not
    a date. The date is taken as written, no time zone conversion is done."""
    text = label.strip()

    try:
        match = _YEAR_PATTERN.match(text)
        if match:
            return date(int(match.group(1)), 1, 1)

        match = _YEAR_MONTH_PATTERN.match(text)
        if match:
            return date(int(match.group(1)), int(match.group(2)), 1)

        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def get_period_bounds(label: str, granularity: str | None) -> tuple[str, str]:
    """
    Inclusive ``(start, end)`` ISO dates of the period `label` at
    `granularity`.

    Granularity is case-insensitive; anything other than year, quarter,
    month or week is treated as a single day. Weeks start on Monday. A label
    that is not a date is returned unchanged as both bounds.
    """
    label = str(label)
    day = parse_period(label)
    if day is None:
        get_logger().debug(f"Period label '{label}' is not a date, passing through")
        return (label, label)

    granularity = (granularity or "").lower()

    if granularity == "year":
        start = date(day.year, 1, 1)
        end = date(day.year, 12, 31)
    elif granularity == "quarter":
        first_month = (day.month - 1) // 3 * 3 + 1
        last_month = first_month + 2
        start = date(day.year, first_month, 1)
        end = date(day.year, last_month, monthrange(day.year, last_month)[1])
    elif granularity == "month":
        start = date(day.year, day.month, 1)
        end = date(day.year, day.month, monthrange(day.year, day.month)[1])
    elif granularity == "week":
        start = day - timedelta(days=day.weekday())
        end = start + timedelta(days=6)
    else:
        start = end = day

    return (start.isoformat(), end.isoformat())
