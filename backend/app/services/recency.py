from __future__ import annotations

from datetime import date

DEFAULT_RECENCY_FACTOR = 0.5

# (max months elapsed, factor), smallest window first.
RECENCY_WINDOWS: tuple[tuple[int, float], ...] = (
    (3, 1.0),
    (12, 0.9),
    (24, 0.7),
    (36, 0.5),
    (60, 0.3),
)
STALE_RECENCY_FACTOR = 0.1


def months_elapsed(since: date, today: date) -> int:
    """Whole calendar months from ``since`` to ``today``; a future ``since`` counts as 0."""
    if since >= today:
        return 0
    months = (today.year - since.year) * 12 + (today.month - since.month)
    if today.day < since.day:
        months -= 1
    return max(0, months)


def recency_factor(last_used_date: date | None, today: date) -> float:
    if last_used_date is None:
        return DEFAULT_RECENCY_FACTOR

    months = months_elapsed(last_used_date, today)
    for max_months, factor in RECENCY_WINDOWS:
        if months <= max_months:
            return factor
    return STALE_RECENCY_FACTOR
