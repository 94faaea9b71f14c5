"""
Folds caller-supplied worklog entries into hours per account.

Nothing here fetches worklogs; entries arrive already sourced.
"""

from collections import defaultdict
from typing import Dict, Iterable, Mapping

from .calendar import DateLike, as_date
from .schemas import WorklogEntry

SECONDS_PER_HOUR = 3600
UNKNOWN_ACCOUNT = "unknown"


def hours_by_account(
    entries: Iterable[WorklogEntry],
    start: DateLike,
    end: DateLike,
) -> Dict[str, float]:
    """
    Sum logged hours per account for entries started within [start, end].

    An entry belongs to the calendar date written in its own timestamp.
    """
    start, end = as_date(start), as_date(end)
    totals: Dict[str, float] = defaultdict(float)

    for entry in entries:
        if not start <= as_date(entry.started) <= end:
            continue
        totals[entry.account_id or UNKNOWN_ACCOUNT] += entry.time_spent_seconds / SECONDS_PER_HOUR

    return dict(totals)


def merge_hours(*sources: Mapping[str, float]) -> Dict[str, float]:
    """Add several account -> hours mappings together."""
    merged: Dict[str, float] = defaultdict(float)
    for source in sources:
        for account_id, hours in source.items():
            merged[account_id] += hours
    return dict(merged)
