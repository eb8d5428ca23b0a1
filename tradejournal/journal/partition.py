"""Date partitioning for 30-day journals.

A journal covers ``start_date`` through ``start_date + 29`` days. The dates
are grouped into six consecutive weeks of five days each, keyed
``week1``..``week6``. All arithmetic is done on calendar dates, so daylight
saving transitions never shift a day.
"""

from datetime import date, timedelta
from typing import Optional

from tradejournal.models import DAYS_PER_WEEK, JOURNAL_DAYS, WEEK_KEYS


def journal_dates(start_date: date) -> list[date]:
    """Return the 30 calendar dates covered by a journal.

    Args:
        start_date: First day of the journal.

    Returns:
        Ordered list of dates starting at ``start_date``.
    """
    return [start_date + timedelta(days=offset) for offset in range(JOURNAL_DAYS)]


def partition_weeks(start_date: date) -> dict[str, list[date]]:
    """Split a journal's dates into week groups.

    Args:
        start_date: First day of the journal.

    Returns:
        Mapping of week key to its ordered dates, in week1..week6 order.
    """
    days = journal_dates(start_date)
    weeks: dict[str, list[date]] = {}
    for index, key in enumerate(WEEK_KEYS):
        first = index * DAYS_PER_WEEK
        weeks[key] = days[first:first + DAYS_PER_WEEK]
    return weeks


def week_for_date(start_date: date, day: date) -> Optional[tuple[str, int]]:
    """Locate a calendar date inside a journal.

    Returns:
        ``(week_key, day_index)`` or None if the date is outside the journal.
    """
    offset = (day - start_date).days
    if offset < 0 or offset >= JOURNAL_DAYS:
        return None
    return WEEK_KEYS[offset // DAYS_PER_WEEK], offset % DAYS_PER_WEEK
