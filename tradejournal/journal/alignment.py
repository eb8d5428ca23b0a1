"""Load-time alignment of stored week data with the date partition."""

import logging
from datetime import date
from typing import Mapping, Optional

from tradejournal.journal.partition import partition_weeks
from tradejournal.models import Journal, WeekBlock

logger = logging.getLogger(__name__)


def align_weeks(start_date: date, stored: Mapping[str, WeekBlock]) -> dict[str, WeekBlock]:
    """Reconcile stored week blocks with a fresh partition.

    Stored weeks are authoritative and kept as they are. Week keys missing
    from storage are synthesized as zero-filled blocks over the partitioned
    dates. Keys outside week1..week6 are dropped.

    Args:
        start_date: Journal start date.
        stored: Week blocks as loaded from the store.

    Returns:
        Complete mapping of all six week keys.
    """
    expected = partition_weeks(start_date)

    for key in stored:
        if key not in expected:
            logger.warning("Dropping unexpected week key %r", key)

    weeks: dict[str, WeekBlock] = {}
    for key, dates in expected.items():
        week = stored.get(key)
        if week is None:
            weeks[key] = WeekBlock.empty(dates)
            continue
        if list(week.dates) != dates:
            logger.warning(
                "Stored dates for %s differ from partition starting %s; keeping stored",
                key,
                start_date.isoformat(),
            )
        weeks[key] = week
    return weeks


def align_journal(journal: Journal) -> Journal:
    """Return the journal with all six week blocks present."""
    return journal.model_copy(
        update={"weeks": align_weeks(journal.start_date, journal.weeks)}
    )


def new_journal(owner: str, start_date: date, starting_capital: float = 0.0) -> Journal:
    """Build an unsaved journal with zero-filled weeks.

    Args:
        owner: Owning user id.
        start_date: First day of the journal.
        starting_capital: Capital before any trade.

    Returns:
        Journal without id or timestamps.
    """
    return Journal(
        owner=owner,
        month=start_date.month,
        year=start_date.year,
        start_date=start_date,
        starting_capital=starting_capital,
        weeks={key: WeekBlock.empty(dates) for key, dates in partition_weeks(start_date).items()},
    )



def locate_date(journal: Journal, day: date) -> Optional[tuple[str, int]]:
    """Find the cell column holding a date in the journal's stored weeks.

    Returns:
        ``(week_key, day_index)`` or None if no week holds the date.
    """
    for key, week in journal.ordered_weeks():
        if day in week.dates:
            return key, week.dates.index(day)
    return None
