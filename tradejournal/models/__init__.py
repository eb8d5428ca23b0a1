"""Data models for tradejournal."""

from tradejournal.models.journal import (
    DAYS_PER_WEEK,
    JOURNAL_DAYS,
    TRADES_PER_DAY,
    WEEK_COUNT,
    WEEK_KEYS,
    Journal,
    WeekBlock,
)
from tradejournal.models.totals import OverallTotals, WeekTotals
from tradejournal.models.user import User
from tradejournal.models.commit import CommitResult

__all__ = [
    "DAYS_PER_WEEK",
    "JOURNAL_DAYS",
    "TRADES_PER_DAY",
    "WEEK_COUNT",
    "WEEK_KEYS",
    "CommitResult",
    "Journal",
    "OverallTotals",
    "User",
    "WeekBlock",
    "WeekTotals",
]
