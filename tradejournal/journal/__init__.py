"""Journal core: date partition, edit policy, aggregation and edits."""

from tradejournal.journal.aggregator import (
    compute_overall_totals,
    compute_week_totals,
    day_profit_loss,
)
from tradejournal.journal.alignment import align_journal, align_weeks, locate_date, new_journal
from tradejournal.journal.edits import (
    parse_amount,
    replace_week,
    set_charge,
    set_trade,
    with_starting_capital,
)
from tradejournal.journal.partition import journal_dates, partition_weeks, week_for_date
from tradejournal.journal.policy import EditWindow, is_editable, is_past, is_today

__all__ = [
    "EditWindow",
    "align_journal",
    "align_weeks",
    "compute_overall_totals",
    "compute_week_totals",
    "day_profit_loss",
    "is_editable",
    "is_past",
    "is_today",
    "journal_dates",
    "locate_date",
    "new_journal",
    "parse_amount",
    "partition_weeks",
    "replace_week",
    "set_charge",
    "set_trade",
    "week_for_date",
    "with_starting_capital",
]
