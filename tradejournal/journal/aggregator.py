"""Derived statistics over a journal's trade grid.

Zero means "nothing recorded": a cell holding exactly 0 does not count as a
trade and a day whose trades and charge are all 0 is not a completed day.
No rounding is applied here; formatting belongs to the presentation layer.
"""

from typing import Optional

from tradejournal.models import Journal, OverallTotals, WeekBlock, WeekTotals


def compute_week_totals(week: Optional[WeekBlock]) -> WeekTotals:
    """Calculate earning, charges and net profit for one week.

    Args:
        week: Week block, or None for a week that has no data yet.

    Returns:
        WeekTotals for the block.
    """
    if week is None:
        return WeekTotals()

    total_earning = 0.0
    for row in week.trades:
        for value in row:
            total_earning += value

    total_charges = 0.0
    for charge in week.charges:
        total_charges += charge

    return WeekTotals(
        total_earning=total_earning,
        total_charges=total_charges,
        net_profit=total_earning - total_charges,
    )


def day_profit_loss(week: WeekBlock, day_index: int) -> float:
    """Profit or loss for a single date column, net of its charge."""
    return sum(week.column(day_index)) - week.charges[day_index]


def compute_overall_totals(journal: Journal) -> OverallTotals:
    """Calculate journal-wide statistics.

    Walks every date column of every week in week order. A column is a
    completed day if its trades or its charge are non-zero.

    Args:
        journal: Journal to summarise.

    Returns:
        OverallTotals for the journal.
    """
    total_earning = 0.0
    total_charges = 0.0
    completed_days = 0
    total_trades = 0
    win_days = 0
    loss_days = 0

    for _, week in journal.ordered_weeks():
        for day_index in range(len(week.dates)):
            day_total = 0.0
            day_charge = week.charges[day_index]

            for value in week.column(day_index):
                if value != 0:
                    day_total += value
                    total_trades += 1

            if day_total != 0 or day_charge != 0:
                completed_days += 1
                day_pl = day_total - day_charge
                if day_pl > 0:
                    win_days += 1
                elif day_pl < 0:
                    loss_days += 1

            total_earning += day_total
            total_charges += day_charge

    starting_capital = journal.starting_capital
    total_capital = starting_capital + total_earning - total_charges
    per_day_revenue = (
        (total_earning - total_charges) / completed_days if completed_days > 0 else 0.0
    )
    roi = (
        (total_capital - starting_capital) / starting_capital * 100
        if starting_capital > 0
        else 0.0
    )

    return OverallTotals(
        completed_days=completed_days,
        total_capital=total_capital,
        per_day_revenue=per_day_revenue,
        total_earning=total_earning,
        roi=roi,
        total_trades=total_trades,
        win_days=win_days,
        loss_days=loss_days,
        total_charges=total_charges,
    )
