"""Property-based tests for journal statistics.

**Feature: trading-journal**
"""

from datetime import date

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tests.strategies import journals, start_dates
from tradejournal.journal import (
    compute_overall_totals,
    compute_week_totals,
    day_profit_loss,
    new_journal,
    replace_week,
    set_charge,
    set_trade,
)
from tradejournal.models import TRADES_PER_DAY, WEEK_KEYS, Journal, WeekBlock


def _journal_with_day(capital: float, trades: list[float], charge: float) -> Journal:
    """A fresh journal whose first day holds the given entries."""
    journal = new_journal("user-1", date(2025, 1, 1), capital)
    week = journal.weeks["week1"]
    for row, value in enumerate(trades):
        week = set_trade(week, row, 0, value)
    week = set_charge(week, 0, charge)
    return replace_week(journal, "week1", week)


class TestWeekTotals:
    """
    **Feature: trading-journal, Property 4: Week Totals**

    *For any* week block, earning is the sum of every trade cell, charges
    the sum of every charge, and net profit their difference.
    """

    @given(start=start_dates)
    @settings(max_examples=30)
    def test_empty_week_is_zero(self, start: date):
        week = new_journal("user-1", start).weeks["week1"]
        totals = compute_week_totals(week)

        assert totals.total_earning == 0
        assert totals.total_charges == 0
        assert totals.net_profit == 0

    def test_missing_week_is_zero(self):
        totals = compute_week_totals(None)

        assert (totals.total_earning, totals.total_charges, totals.net_profit) == (0, 0, 0)

    @given(journal=journals())
    @settings(max_examples=50)
    def test_week_sums(self, journal: Journal):
        for key, week in journal.ordered_weeks():
            totals = compute_week_totals(week)
            expected_earning = sum(value for row in week.trades for value in row)
            expected_charges = sum(week.charges)

            assert totals.total_earning == pytest.approx(expected_earning, abs=1e-6)
            assert totals.total_charges == pytest.approx(expected_charges, abs=1e-6)
            assert totals.net_profit == pytest.approx(totals.total_earning - totals.total_charges)


class TestOverallTotals:
    """
    **Feature: trading-journal, Property 5: Overall Totals Consistency**

    *For any* journal, overall earning and charges equal the sums of the
    per-week totals, and recomputing yields identical results.
    """

    @given(journal=journals())
    @settings(max_examples=100)
    def test_overall_matches_sum_of_weeks(self, journal: Journal):
        overall = compute_overall_totals(journal)
        weekly = [compute_week_totals(week) for _, week in journal.ordered_weeks()]

        assert overall.total_earning == pytest.approx(
            sum(w.total_earning for w in weekly), rel=1e-9, abs=1e-6
        )
        assert overall.total_charges == pytest.approx(
            sum(w.total_charges for w in weekly), rel=1e-9, abs=1e-6
        )

    @given(journal=journals())
    @settings(max_examples=50)
    def test_idempotent(self, journal: Journal):
        assert compute_overall_totals(journal) == compute_overall_totals(journal)

    @given(journal=journals())
    @settings(max_examples=100)
    def test_counts(self, journal: Journal):
        overall = compute_overall_totals(journal)
        non_zero_cells = sum(
            1
            for _, week in journal.ordered_weeks()
            for row in week.trades
            for value in row
            if value != 0
        )

        assert overall.total_trades == non_zero_cells
        assert overall.win_days + overall.loss_days <= overall.completed_days
        assert overall.completed_days <= 30

    @given(journal=journals())
    @settings(max_examples=100)
    def test_capital_and_ratios(self, journal: Journal):
        overall = compute_overall_totals(journal)
        net = overall.total_earning - overall.total_charges

        assert overall.total_capital == pytest.approx(journal.starting_capital + net)
        if overall.completed_days > 0:
            assert overall.per_day_revenue == pytest.approx(net / overall.completed_days)
        else:
            assert overall.per_day_revenue == 0
        if journal.starting_capital > 0:
            assert overall.roi == pytest.approx(
                (overall.total_capital - journal.starting_capital) / journal.starting_capital * 100
            )
        else:
            assert overall.roi == 0


class TestCompletedDays:
    """
    **Feature: trading-journal, Property 6: Completed Day Monotonicity**

    *For any* journal of gains and charges, recording another non-zero
    gain never lowers the completed-day count, and zero cells never
    change it.
    """

    @given(
        journal=journals(
            cell=st.one_of(st.just(0.0), st.floats(min_value=0.01, max_value=10000.0)),
        ),
        week_key=st.sampled_from(WEEK_KEYS),
        row=st.integers(min_value=0, max_value=TRADES_PER_DAY - 1),
        day_index=st.integers(min_value=0, max_value=4),
        value=st.floats(min_value=0.01, max_value=10000.0),
    )
    @settings(max_examples=100)
    def test_adding_gain_never_decreases(
        self, journal: Journal, week_key: str, row: int, day_index: int, value: float
    ):
        before = compute_overall_totals(journal).completed_days
        week = set_trade(journal.weeks[week_key], row, day_index, value)
        after = compute_overall_totals(replace_week(journal, week_key, week)).completed_days

        assert after >= before

    @given(
        journal=journals(),
        week_key=st.sampled_from(WEEK_KEYS),
        row=st.integers(min_value=0, max_value=TRADES_PER_DAY - 1),
        day_index=st.integers(min_value=0, max_value=4),
    )
    @settings(max_examples=50)
    def test_zero_cell_on_empty_day_is_ignored(
        self, journal: Journal, week_key: str, row: int, day_index: int
    ):
        empty = WeekBlock.empty(journal.weeks[week_key].dates)
        journal = replace_week(journal, week_key, empty)
        before = compute_overall_totals(journal)
        after = compute_overall_totals(
            replace_week(journal, week_key, set_trade(empty, row, day_index, 0.0))
        )

        assert after.completed_days == before.completed_days
        assert after.total_trades == before.total_trades


class TestWorkedExamples:
    """Concrete scenarios for the statistics rules."""

    def test_single_winning_day(self):
        """Trades 100 and -20 with charge 5 is one winning day of two trades."""
        journal = _journal_with_day(10000.0, [100.0, -20.0, 0.0, 0.0, 0.0], 5.0)
        overall = compute_overall_totals(journal)

        assert overall.completed_days == 1
        assert overall.win_days == 1
        assert overall.loss_days == 0
        assert overall.total_trades == 2
        assert overall.total_earning == 80.0
        assert overall.total_charges == 5.0
        assert overall.total_capital == 10075.0
        assert overall.per_day_revenue == 75.0
        assert overall.roi == pytest.approx(0.75)
        assert day_profit_loss(journal.weeks["week1"], 0) == 75.0

    def test_zero_capital_has_zero_roi(self):
        overall = compute_overall_totals(_journal_with_day(0.0, [500.0], 0.0))

        assert overall.roi == 0
        assert overall.total_capital == 500.0

    def test_no_completed_days(self):
        overall = compute_overall_totals(new_journal("user-1", date(2025, 1, 1), 10000.0))

        assert overall.completed_days == 0
        assert overall.per_day_revenue == 0
        assert overall.total_capital == 10000.0
        assert overall.roi == 0

    def test_charge_only_day_is_a_loss(self):
        overall = compute_overall_totals(_journal_with_day(1000.0, [], 12.5))

        assert overall.completed_days == 1
        assert overall.loss_days == 1
        assert overall.total_trades == 0

    def test_break_even_day_is_neither_win_nor_loss(self):
        overall = compute_overall_totals(_journal_with_day(1000.0, [30.0], 30.0))

        assert overall.completed_days == 1
        assert overall.win_days == 0
        assert overall.loss_days == 0

    def test_offsetting_trades_without_charge(self):
        """Trades cancelling to zero leave the day uncompleted but still count as trades."""
        overall = compute_overall_totals(_journal_with_day(1000.0, [50.0, -50.0], 0.0))

        assert overall.completed_days == 0
        assert overall.total_trades == 2

    def test_journal_missing_weeks(self):
        journal = _journal_with_day(1000.0, [40.0], 0.0)
        journal = journal.model_copy(update={"weeks": {"week1": journal.weeks["week1"]}})

        assert compute_overall_totals(journal).total_earning == 40.0
