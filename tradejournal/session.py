"""Editing session for one open journal.

The session holds the in-memory journal, which is the source of truth while
the journal is open. Edits replace the snapshot and schedule a debounced
commit to the store; a manual save commits immediately. Failed commits are
reported as values and never roll back local edits.
"""

import logging
import threading
from datetime import date
from functools import partial
from typing import Callable, Optional

from tradejournal.db.store import DataStore
from tradejournal.errors import DateNotEditableError, StoreError
from tradejournal.journal import (
    EditWindow,
    align_journal,
    compute_overall_totals,
    compute_week_totals,
    is_editable,
    locate_date,
    parse_amount,
    replace_week,
    set_charge,
    set_trade,
    with_starting_capital,
)
from tradejournal.models import CommitResult, Journal, OverallTotals, WeekBlock, WeekTotals

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 1.0


class DebouncedCommit:
    """A single cancellable scheduled call.

    Each ``schedule()`` cancels the pending timer, if any, and starts a new
    one, so at most one call is pending at a time. ``cancel()`` is a no-op
    when nothing is pending.
    """

    def __init__(
        self,
        callback: Callable[[], object],
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        """Initialize the debouncer.

        Args:
            callback: Called with no arguments when the quiet period elapses.
            delay: Quiet period in seconds.
            timer_factory: Builds the timer; must accept ``(delay, function)``
                and return an object with ``start()`` and ``cancel()``.
        """
        self._callback = callback
        self._delay = delay
        self._timer_factory = timer_factory
        self._timer = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        """Whether a call is currently scheduled."""
        with self._lock:
            return self._timer is not None

    def schedule(self) -> None:
        """Schedule the callback, replacing any pending schedule."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            timer = self._timer_factory(self._delay, partial(self._fire, self._generation))
            if hasattr(timer, "daemon"):
                timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> bool:
        """Cancel the pending call.

        Returns:
            True if a pending call was cancelled.
        """
        with self._lock:
            timer, self._timer = self._timer, None
            self._generation += 1
        if timer is None:
            return False
        timer.cancel()
        return True

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A timer that was replaced or cancelled after it started running.
            if generation != self._generation:
                return
            self._timer = None
        self._callback()


class JournalSession:
    """Owns an open journal, its edit policy and its debounced commits."""

    def __init__(
        self,
        store: DataStore,
        journal: Journal,
        edit_window: EditWindow = EditWindow.TODAY,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        today: Callable[[], date] = date.today,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        """Open a session.

        Args:
            store: Store that receives commits.
            journal: Journal as loaded from the store; missing weeks are
                filled in from the date partition.
            edit_window: Which dates accept edits.
            debounce_seconds: Quiet period before an automatic commit.
            today: Returns the current local date.
            timer_factory: Timer constructor for the debounced commit.
        """
        if journal.id is None:
            raise ValueError("Cannot open a session on an unsaved journal")
        self._store = store
        self._journal = align_journal(journal)
        self._edit_window = edit_window
        self._today = today
        self._state_lock = threading.RLock()
        self._commit = DebouncedCommit(self._commit_now, debounce_seconds, timer_factory)
        self._dirty = False
        self.last_result: Optional[CommitResult] = None

    @property
    def journal(self) -> Journal:
        with self._state_lock:
            return self._journal

    @property
    def dirty(self) -> bool:
        """Whether local edits have not yet been committed successfully."""
        with self._state_lock:
            return self._dirty

    @property
    def commit_pending(self) -> bool:
        return self._commit.pending

    @property
    def edit_window(self) -> EditWindow:
        return self._edit_window

    def week(self, week_key: str) -> WeekBlock:
        """Get a week block of the open journal.

        Raises:
            KeyError: If the week key is unknown.
        """
        return self.journal.weeks[week_key]

    def locate(self, day: date) -> Optional[tuple[str, int]]:
        """Week key and column holding a date, per the stored week dates."""
        return locate_date(self.journal, day)

    def is_editable(self, day: date) -> bool:
        """Check the edit window against today's date, evaluated now."""
        return is_editable(day, self._today(), self._edit_window)

    def week_totals(self, week_key: str) -> WeekTotals:
        return compute_week_totals(self.journal.weeks.get(week_key))

    def overall_totals(self) -> OverallTotals:
        return compute_overall_totals(self.journal)

    # ==================== Edits ====================

    def _require_editable(self, week: WeekBlock, day_index: int) -> None:
        if not 0 <= day_index < len(week.dates):
            raise IndexError(
                f"day index {day_index} out of range for a {len(week.dates)}-day week"
            )
        day = week.dates[day_index]
        if not self.is_editable(day):
            raise DateNotEditableError(day)

    def _apply(self, journal: Journal) -> Journal:
        with self._state_lock:
            self._journal = journal
            self._dirty = True
        self._commit.schedule()
        return journal

    def edit_trade(self, week_key: str, row: int, day_index: int, raw) -> Journal:
        """Set one trade cell and schedule a commit.

        Args:
            week_key: Week holding the cell.
            row: Trade slot, 0..4.
            day_index: Date column within the week.
            raw: User input; non-numeric input is stored as 0.

        Returns:
            The new journal snapshot.

        Raises:
            DateNotEditableError: If the date is outside the edit window.
            IndexError: If row or day_index is out of range.
        """
        with self._state_lock:
            week = self._journal.weeks[week_key]
            self._require_editable(week, day_index)
            updated = set_trade(week, row, day_index, raw)
            journal = replace_week(self._journal, week_key, updated)
            return self._apply(journal)

    def edit_charge(self, week_key: str, day_index: int, raw) -> Journal:
        """Set one day's charge and schedule a commit.

        Raises:
            DateNotEditableError: If the date is outside the edit window.
            IndexError: If day_index is out of range.
        """
        with self._state_lock:
            week = self._journal.weeks[week_key]
            self._require_editable(week, day_index)
            updated = set_charge(week, day_index, raw)
            journal = replace_week(self._journal, week_key, updated)
            return self._apply(journal)

    def set_starting_capital(self, raw) -> Journal:
        """Set the starting capital and schedule a commit.

        Raises:
            ValueError: If the parsed capital is negative.
        """
        with self._state_lock:
            journal = with_starting_capital(self._journal, parse_amount(raw))
            return self._apply(journal)

    # ==================== Commits ====================

    def _commit_now(self) -> CommitResult:
        with self._state_lock:
            snapshot = self._journal

        try:
            stored = self._store.update_journal(
                snapshot.id,
                weeks=snapshot.weeks,
                starting_capital=snapshot.starting_capital,
            )
        except StoreError as e:
            logger.error("Failed to save journal %s: %s", snapshot.id, e)
            result = CommitResult(ok=False, error=str(e))
        else:
            logger.debug("Saved journal %s", snapshot.id)
            result = CommitResult(ok=True, journal=stored)
            with self._state_lock:
                # Edits made while the write was in flight stay dirty.
                if self._journal is snapshot:
                    self._journal = snapshot.model_copy(
                        update={"updated_at": stored.updated_at}
                    )
                    self._dirty = False

        self.last_result = result
        return result

    def save(self) -> CommitResult:
        """Commit the current state now, cancelling any scheduled commit."""
        self._commit.cancel()
        return self._commit_now()

    def close(self) -> None:
        """Cancel any scheduled commit without flushing it."""
        if self._commit.cancel():
            logger.debug("Discarded pending commit for journal %s", self._journal.id)
