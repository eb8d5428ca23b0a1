"""Single-cell edits on week blocks and journals.

Every function returns a new model and leaves its input untouched, so the
caller can compare the previous and next snapshot before persisting.
"""

import math
import re
from typing import Union

from tradejournal.models import TRADES_PER_DAY, WEEK_KEYS, Journal, WeekBlock


# Longest leading decimal number; trailing text is ignored.
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def parse_amount(value: Union[str, float, int, None]) -> float:
    """Parse free-text numeric input.

    The longest leading number is read and the rest ignored, so "12abc"
    gives 12 and "1,000" gives 1. Anything without a leading finite number
    becomes 0.0.

    Args:
        value: Raw input as typed by the user.

    Returns:
        Parsed amount.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    match = _LEADING_NUMBER.match(str(value).lstrip())
    if match is None:
        return 0.0
    amount = float(match.group())
    if not math.isfinite(amount):
        return 0.0
    return amount


def _check_day(week: WeekBlock, day_index: int) -> None:
    if not 0 <= day_index < len(week.dates):
        raise IndexError(
            f"day index {day_index} out of range for a {len(week.dates)}-day week"
        )


def set_trade(
    week: WeekBlock, row: int, day_index: int, value: Union[str, float]
) -> WeekBlock:
    """Replace one trade cell.

    Args:
        week: Source block.
        row: Trade slot, 0..4.
        day_index: Date column within the week.
        value: New cell value, coerced with parse_amount.

    Returns:
        New WeekBlock with the cell replaced.

    Raises:
        IndexError: If row or day_index is out of range.
    """
    if not 0 <= row < TRADES_PER_DAY:
        raise IndexError(f"trade row {row} out of range 0..{TRADES_PER_DAY - 1}")
    _check_day(week, day_index)

    trades = list(week.trades)
    cells = list(trades[row])
    cells[day_index] = parse_amount(value)
    trades[row] = tuple(cells)
    return week.model_copy(update={"trades": tuple(trades)})


def set_charge(week: WeekBlock, day_index: int, value: Union[str, float]) -> WeekBlock:
    """Replace the charge for one date.

    Raises:
        IndexError: If day_index is out of range.
    """
    _check_day(week, day_index)

    charges = list(week.charges)
    charges[day_index] = parse_amount(value)
    return week.model_copy(update={"charges": tuple(charges)})


def replace_week(journal: Journal, key: str, week: WeekBlock) -> Journal:
    """Return a journal snapshot with one week block swapped in."""
    if key not in WEEK_KEYS:
        raise KeyError(f"unknown week key: {key}")
    weeks = dict(journal.weeks)
    weeks[key] = week
    return journal.model_copy(update={"weeks": weeks})


def with_starting_capital(journal: Journal, capital: float) -> Journal:
    """Return a journal snapshot with a new starting capital.

    Raises:
        ValueError: If capital is negative or not finite.
    """
    if not math.isfinite(capital) or capital < 0:
        raise ValueError(f"starting capital must be zero or positive, got {capital}")
    return journal.model_copy(update={"starting_capital": float(capital)})
