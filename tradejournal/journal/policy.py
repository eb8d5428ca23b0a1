"""Editability policy for journal cells."""

from datetime import date
from enum import Enum


class EditWindow(str, Enum):
    """Which dates accept edits."""

    TODAY = "today"
    ANY = "any"


def is_today(day: date, today: date) -> bool:
    return day == today


def is_past(day: date, today: date) -> bool:
    return day < today


def is_editable(day: date, today: date, window: EditWindow = EditWindow.TODAY) -> bool:
    """Check whether cells for ``day`` may be edited.

    Args:
        day: Date of the targeted column.
        today: Current local date, passed explicitly.
        window: Configured edit window.

    Returns:
        True if the date is inside the edit window.
    """
    if window is EditWindow.ANY:
        return True
    return is_today(day, today)
