"""Exception hierarchy for tradejournal."""


class JournalError(Exception):
    """Base class for all tradejournal errors."""


class ConfigError(JournalError):
    """Configuration file is missing or invalid."""


class StoreError(JournalError):
    """A persistence operation failed."""


class JournalNotFoundError(StoreError):
    """No journal exists with the requested id."""

    def __init__(self, journal_id: str):
        super().__init__(f"Journal not found: {journal_id}")
        self.journal_id = journal_id


class DuplicateJournalError(StoreError):
    """A journal already exists for the same owner, month and year."""

    def __init__(self, existing_id: str, month: int, year: int):
        super().__init__(
            f"A journal for {year}-{month:02d} already exists ({existing_id})"
        )
        self.existing_id = existing_id
        self.month = month
        self.year = year


class UserExistsError(StoreError):
    """A user with the same email is already registered."""


class AuthError(JournalError):
    """Authentication failed or no user is logged in."""


class UnauthorizedJournalError(AuthError):
    """The current user does not own the requested journal."""


class DateNotEditableError(JournalError):
    """The targeted day is outside the configured edit window."""

    def __init__(self, day):
        super().__init__(f"{day.isoformat()} is not editable")
        self.day = day
