"""SQLite data store for tradejournal."""

import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Iterator, Optional

from pydantic import BaseModel, Field

from tradejournal.errors import (
    DuplicateJournalError,
    JournalNotFoundError,
    StoreError,
    UserExistsError,
)
from tradejournal.models import Journal, User, WeekBlock

logger = logging.getLogger(__name__)


class OwnedJournal(BaseModel):
    """A journal together with its owner's contact details."""

    journal: Journal = Field(..., description="The journal")
    user_email: str = Field(..., description="Owner email")
    user_name: str = Field(..., description="Owner display name")

    model_config = {"frozen": True}


def _dump_weeks(weeks: dict[str, WeekBlock]) -> str:
    return json.dumps({key: week.model_dump(mode="json") for key, week in weeks.items()})


class DataStore:
    """SQLite-based store for users and trading journals."""

    REQUIRED_TABLES = [
        "users",
        "trading_journals",
    ]

    # Columns that update_journal accepts, mapped to their SQL column.
    # start_date, month and year are fixed at creation; week_data holds dates
    # derived from them.
    UPDATABLE_FIELDS = {
        "starting_capital": "starting_capital",
        "weeks": "week_data",
    }

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, commit on success and surface failures as StoreError."""
        conn = self._get_connection()
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(f"Database error: {e}") from e
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        with self._connect() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE,
                    name TEXT NOT NULL,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trading_journals (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    month INTEGER NOT NULL,
                    year INTEGER NOT NULL,
                    start_date TEXT NOT NULL,
                    starting_capital REAL NOT NULL DEFAULT 0,
                    week_data TEXT NOT NULL DEFAULT '{}',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_trading_journals_user
                ON trading_journals (user_id, created_at)
            """)

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]

    # ==================== Users ====================

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            name=row["name"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def create_user(self, email: str, name: str, password_hash: str) -> User:
        """Register a new user.

        Args:
            email: Login email, unique per store.
            name: Display name.
            password_hash: Encoded password hash.

        Returns:
            The created user.

        Raises:
            UserExistsError: If the email is already registered.
        """
        if self.get_user_by_email(email) is not None:
            raise UserExistsError(f"User already exists: {email}")

        now = datetime.now().isoformat()
        user_id = uuid.uuid4().hex
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO users (id, email, name, password_hash, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user_id, email, name, password_hash, now, now),
            )
        logger.info("Registered user %s", email)
        return User(id=user_id, email=email, name=name, created_at=datetime.fromisoformat(now))

    def get_user(self, user_id: str) -> Optional[User]:
        """Get a user by id."""
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return self._row_to_user(row) if row else None

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email."""
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        return self._row_to_user(row) if row else None

    def get_credentials(self, email: str) -> Optional[tuple[User, str]]:
        """Get a user and their stored password hash.

        Returns:
            Tuple of (user, password_hash) or None if no such user.
        """
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        if row is None:
            return None
        return self._row_to_user(row), row["password_hash"]

    def update_user(
        self, user_id: str, name: Optional[str] = None, email: Optional[str] = None
    ) -> User:
        """Update a user's profile.

        Raises:
            StoreError: If the user does not exist.
            UserExistsError: If the new email belongs to another user.
        """
        if email is not None:
            other = self.get_user_by_email(email)
            if other is not None and other.id != user_id:
                raise UserExistsError(f"User already exists: {email}")

        with self._connect() as conn:
            cursor = conn.execute(
                """
                UPDATE users
                SET name = COALESCE(?, name), email = COALESCE(?, email), updated_at = ?
                WHERE id = ?
                """,
                (name, email, datetime.now().isoformat(), user_id),
            )
            if cursor.rowcount == 0:
                raise StoreError(f"User not found: {user_id}")

        user = self.get_user(user_id)
        if user is None:
            raise StoreError(f"User vanished during update: {user_id}")
        return user

    # ==================== Journals ====================

    @staticmethod
    def _row_to_journal(row: sqlite3.Row) -> Journal:
        return Journal(
            id=row["id"],
            owner=row["user_id"],
            month=row["month"],
            year=row["year"],
            start_date=date.fromisoformat(row["start_date"]),
            starting_capital=row["starting_capital"],
            weeks=json.loads(row["week_data"] or "{}"),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def find_journal_for_month(self, owner_id: str, month: int, year: int) -> Optional[Journal]:
        """Get the owner's journal for a month, if one exists."""
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT * FROM trading_journals
                WHERE user_id = ? AND month = ? AND year = ?
                """,
                (owner_id, month, year),
            ).fetchone()
        return self._row_to_journal(row) if row else None

    def create_journal(self, journal: Journal) -> Journal:
        """Insert a new journal.

        The store assigns the id and both timestamps; any values already
        set on ``journal`` are ignored.

        Args:
            journal: Journal to create.

        Returns:
            The stored journal.

        Raises:
            DuplicateJournalError: If the owner already has a journal for
                the same month and year.
        """
        existing = self.find_journal_for_month(journal.owner, journal.month, journal.year)
        if existing is not None:
            raise DuplicateJournalError(existing.id, journal.month, journal.year)

        now = datetime.now()
        stored = journal.model_copy(
            update={"id": uuid.uuid4().hex, "created_at": now, "updated_at": now}
        )
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO trading_journals
                (id, user_id, month, year, start_date, starting_capital, week_data,
                 created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    stored.id,
                    stored.owner,
                    stored.month,
                    stored.year,
                    stored.start_date.isoformat(),
                    stored.starting_capital,
                    _dump_weeks(stored.weeks),
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
        logger.info("Created journal %s starting %s", stored.id, stored.start_date)
        return stored

    def get_journal(self, journal_id: str) -> Journal:
        """Get a journal by id.

        Raises:
            JournalNotFoundError: If no journal has this id.
        """
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM trading_journals WHERE id = ?", (journal_id,)
            ).fetchone()
        if row is None:
            raise JournalNotFoundError(journal_id)
        return self._row_to_journal(row)

    def list_journals(self, owner_id: str) -> list[Journal]:
        """Get all journals of one owner, newest first."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT * FROM trading_journals
                WHERE user_id = ?
                ORDER BY created_at DESC, rowid DESC
                """,
                (owner_id,),
            ).fetchall()
        return [self._row_to_journal(row) for row in rows]

    def list_all_journals(self) -> list[OwnedJournal]:
        """Get every journal with its owner's email and name, newest first."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT j.*, u.email AS user_email, u.name AS user_name
                FROM trading_journals j
                JOIN users u ON u.id = j.user_id
                ORDER BY j.created_at DESC, j.rowid DESC
                """
            ).fetchall()
        return [
            OwnedJournal(
                journal=self._row_to_journal(row),
                user_email=row["user_email"],
                user_name=row["user_name"],
            )
            for row in rows
        ]

    def update_journal(self, journal_id: str, **fields) -> Journal:
        """Apply a partial update to a journal.

        Args:
            journal_id: Journal to update.
            **fields: Any of starting_capital, weeks.

        Returns:
            The journal as stored after the update.

        Raises:
            ValueError: If an unknown field is passed.
            JournalNotFoundError: If no journal has this id.
        """
        unknown = set(fields) - set(self.UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update journal fields: {', '.join(sorted(unknown))}")

        assignments = []
        params: list = []
        for name, value in fields.items():
            if name == "weeks":
                value = _dump_weeks(value)
            assignments.append(f"{self.UPDATABLE_FIELDS[name]} = ?")
            params.append(value)

        assignments.append("updated_at = ?")
        params.append(datetime.now().isoformat())
        params.append(journal_id)

        with self._connect() as conn:
            cursor = conn.execute(
                f"UPDATE trading_journals SET {', '.join(assignments)} WHERE id = ?",
                params,
            )
            if cursor.rowcount == 0:
                raise JournalNotFoundError(journal_id)

        logger.debug("Updated journal %s (%s)", journal_id, ", ".join(sorted(fields)))
        return self.get_journal(journal_id)

    def delete_journal(self, journal_id: str, owner_id: Optional[str] = None) -> None:
        """Delete a journal.

        Args:
            journal_id: Journal to delete.
            owner_id: When given, only delete if the journal belongs to this user.

        Raises:
            JournalNotFoundError: If no matching journal was deleted.
        """
        with self._connect() as conn:
            if owner_id is None:
                cursor = conn.execute(
                    "DELETE FROM trading_journals WHERE id = ?", (journal_id,)
                )
            else:
                cursor = conn.execute(
                    "DELETE FROM trading_journals WHERE id = ? AND user_id = ?",
                    (journal_id, owner_id),
                )
            if cursor.rowcount == 0:
                raise JournalNotFoundError(journal_id)
        logger.info("Deleted journal %s", journal_id)

    # ==================== Stats ====================

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with table record counts.
        """
        with self._connect() as conn:
            stats = {}
            for table in self.REQUIRED_TABLES:
                row = conn.execute(f"SELECT COUNT(*) as count FROM {table}").fetchone()
                stats[table] = row["count"]
            return stats
