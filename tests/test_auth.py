"""Tests for registration, login and journal ownership.

**Feature: trading-journal**
"""

import tempfile
from datetime import date
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradejournal.auth import (
    SessionFile,
    authenticate,
    ensure_owner,
    hash_password,
    register,
    verify_password,
)
from tradejournal.db.store import DataStore
from tradejournal.errors import AuthError, UnauthorizedJournalError, UserExistsError
from tradejournal.journal import new_journal


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield DataStore(Path(tmpdir) / "test.db")


class TestPasswordHashing:
    """
    **Feature: trading-journal, Property 20: Password Verification**

    *For any* password, its hash verifies it and rejects any other password.
    """

    @given(password=st.text(min_size=1, max_size=30), other=st.text(min_size=1, max_size=30))
    @settings(max_examples=10, deadline=None)
    def test_verify(self, password: str, other: str):
        encoded = hash_password(password)

        assert verify_password(password, encoded)
        if other != password:
            assert not verify_password(other, encoded)

    def test_salted(self):
        assert hash_password("secret123") != hash_password("secret123")

    def test_malformed_hash(self):
        assert not verify_password("secret123", "not-a-hash")

    @pytest.mark.parametrize(
        "encoded",
        [
            "pbkdf2_sha256$many$salt$00",
            "pbkdf2_sha256$0$salt$00",
            "pbkdf2_sha256$99999999999999999999999$salt$00",
            "pbkdf2_nohash$1000$salt$00",
            "pbkdf2_sha256$1000$salt$café",
        ],
    )
    def test_corrupt_hash_is_rejected(self, encoded: str):
        assert not verify_password("secret123", encoded)


class TestRegistration:
    def test_register_defaults_name_to_email_prefix(self, temp_db: DataStore):
        user = register(temp_db, "  Trader@Example.com ", "secret123")

        assert user.email == "trader@example.com"
        assert user.name == "trader"

    def test_register_with_name(self, temp_db: DataStore):
        assert register(temp_db, "a@example.com", "secret123", name="Asha").name == "Asha"

    def test_duplicate_email(self, temp_db: DataStore):
        register(temp_db, "a@example.com", "secret123")

        with pytest.raises(UserExistsError):
            register(temp_db, "A@example.com", "secret456")

    @pytest.mark.parametrize("email, password", [("no-at-sign", "secret123"), ("a@example.com", "1234567")])
    def test_invalid_input(self, temp_db: DataStore, email: str, password: str):
        with pytest.raises(AuthError):
            register(temp_db, email, password)


class TestAuthentication:
    def test_login(self, temp_db: DataStore):
        user = register(temp_db, "a@example.com", "secret123")

        assert authenticate(temp_db, "A@Example.com", "secret123") == user

    def test_wrong_password(self, temp_db: DataStore):
        register(temp_db, "a@example.com", "secret123")

        with pytest.raises(AuthError):
            authenticate(temp_db, "a@example.com", "wrong-password")

    def test_corrupt_stored_hash(self, temp_db: DataStore):
        temp_db.create_user("a@example.com", "a", "pbkdf2_sha256$lots$salt$00")

        with pytest.raises(AuthError):
            authenticate(temp_db, "a@example.com", "secret123")

    def test_unknown_email(self, temp_db: DataStore):
        with pytest.raises(AuthError):
            authenticate(temp_db, "ghost@example.com", "secret123")

    def test_ensure_owner(self, temp_db: DataStore):
        owner = register(temp_db, "a@example.com", "secret123")
        intruder = register(temp_db, "b@example.com", "secret123")
        journal = temp_db.create_journal(new_journal(owner.id, date(2025, 1, 1)))

        assert ensure_owner(journal, owner) is journal
        with pytest.raises(UnauthorizedJournalError):
            ensure_owner(journal, intruder)


class TestSessionFile:
    def test_save_load_clear(self, temp_db: DataStore, tmp_path: Path):
        session_file = SessionFile(tmp_path / "state" / "session.json")
        user = register(temp_db, "a@example.com", "secret123")

        assert session_file.current_user(temp_db) is None
        session_file.save(user)
        assert session_file.load_user_id() == user.id
        assert session_file.current_user(temp_db) == user
        assert session_file.clear() is True
        assert session_file.clear() is False
        assert session_file.current_user(temp_db) is None

    def test_corrupt_session_file(self, temp_db: DataStore, tmp_path: Path):
        path = tmp_path / "session.json"
        path.write_text("{not json")

        assert SessionFile(path).current_user(temp_db) is None
