"""Identity: registration, login and the current-user session file."""

import hashlib
import hmac
import json
import logging
import secrets
from pathlib import Path
from typing import Optional

from tradejournal.db.store import DataStore
from tradejournal.errors import AuthError, UnauthorizedJournalError
from tradejournal.models import Journal, User

logger = logging.getLogger(__name__)

HASH_ALGORITHM = "sha256"
HASH_ITERATIONS = 200_000
MIN_PASSWORD_LENGTH = 8


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """Hash a password with PBKDF2.

    Returns:
        Encoded string ``pbkdf2_sha256$iterations$salt$hash``.
    """
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        HASH_ALGORITHM, password.encode(), salt.encode(), HASH_ITERATIONS
    )
    return f"pbkdf2_{HASH_ALGORITHM}${HASH_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """Check a password against an encoded hash."""
    try:
        scheme, iterations, salt, expected = encoded.split("$")
    except ValueError:
        return False
    algorithm = scheme.removeprefix("pbkdf2_")
    try:
        digest = hashlib.pbkdf2_hmac(
            algorithm, password.encode(), salt.encode(), int(iterations)
        )
    except (ValueError, OverflowError):
        logger.warning("Unreadable password hash (scheme %r)", scheme)
        return False
    return hmac.compare_digest(digest.hex().encode(), expected.encode())


def normalize_email(email: str) -> str:
    return email.strip().lower()


def register(store: DataStore, email: str, password: str, name: Optional[str] = None) -> User:
    """Create a user account.

    Args:
        store: Data store.
        email: Login email.
        password: Plain-text password.
        name: Display name; defaults to the part of the email before ``@``.

    Returns:
        The new user.

    Raises:
        AuthError: If the email or password is unusable.
        UserExistsError: If the email is taken.
    """
    email = normalize_email(email)
    if "@" not in email:
        raise AuthError(f"Invalid email address: {email}")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    name = (name or "").strip() or email.split("@")[0]
    return store.create_user(email, name, hash_password(password))


def authenticate(store: DataStore, email: str, password: str) -> User:
    """Check credentials.

    Raises:
        AuthError: If the email is unknown or the password is wrong.
    """
    credentials = store.get_credentials(normalize_email(email))
    if credentials is None or not verify_password(password, credentials[1]):
        logger.warning("Failed login for %s", email)
        raise AuthError("Invalid email or password")
    return credentials[0]


def ensure_owner(journal: Journal, user: User) -> Journal:
    """Refuse access to a journal owned by another user.

    Raises:
        UnauthorizedJournalError: If ``user`` does not own ``journal``.
    """
    if journal.owner != user.id:
        raise UnauthorizedJournalError(f"Journal {journal.id} belongs to another user")
    return journal


class SessionFile:
    """Remembers the logged-in user between CLI invocations."""

    def __init__(self, path: Path):
        self.path = path

    def save(self, user: User) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"user_id": user.id, "email": user.email}))
        self.path.chmod(0o600)

    def load_user_id(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            return json.loads(self.path.read_text()).get("user_id")
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt session file %s", self.path)
            return None

    def clear(self) -> bool:
        """Remove the session file. Returns True if one existed."""
        if not self.path.exists():
            return False
        self.path.unlink()
        return True

    def current_user(self, store: DataStore) -> Optional[User]:
        """The logged-in user, or None if nobody is logged in."""
        user_id = self.load_user_id()
        if user_id is None:
            return None
        return store.get_user(user_id)
