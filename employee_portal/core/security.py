"""
Password hashing and bearer token primitives.

Passwords are bcrypt hashes. Bearer tokens are random URL-safe strings; the
database only ever sees their SHA-256 digest, so a leaked table can't be
replayed.
"""

import hashlib
import secrets
from typing import NamedTuple, Optional

import bcrypt

from employee_portal.core.config import settings

# bcrypt ignores everything past 72 bytes; newer releases raise instead
BCRYPT_MAX_BYTES = 72


class NewToken(NamedTuple):
    plain: str    # handed to the client once
    digest: str   # stored


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Constant-time bcrypt comparison.

    A stored value that isn't a bcrypt hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        return False


# Compared against when the email is unknown, so that path costs one bcrypt round too
_DUMMY_PASSWORD_HASH = get_password_hash(secrets.token_urlsafe(16))


def burn_password_check(plain_password: str) -> bool:
    """Spend the same work as a real check. Always False."""
    verify_password(plain_password, _DUMMY_PASSWORD_HASH)
    return False


def hash_access_token(plain_token: str) -> str:
    """Lookup key for a bearer token (hex SHA-256, 64 chars)."""
    return hashlib.sha256(plain_token.encode("utf-8")).hexdigest()


def create_access_token(nbytes: Optional[int] = None) -> NewToken:
    """
    Mint a bearer token from `nbytes` of randomness (TOKEN_BYTES by default).

    Only the digest should be persisted; the plain value cannot be recovered
    from it.
    """
    plain = secrets.token_urlsafe(nbytes or settings.TOKEN_BYTES)
    return NewToken(plain=plain, digest=hash_access_token(plain))
