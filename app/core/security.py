"""Password hashing and session cookie signing."""

import hashlib
import hmac
from functools import lru_cache
from typing import Protocol

import jwt

from app.core.config import settings

# Session cookie values are HS256-signed; only the opaque token travels in them.
COOKIE_SIGNING_ALGORITHM = "HS256"

# Registration / login field limits (input validation).
NAME_MIN_LEN = 1
NAME_MAX_LEN = 255
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 1
PASSWORD_MAX_LEN = 128


class HasPasswordHash(Protocol):
    password_hash: str


class PasswordHasher:
    """
    Keyed, deterministic password hash (HMAC-SHA1, hex digest).

    There is no per-user salt: two users with the same password share a hash,
    and rotating the secret invalidates every stored hash.
    """

    def __init__(self, secret: str) -> None:
        self._key = secret.encode("utf-8")

    def hash(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. Do not store plain passwords."""
        return hmac.new(self._key, plain_password.encode("utf-8"), hashlib.sha1).hexdigest()

    def verify(self, user: HasPasswordHash, plain_password: str) -> bool:
        """True iff plain_password hashes to the user's stored hash."""
        stored = user.password_hash or ""
        return hmac.compare_digest(self.hash(plain_password), stored)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Process-wide hasher keyed by PASSWORD_SECRET."""
    return PasswordHasher(settings.PASSWORD_SECRET.get_secret_value())


def sign_session_token(token: str, secret: str) -> str:
    """Wrap an opaque session token into a signed cookie value."""
    return jwt.encode({"sid": token}, secret, algorithm=COOKIE_SIGNING_ALGORITHM)


def unsign_session_token(cookie_value: str, secret: str) -> str | None:
    """
    Return the session token carried by a signed cookie value.
    Returns None for a tampered, foreign or malformed value.
    """
    try:
        payload = jwt.decode(cookie_value, secret, algorithms=[COOKIE_SIGNING_ALGORITHM])
    except jwt.PyJWTError:
        return None
    sid = payload.get("sid")
    return sid if isinstance(sid, str) and sid else None
