"""
Server-side sessions stored in Redis.

The browser only holds a signed opaque token; the record itself is the JSON
{"id": ..., "role": ...} under "sess:<token>" with a TTL. Expiry is owned by
Redis: once the key is gone the token resolves to an anonymous session.
"""

import json
import logging
import secrets
from dataclasses import dataclass
from functools import lru_cache

import redis
from pydantic import ValidationError

from app.core.config import settings
from app.core.security import sign_session_token, unsign_session_token
from app.schemas.auth import SessionUser

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "sess:"
TOKEN_BYTES = 24


@dataclass(frozen=True)
class Session:
    """Session resolved for one request. user is None for anonymous requests."""

    token: str | None = None
    user: SessionUser | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.user.id is not None


ANONYMOUS = Session()


class SessionStore:
    """Create, resolve and destroy sessions in a Redis-compatible client."""

    def __init__(
        self,
        client: redis.Redis,
        secret: str,
        ttl_seconds: int,
        key_prefix: str = SESSION_KEY_PREFIX,
    ) -> None:
        self._client = client
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self._key_prefix = key_prefix

    def _key(self, token: str) -> str:
        return f"{self._key_prefix}{token}"

    def create(self, user: SessionUser) -> str:
        """Persist a new session for user and return the signed cookie value."""
        token = secrets.token_urlsafe(TOKEN_BYTES)
        self._client.set(self._key(token), user.model_dump_json(), ex=self.ttl_seconds)
        logger.debug("Session created for user_id=%s", user.id)
        return sign_session_token(token, self._secret)

    def load(self, cookie_value: str | None) -> Session:
        """Resolve a cookie value to its session; anonymous when missing, forged or expired."""
        if not cookie_value:
            return ANONYMOUS
        token = unsign_session_token(cookie_value, self._secret)
        if token is None:
            logger.info("Ignoring session cookie with invalid signature")
            return ANONYMOUS
        raw = self._client.get(self._key(token))
        if raw is None:
            return Session(token=token)
        try:
            user = SessionUser.model_validate(json.loads(raw))
        except (ValueError, ValidationError):
            logger.warning("Discarding malformed session record for token %s...", token[:6])
            return Session(token=token)
        return Session(token=token, user=user)

    def destroy(self, cookie_value: str | None) -> bool:
        """Delete the session behind cookie_value. Returns True if a record was removed."""
        if not cookie_value:
            return False
        token = unsign_session_token(cookie_value, self._secret)
        if token is None:
            return False
        return bool(self._client.delete(self._key(token)))

    def ping(self) -> bool:
        """True if the backing store answers."""
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False


@lru_cache
def get_redis() -> redis.Redis:
    """Process-wide Redis client for REDIS_URL (connects lazily)."""
    return redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)


@lru_cache
def get_session_store() -> SessionStore:
    """Process-wide session store built from settings."""
    return SessionStore(
        client=get_redis(),
        secret=settings.SESSION_SECRET.get_secret_value(),
        ttl_seconds=settings.SESSION_TTL_SECONDS,
    )
