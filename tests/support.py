"""Shared test wiring: in-memory SQLite, a Redis double and dependency overrides."""

import redis
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.core.security import PasswordHasher, get_password_hasher
from app.core.sessions import SessionStore, get_session_store
from app.main import app
from app.models import Base, Role, User
from app.scripts.create_user import create_user

TEST_PASSWORD_SECRET = "test-password-secret"
TEST_SESSION_SECRET = "test-session-secret"
TEST_SESSION_TTL = 3600
COOKIE_NAME = "sid"


class FakeRedis:
    """Dict-backed stand-in for the handful of redis.Redis calls the session store makes."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.fail_on: set[str] = set()

    def _maybe_fail(self, op: str) -> None:
        if op in self.fail_on:
            raise redis.ConnectionError(f"{op}: connection refused")

    def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self._maybe_fail("set")
        self.data[key] = value
        if ex is not None:
            self.ttls[key] = ex
        return True

    def get(self, key: str) -> str | None:
        self._maybe_fail("get")
        return self.data.get(key)

    def delete(self, *keys: str) -> int:
        self._maybe_fail("delete")
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    def ping(self) -> bool:
        self._maybe_fail("ping")
        return True

    def expire_all(self) -> None:
        """Simulate every TTL elapsing."""
        self.data.clear()
        self.ttls.clear()


class ApiTestHarness:
    """Wires app to a fresh database and session store; call close() in tearDown."""

    def __init__(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.redis = FakeRedis()
        self.store = SessionStore(self.redis, TEST_SESSION_SECRET, TEST_SESSION_TTL)
        self.hasher = PasswordHasher(TEST_PASSWORD_SECRET)

        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_session_store] = lambda: self.store
        app.dependency_overrides[get_password_hasher] = lambda: self.hasher
        self.client = TestClient(app, raise_server_exceptions=False)

    def db(self) -> Session:
        return self.SessionLocal()

    def add_user(
        self,
        username: str,
        password: str = "password",
        role: Role = Role.CLIENT,
        name: str = "Test Name",
    ) -> User:
        with self.db() as db:
            user = create_user(db, self.hasher, name=name, username=username, password=password, role=role)
            db.commit()
            db.refresh(user)
            db.expunge(user)
            return user

    def login(self, username: str, password: str = "password") -> str:
        """Log in and return the session cookie value (also kept in the client jar)."""
        response = self.client.post("/api/auth", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return response.cookies[COOKIE_NAME]

    def login_as(self, role: Role, username: str | None = None) -> str:
        username = username or f"{role.value}_user"
        self.add_user(username, role=role)
        return self.login(username)

    def close(self) -> None:
        self.client.close()
        app.dependency_overrides.clear()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()
