"""Database engine, session factory and the request-scoped session dependency."""

from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings
from app.core.errors import ApiError, ErrorKind


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create the engine for url; SQLite connections are shared across threadpool workers."""
    kwargs: dict[str, Any] = {"echo": echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(url, **kwargs)


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for scripts: commit on success, roll back on error, always close."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def commit_or_422(db: Session, flush_only: bool = False) -> None:
    """
    Commit db; unique and not-null violations are rolled back and raised as ValidationError.
    With flush_only the pending rows are written inside the open transaction,
    so the caller can still roll back or commit later.
    """
    try:
        if flush_only:
            db.flush()
        else:
            db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ApiError(ErrorKind.VALIDATION, details=str(e.orig)) from e


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
