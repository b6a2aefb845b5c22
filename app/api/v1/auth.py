"""Session login/registration endpoints and auth dependencies (get_session, require_roles)."""

import logging
from collections.abc import Callable
from typing import Annotated

import redis
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session as DbSession

from app.core.config import settings
from app.core.database import commit_or_422, get_db
from app.core.errors import ApiError, ErrorKind
from app.core.security import PasswordHasher, get_password_hasher
from app.core.sessions import Session, SessionStore, get_session_store
from app.models.user import Role, User
from app.schemas.auth import LoginRequest, RegisterRequest, SessionUser, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def get_session(
    request: Request,
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> Session:
    """Dependency: resolve the session cookie of the current request (may be anonymous)."""
    return store.load(request.cookies.get(settings.SESSION_COOKIE_NAME))


def require_roles(*allowed: Role) -> Callable[..., SessionUser]:
    """
    Build a dependency that only lets sessions with one of the allowed roles through.
    With no roles given every known role is allowed, i.e. any authenticated user.
    """
    allowed_roles = frozenset(allowed or Role)

    def gate(session: Annotated[Session, Depends(get_session)]) -> SessionUser:
        if session.user is None or session.user.role not in allowed_roles:
            raise ApiError(ErrorKind.UNAUTHORIZED)
        return session.user

    return gate


def _start_session(response: Response, store: SessionStore, user: User) -> None:
    cookie_value = store.create(SessionUser(id=user.id, role=user.role))
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=cookie_value,
        max_age=store.ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
    )


@router.post("/register", response_model=UserResponse)
def register(
    body: RegisterRequest,
    response: Response,
    db: Annotated[DbSession, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> UserResponse:
    """
    Create a client account and log it in immediately.
    The user row is only committed once its session exists, so a session
    store failure leaves no account behind and the client can retry.
    """
    user = User(
        name=body.name,
        username=body.username,
        password_hash=hasher.hash(body.password),
        role=Role.CLIENT.value,
    )
    db.add(user)
    commit_or_422(db, flush_only=True)
    try:
        _start_session(response, store, user)
    except redis.RedisError:
        db.rollback()
        raise
    commit_or_422(db)
    db.refresh(user)
    logger.info("Registered user_id=%s username=%s", user.id, user.username)
    return UserResponse.model_validate(user)


@router.post("", response_model=UserResponse)
def login(
    body: LoginRequest,
    response: Response,
    db: Annotated[DbSession, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> UserResponse:
    """
    Authenticate with username and password and start a session.
    Unknown usernames and wrong passwords fail with the same error.
    """
    user = db.query(User).filter(User.username == body.username).first()
    if user is None or not hasher.verify(user, body.password):
        raise ApiError(ErrorKind.AUTHENTICATION)

    _start_session(response, store, user)
    return UserResponse.model_validate(user)


@router.get("")
def check(session: Annotated[Session, Depends(get_session)]) -> Response:
    """200 with an empty body while the session is authenticated."""
    if not session.is_authenticated:
        raise ApiError(ErrorKind.NOT_AUTHENTICATED)
    return Response(status_code=status.HTTP_200_OK)


@router.delete("")
def logout(
    request: Request,
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> Response:
    """Destroy the session. Always succeeds; store failures are only logged."""
    cookie_value = request.cookies.get(settings.SESSION_COOKIE_NAME)
    try:
        store.destroy(cookie_value)
    except redis.RedisError:
        logger.exception("DELETE /auth: failed to destroy session")

    response = Response(status_code=status.HTTP_200_OK)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response
