"""Request/response schemas for auth endpoints and the session payload."""

from pydantic import BaseModel, ConfigDict, Field

from app.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from app.models.user import Role
from app.schemas.common import ApiModel


class RegisterRequest(ApiModel):
    """New account. Any role sent by the client is ignored; new users are clients."""

    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class LoginRequest(ApiModel):
    """Credentials for login."""

    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class UserResponse(ApiModel):
    """Public view of a user (no password, no role)."""

    id: int
    name: str
    username: str


class SessionUser(BaseModel):
    """What a session remembers about its user: id and role, nothing else."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    role: Role
