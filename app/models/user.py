"""ORM model for application users (session auth and RBAC)."""

from enum import Enum

from sqlalchemy import Column, Integer, String

from app.models.base import Base, TimestampMixin


class Role(str, Enum):
    """Coarse permission class gating which endpoints a session may call."""

    ADMIN = "admin"
    CLIENT = "client"


class User(TimestampMixin, Base):
    """
    Registered user. password_hash is derived from the plain password on write
    and never serialized.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=Role.CLIENT.value)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
