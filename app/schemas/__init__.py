"""Pydantic request/response schemas."""

from app.schemas.auth import LoginRequest, RegisterRequest, SessionUser, UserResponse
from app.schemas.category import (
    CategoryCreate,
    CategoryEnvelope,
    CategoryListResponse,
    CategoryResponse,
    CategorySummary,
    CategoryUpdate,
)
from app.schemas.health import HealthResponse
from app.schemas.product import (
    ProductCreate,
    ProductEnvelope,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)

__all__ = [
    "CategoryCreate",
    "CategoryEnvelope",
    "CategoryListResponse",
    "CategoryResponse",
    "CategorySummary",
    "CategoryUpdate",
    "HealthResponse",
    "LoginRequest",
    "ProductCreate",
    "ProductEnvelope",
    "ProductListResponse",
    "ProductResponse",
    "ProductUpdate",
    "RegisterRequest",
    "SessionUser",
    "UserResponse",
]
