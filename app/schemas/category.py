"""Request/response schemas for categories."""

from datetime import datetime

from pydantic import Field

from app.schemas.common import ApiModel


class CategoryCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=255, description="Unique category name")


class CategoryUpdate(CategoryCreate):
    pass


class CategorySummary(ApiModel):
    """Category as embedded in a product."""

    id: int
    name: str


class CategoryResponse(CategorySummary):
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CategoryEnvelope(ApiModel):
    category: CategoryResponse


class CategoryListResponse(ApiModel):
    categories: list[CategoryResponse]
