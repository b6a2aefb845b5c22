"""Request/response schemas for products and the paginated listing."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from app.schemas.category import CategorySummary
from app.schemas.common import ApiModel

# Matches the products.price column: DECIMAL(10, 2).
PRICE_MAX_DIGITS = 10
PRICE_DECIMAL_PLACES = 2


class ProductCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=255, description="Unique product name")
    price: Decimal = Field(
        ...,
        ge=0,
        max_digits=PRICE_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
    )
    category_id: int = Field(..., description="ID of an existing category")


class ProductUpdate(ApiModel):
    """Partial update: only the fields present in the body are applied."""

    name: str | None = Field(None, min_length=1, max_length=255)
    price: Decimal | None = Field(
        None,
        ge=0,
        max_digits=PRICE_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
    )
    category_id: int | None = None


class ProductResponse(ApiModel):
    """
    Product with its category embedded. category is None when the product
    points at a category that has since been deleted.
    """

    id: int
    name: str
    price: Decimal
    category: CategorySummary | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductEnvelope(ApiModel):
    product: ProductResponse


class ProductListResponse(ApiModel):
    """One page of products; total is the number of pages."""

    page: int
    total: int
    products: list[ProductResponse]
