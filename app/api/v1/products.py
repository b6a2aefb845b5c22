"""Product endpoints: paginated listing for any signed-in user, mutations for admins."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.v1.auth import require_roles
from app.core.database import commit_or_422, get_db
from app.core.errors import ApiError, ErrorKind
from app.models import Category, Product, Role
from app.schemas.category import CategorySummary
from app.schemas.product import (
    ProductCreate,
    ProductEnvelope,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from app.services.pagination import paginate

logger = logging.getLogger(__name__)

router = APIRouter()

admin_only = [Depends(require_roles(Role.ADMIN))]


def _find_category(db: Session, category_id: int) -> CategorySummary:
    """Category a product is being written against; ValidationError if it does not exist."""
    category = db.get(Category, category_id)
    if category is None:
        raise ApiError(ErrorKind.VALIDATION, details="Invalid category ID.")
    return CategorySummary.model_validate(category)


def _to_response(product: Product, category: CategorySummary | None) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        name=product.name,
        price=product.price,
        category=category,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


@router.post("", response_model=ProductEnvelope, dependencies=admin_only)
def create_product(
    body: ProductCreate,
    db: Annotated[Session, Depends(get_db)],
) -> ProductEnvelope:
    category = _find_category(db, body.category_id)
    product = Product(name=body.name, price=body.price, category_id=body.category_id)
    db.add(product)
    commit_or_422(db)
    db.refresh(product)
    logger.info("Created product id=%s category_id=%s", product.id, product.category_id)
    return ProductEnvelope(product=_to_response(product, category))


@router.get("", response_model=ProductListResponse, dependencies=[Depends(require_roles())])
def list_products(
    db: Annotated[Session, Depends(get_db)],
    page: str | None = None,
    size: str | None = None,
    category_id: Annotated[int | None, Query(alias="categoryId")] = None,
) -> ProductListResponse:
    """
    One page of products, optionally filtered by category.

    page and size fall back to 1 and 12 when missing, non-numeric or not
    positive. A page past the end returns no products but the real page count.
    """
    query = db.query(Product)
    if category_id is not None:
        query = query.filter(Product.category_id == category_id)

    count = query.count()
    window = paginate(page, size, count)
    products: list[Product] = []
    # Offsets past the end can exceed the database's integer range.
    if window.offset < count:
        products = (
            query.order_by(Product.id).offset(window.offset).limit(window.size).all()
        )

    # Products whose category was deleted are listed with category=None.
    categories: dict[int, CategorySummary] = {}
    category_ids = {p.category_id for p in products}
    if category_ids:
        rows = db.query(Category).filter(Category.id.in_(category_ids)).all()
        categories = {c.id: CategorySummary.model_validate(c) for c in rows}

    return ProductListResponse(
        page=window.page,
        total=window.total_pages,
        products=[_to_response(p, categories.get(p.category_id)) for p in products],
    )


@router.put("/{product_id}", response_model=ProductEnvelope, dependencies=admin_only)
def update_product(
    product_id: int,
    body: ProductUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> ProductEnvelope:
    """Apply the fields present in the body; the refreshed row is returned."""
    product = db.get(Product, product_id)
    if product is None:
        raise ApiError(ErrorKind.PRODUCT_NOT_FOUND)

    patch = body.model_dump(exclude_unset=True)
    category_id = patch.get("category_id") or product.category_id
    category = _find_category(db, category_id)
    patch["category_id"] = category_id

    for field, value in patch.items():
        setattr(product, field, value)
    commit_or_422(db)
    db.refresh(product)
    return ProductEnvelope(product=_to_response(product, category))


@router.delete("/{product_id}", dependencies=admin_only)
def delete_product(
    product_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    deleted = db.query(Product).filter(Product.id == product_id).delete(
        synchronize_session=False
    )
    db.commit()
    if deleted == 0:
        raise ApiError(ErrorKind.PRODUCT_NOT_FOUND)
    logger.info("Deleted product id=%s", product_id)
    return Response(status_code=status.HTTP_200_OK)
