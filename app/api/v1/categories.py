"""Category CRUD endpoints (admin only)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.v1.auth import require_roles
from app.core.database import commit_or_422, get_db
from app.core.errors import ApiError, ErrorKind
from app.models import Category, Role
from app.schemas.category import (
    CategoryCreate,
    CategoryEnvelope,
    CategoryListResponse,
    CategoryResponse,
    CategoryUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_roles(Role.ADMIN))])


@router.post("", response_model=CategoryEnvelope)
def create_category(
    body: CategoryCreate,
    db: Annotated[Session, Depends(get_db)],
) -> CategoryEnvelope:
    category = Category(name=body.name)
    db.add(category)
    commit_or_422(db)
    db.refresh(category)
    logger.info("Created category id=%s", category.id)
    return CategoryEnvelope(category=CategoryResponse.model_validate(category))


@router.get("", response_model=CategoryListResponse)
def list_categories(db: Annotated[Session, Depends(get_db)]) -> CategoryListResponse:
    categories = db.query(Category).order_by(Category.id).all()
    return CategoryListResponse(
        categories=[CategoryResponse.model_validate(c) for c in categories]
    )


@router.put("/{category_id}", response_model=CategoryEnvelope)
def update_category(
    category_id: int,
    body: CategoryUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> CategoryEnvelope:
    """Rename a category; the refreshed row is returned."""
    category = db.get(Category, category_id)
    if category is None:
        raise ApiError(ErrorKind.CATEGORY_NOT_FOUND)

    category.name = body.name
    commit_or_422(db)
    db.refresh(category)
    return CategoryEnvelope(category=CategoryResponse.model_validate(category))


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Delete a category. Products that reference it are left untouched."""
    deleted = db.query(Category).filter(Category.id == category_id).delete(
        synchronize_session=False
    )
    db.commit()
    if deleted == 0:
        raise ApiError(ErrorKind.CATEGORY_NOT_FOUND)
    logger.info("Deleted category id=%s", category_id)
    return Response(status_code=status.HTTP_200_OK)
