"""API routes."""

from fastapi import APIRouter

from app.api.v1 import auth, categories, health, products

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(categories.router, prefix="/category", tags=["category"])
router.include_router(products.router, prefix="/product", tags=["product"])
