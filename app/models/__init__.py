"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.category import Category
from app.models.product import Product
from app.models.user import Role, User

__all__ = ["Base", "Category", "Product", "Role", "User"]
