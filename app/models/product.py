"""ORM model for catalog products."""

from sqlalchemy import Column, Integer, Numeric, String

from app.models.base import Base, TimestampMixin


class Product(TimestampMixin, Base):
    """
    Catalog product.

    category_id is checked against existing categories when a product is
    written. It is deliberately not a foreign key: deleting a category leaves
    its products in place with a dangling category_id.
    """

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True)
    price = Column(Numeric(10, 2), nullable=False)
    category_id = Column(Integer, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', category_id={self.category_id})>"
