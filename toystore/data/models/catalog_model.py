"""SQLAlchemy ORM models for the catalog (categories and products)."""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from .base import Base


class CategoryModel(Base):
    """SQLAlchemy ORM model for categories table."""

    __tablename__ = "categories"

    category_id = Column(Integer, primary_key=True, autoincrement=True)
    category_name = Column(String(100), nullable=False, index=True)
    description = Column(String(500), nullable=True)

    products = relationship("ProductModel", back_populates="category")

    def __repr__(self):
        return f"<CategoryModel(id={self.category_id}, name={self.category_name})>"


class ProductModel(Base):
    """SQLAlchemy ORM model for products table."""

    __tablename__ = "products"

    product_id = Column(Integer, primary_key=True, autoincrement=True)
    product_name = Column(String(100), nullable=False, index=True)
    description = Column(Text(10000), nullable=False)
    image_path = Column(String(500), nullable=True)

    # NULL means "price to be determined"
    unit_price = Column(Numeric(18, 2), nullable=True)

    category_id = Column(Integer, ForeignKey("categories.category_id"), nullable=True, index=True)

    category = relationship("CategoryModel", back_populates="products")

    __table_args__ = (
        CheckConstraint("unit_price IS NULL OR unit_price > 0", name="ck_products_unit_price_positive"),
    )

    def __repr__(self):
        return f"<ProductModel(id={self.product_id}, name={self.product_name}, price={self.unit_price})>"
