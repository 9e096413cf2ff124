"""
ORM-модели SQLAlchemy витрины: каталог (категории, подкатегории, товары)
и заказы.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from database import Base


def _new_id() -> str:
    return uuid4().hex


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(255), unique=True, nullable=False)
    slug = Column(String(255), unique=True, nullable=True)
    description = Column(Text, nullable=True)
    display_order = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=func.now(), nullable=False)

    sub_categories = relationship(
        "SubCategory",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="(SubCategory.display_order, SubCategory.name)",
    )
    products = relationship("Product", back_populates="category")


class SubCategory(Base):
    __tablename__ = "sub_categories"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=True)
    display_order = Column(Integer, nullable=False, default=0, server_default="0")
    category_id = Column(
        String(32), ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=func.now(), nullable=False)

    category = relationship("Category", back_populates="sub_categories")
    products = relationship("Product", back_populates="sub_category")


class Product(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0)
    min_quantity = Column(Integer, nullable=False, default=1, server_default="1")
    featured = Column(Boolean, nullable=False, default=False, server_default="false")
    in_stock = Column(Boolean, nullable=False, default=True, server_default="true")
    stock_count = Column(Integer, nullable=False, default=0, server_default="0")
    category_id = Column(String(32), ForeignKey("categories.id"), nullable=True, index=True)
    sub_category_id = Column(String(32), ForeignKey("sub_categories.id"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    category = relationship("Category", back_populates="products")
    sub_category = relationship("SubCategory", back_populates="products")


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=_new_id)
    customer_id = Column(String(32), nullable=True, index=True)
    customer_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    # Набор статусов задаёт приложение, в схеме ограничения нет
    status = Column(String(32), nullable=False, default="pending", server_default="pending")
    subtotal = Column(Float, nullable=False, default=0)
    tax = Column(Float, nullable=False, default=0)
    shipping = Column(Float, nullable=False, default=0)
    total = Column(Float, nullable=False, default=0)
    shipping_address = Column(Text, nullable=True)
    contact_number = Column(String(64), nullable=True)
    payment_reference = Column(String(128), nullable=True, unique=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=func.now(), nullable=False)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id = Column(String(32), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Float, nullable=False, default=0)

    order = relationship("Order", back_populates="items")


__all__ = [
    "Base",
    "Category",
    "Order",
    "OrderItem",
    "Product",
    "SubCategory",
]
