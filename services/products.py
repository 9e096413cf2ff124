from __future__ import annotations

import logging
import math

from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload

from database import store_operation
from models import Category, Product, SubCategory
from schemas.catalog import ProductPayload, ProductView
from services.categories import generate_slug
from services.errors import ErrorCodes, NotFound, ValidationFailed

logger = logging.getLogger(__name__)

DEFAULT_TAKE = 50
MAX_TAKE = 100


def clamp_take(take: int | None) -> int:
    if take is None:
        return DEFAULT_TAKE
    return max(1, min(take, MAX_TAKE))


def serialize_product(product: Product) -> ProductView:
    return ProductView(
        id=product.id,
        name=product.name,
        description=product.description,
        price=float(product.price or 0),
        min_quantity=int(product.min_quantity or 1),
        category=product.category.name if product.category else None,
        sub_category=product.sub_category.name if product.sub_category else None,
        featured=bool(product.featured),
        in_stock=bool(product.in_stock),
        stock_count=int(product.stock_count or 0),
    )


def _with_relations(query):
    return query.options(selectinload(Product.category), selectinload(Product.sub_category))


def list_products(
    session: Session,
    *,
    featured: bool | None = None,
    take: int | None = None,
    category: str | None = None,
) -> list[ProductView]:
    query = _with_relations(
        select(Product).order_by(Product.created_at.desc(), Product.id).limit(clamp_take(take))
    )
    if featured is not None:
        query = query.where(Product.featured == featured)
    if category:
        # совпадение по имени категории или подкатегории
        query = (
            query.outerjoin(Category, Product.category_id == Category.id)
            .outerjoin(SubCategory, Product.sub_category_id == SubCategory.id)
            .where(or_(Category.name == category, SubCategory.name == category))
        )

    with store_operation(session):
        products = session.scalars(query).all()
        return [serialize_product(product) for product in products]


def _load_product(session: Session, product_id: str) -> Product:
    query = _with_relations(select(Product)).where(Product.id == product_id)
    with store_operation(session):
        product = session.scalars(query).first()
    if not product:
        raise NotFound(ErrorCodes.PRODUCT_NOT_FOUND, "Product not found", product_id=product_id)
    return product


def get_product(session: Session, product_id: str) -> ProductView:
    return serialize_product(_load_product(session, product_id))


# --- Админка ---------------------------------------------------------------


def list_admin_products(session: Session) -> list[ProductView]:
    query = _with_relations(select(Product).order_by(Product.created_at.desc(), Product.id))
    with store_operation(session):
        return [serialize_product(product) for product in session.scalars(query).all()]


def _parse_float(value) -> float | None:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _parse_int(value) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _invalid(message: str, field: str) -> ValidationFailed:
    return ValidationFailed(ErrorCodes.INVALID_VALUE, message, field=field)


def _product_fields(payload: ProductPayload) -> dict:
    """Проверяет тело запроса и возвращает значения колонок товара."""

    missing_price = payload.price is None or payload.price == ""
    if not payload.name or missing_price or not payload.category or not payload.sub_category:
        raise ValidationFailed(
            ErrorCodes.MISSING_FIELD,
            "Name, price, category, and subCategory are required",
        )

    price = _parse_float(payload.price)
    if price is None or price < 0:
        raise _invalid("Price must be a valid number greater than or equal to 0", "price")

    if payload.min_quantity in (None, ""):
        min_quantity = 1
    else:
        min_quantity = _parse_int(payload.min_quantity)
        if min_quantity is None or min_quantity < 1:
            raise _invalid("Minimum quantity must be at least 1", "min_quantity")

    stock_count = _parse_int(payload.stock_count)
    if stock_count is not None and stock_count < 0:
        raise _invalid(
            "Stock count must be a valid number greater than or equal to 0", "stock_count"
        )

    return {
        "name": payload.name,
        "description": payload.description,
        "price": price,
        "min_quantity": min_quantity,
        "featured": payload.featured is True or payload.featured == "true",
        "in_stock": payload.in_stock is not False and payload.in_stock != "false",
        "stock_count": stock_count or 0,
    }


def _resolve_category(
    session: Session, category_name: str, sub_category_name: str
) -> tuple[Category, SubCategory]:
    """Находит категорию и подкатегорию по именам, отсутствующие создаёт."""

    category = session.scalars(select(Category).where(Category.name == category_name)).first()
    if category is None:
        category = Category(name=category_name, slug=generate_slug(category_name))
        session.add(category)
        session.flush()
        logger.info("Category %s created for product", category_name)

    sub_category = session.scalars(
        select(SubCategory).where(
            SubCategory.category_id == category.id,
            SubCategory.name == sub_category_name,
        )
    ).first()
    if sub_category is None:
        sub_category = SubCategory(
            name=sub_category_name,
            slug=generate_slug(sub_category_name),
            category_id=category.id,
        )
        session.add(sub_category)
        session.flush()

    return category, sub_category


def _ensure_name_free(session: Session, name: str, *, exclude_id: str | None = None) -> None:
    query = select(Product.id).where(Product.name == name)
    if exclude_id:
        query = query.where(Product.id != exclude_id)
    if session.execute(query.limit(1)).scalar() is not None:
        raise ValidationFailed(
            ErrorCodes.DUPLICATE_NAME, "Product with this name already exists", name=name
        )


def _save_product(session: Session, product: Product, payload: ProductPayload) -> ProductView:
    fields = _product_fields(payload)

    with store_operation(session):
        _ensure_name_free(session, fields["name"], exclude_id=product.id)
        category, sub_category = _resolve_category(
            session, payload.category, payload.sub_category
        )
        for key, value in fields.items():
            setattr(product, key, value)
        product.category_id = category.id
        product.sub_category_id = sub_category.id

        session.add(product)
        session.commit()
        session.refresh(product)
        return serialize_product(product)


def create_product(session: Session, payload: ProductPayload) -> ProductView:
    view = _save_product(session, Product(), payload)
    logger.info("Product %s created (%s)", view.id, view.name)
    return view


def update_product(session: Session, product_id: str, payload: ProductPayload) -> ProductView:
    product = _load_product(session, product_id)
    return _save_product(session, product, payload)


def delete_product(session: Session, product_id: str) -> None:
    product = _load_product(session, product_id)
    with store_operation(session):
        session.delete(product)
        session.commit()
    logger.info("Product %s deleted", product_id)
