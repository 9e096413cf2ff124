from __future__ import annotations

import logging
import re

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from database import store_operation
from models import Category, Product, SubCategory
from schemas.catalog import (
    CategoryCreatePayload,
    CategoryUpdatePayload,
    CategoryView,
    SubCategoryView,
)
from services.errors import ErrorCodes, NotFound, ValidationFailed

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def derive_slug(slug: str | None, name: str) -> str:
    """Явный slug, иначе имя в нижнем регистре с дефисами вместо пробелов."""

    if slug:
        return slug
    return _WHITESPACE_RE.sub("-", name.lower())


def generate_slug(name: str) -> str:
    slug = name.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def _sub_category_view(sub: SubCategory) -> SubCategoryView:
    return SubCategoryView(
        id=derive_slug(sub.slug, sub.name),
        name=sub.name,
        count=len(sub.products),
    )


def _category_view(category: Category) -> CategoryView:
    # count: только товары, привязанные к самой категории
    return CategoryView(
        id=derive_slug(category.slug, category.name),
        name=category.name.upper(),
        count=len(category.products),
        subcategories=[_sub_category_view(sub) for sub in category.sub_categories],
    )


def list_categories(session: Session) -> list[CategoryView]:
    query = (
        select(Category)
        .options(
            selectinload(Category.sub_categories).selectinload(SubCategory.products),
            selectinload(Category.products),
        )
        .order_by(Category.display_order, Category.name)
    )
    with store_operation(session):
        categories = session.scalars(query).all()
        return [_category_view(category) for category in categories]


# --- Админка ---------------------------------------------------------------


def get_category(session: Session, category_id: str) -> Category:
    with store_operation(session):
        category = session.get(Category, category_id)
    if not category:
        raise NotFound(ErrorCodes.CATEGORY_NOT_FOUND, "Category not found", category_id=category_id)
    return category


def list_admin_categories(session: Session) -> list[Category]:
    query = (
        select(Category)
        .options(selectinload(Category.sub_categories), selectinload(Category.products))
        .order_by(Category.created_at.desc(), Category.name)
    )
    with store_operation(session):
        return list(session.scalars(query).all())


def _name_taken(session: Session, name: str, *, exclude_id: str | None = None) -> bool:
    query = select(Category.id).where(Category.name == name)
    if exclude_id:
        query = query.where(Category.id != exclude_id)
    return session.execute(query.limit(1)).scalar() is not None


def _slug_taken(session: Session, slug: str, *, exclude_id: str | None = None) -> bool:
    query = select(Category.id).where(Category.slug == slug)
    if exclude_id:
        query = query.where(Category.id != exclude_id)
    return session.execute(query.limit(1)).scalar() is not None


def _conflict_error(exc: IntegrityError) -> ValidationFailed:
    return ValidationFailed(
        ErrorCodes.CONSTRAINT_VIOLATION,
        "A category with this name or slug already exists",
        cause=str(exc.orig),
    )


def create_category(session: Session, payload: CategoryCreatePayload) -> Category:
    if not payload.name:
        raise ValidationFailed(ErrorCodes.MISSING_FIELD, "Category name is required", field="name")

    with store_operation(session):
        if _name_taken(session, payload.name):
            raise ValidationFailed(
                ErrorCodes.DUPLICATE_NAME,
                "A category with this name already exists",
                name=payload.name,
            )

        if payload.slug and _slug_taken(session, payload.slug):
            raise ValidationFailed(
                ErrorCodes.DUPLICATE_SLUG,
                "A category with this slug already exists",
                slug=payload.slug,
            )

        category = Category(
            name=payload.name,
            slug=payload.slug or generate_slug(payload.name),
            description=payload.description,
            display_order=payload.display_order,
        )
        for sub_name in payload.sub_categories:
            sub_name = sub_name.strip()
            if not sub_name:
                continue
            category.sub_categories.append(
                SubCategory(name=sub_name, slug=generate_slug(sub_name))
            )

        session.add(category)
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise _conflict_error(exc) from exc
        session.refresh(category)

    logger.info("Category %s created (%s)", category.id, category.name)
    return category


def _sync_sub_categories(session: Session, category: Category, names: list[str]) -> None:
    wanted = [name.strip() for name in names if name and name.strip()]
    wanted_set = set(wanted)

    removed = [sub for sub in category.sub_categories if sub.name not in wanted_set]
    if removed:
        linked = session.execute(
            select(func.count(Product.id)).where(
                Product.sub_category_id.in_([sub.id for sub in removed])
            )
        ).scalar_one()
        if linked:
            raise ValidationFailed(
                ErrorCodes.HAS_PRODUCTS,
                "Cannot remove subcategories that are currently linked to products",
                category_id=category.id,
            )
        for sub in removed:
            category.sub_categories.remove(sub)

    existing = {sub.name for sub in category.sub_categories}
    for name in wanted:
        if name in existing:
            continue
        category.sub_categories.append(SubCategory(name=name, slug=generate_slug(name)))
        existing.add(name)


def update_category(
    session: Session, category_id: str, payload: CategoryUpdatePayload
) -> Category:
    category = get_category(session, category_id)
    fields_set = payload.model_fields_set

    with store_operation(session):
        if payload.name:
            if _name_taken(session, payload.name, exclude_id=category.id):
                raise ValidationFailed(
                    ErrorCodes.DUPLICATE_NAME,
                    "A category with this name already exists",
                    name=payload.name,
                )
            category.name = payload.name

        if "slug" in fields_set:
            if payload.slug and _slug_taken(session, payload.slug, exclude_id=category.id):
                raise ValidationFailed(
                    ErrorCodes.DUPLICATE_SLUG,
                    "A category with this slug already exists",
                    slug=payload.slug,
                )
            category.slug = payload.slug

        if "description" in fields_set:
            category.description = payload.description

        if payload.display_order is not None:
            category.display_order = payload.display_order

        if payload.sub_categories is not None:
            _sync_sub_categories(session, category, payload.sub_categories)

        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            raise _conflict_error(exc) from exc
        session.refresh(category)

    return category


def delete_category(session: Session, category_id: str) -> None:
    category = get_category(session, category_id)

    with store_operation(session):
        product_count = session.execute(
            select(func.count(Product.id)).where(Product.category_id == category.id)
        ).scalar_one()
        if product_count:
            raise ValidationFailed(
                ErrorCodes.HAS_PRODUCTS,
                f"Cannot delete category because it has {product_count} product(s)",
                category_id=category.id,
            )

        # подкатегории удаляются каскадом, их товары остались бы без подкатегории
        sub_ids = [sub.id for sub in category.sub_categories]
        if sub_ids:
            linked = session.execute(
                select(func.count(Product.id)).where(Product.sub_category_id.in_(sub_ids))
            ).scalar_one()
            if linked:
                raise ValidationFailed(
                    ErrorCodes.HAS_PRODUCTS,
                    f"Cannot delete category because its subcategories have {linked} product(s)",
                    category_id=category.id,
                )

        session.delete(category)
        session.commit()

    logger.info("Category %s deleted", category_id)
