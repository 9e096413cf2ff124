from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _strip_or_none(value: str | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class SubCategoryView(BaseModel):
    id: str
    name: str
    count: int


class CategoryView(BaseModel):
    id: str
    name: str
    count: int
    subcategories: list[SubCategoryView] = Field(default_factory=list)


class AdminCategoryView(BaseModel):
    id: str
    name: str
    slug: str | None
    description: str | None
    display_order: int
    product_count: int
    sub_categories: list[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_category(cls, category) -> "AdminCategoryView":
        return cls(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
            display_order=int(category.display_order or 0),
            product_count=len(category.products),
            sub_categories=[sub.name for sub in category.sub_categories],
            created_at=category.created_at,
            updated_at=category.updated_at,
        )


class CategoryCreatePayload(BaseModel):
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    display_order: int = 0
    sub_categories: list[str] = Field(default_factory=list)

    @field_validator("name", "slug", "description", mode="before")
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        return _strip_or_none(value)


class CategoryUpdatePayload(BaseModel):
    name: str | None = None
    slug: str | None = None
    description: str | None = None
    display_order: int | None = None
    sub_categories: list[str] | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("name", "slug", "description", mode="before")
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        return _strip_or_none(value)


class ProductView(BaseModel):
    id: str
    name: str
    description: str | None
    price: float
    min_quantity: int
    category: str | None
    sub_category: str | None
    featured: bool
    in_stock: bool
    stock_count: int


class ProductPayload(BaseModel):
    """
    Тело POST/PUT /admin/products. Числа и флаги приходят из формы
    и строками, и значениями; разбор и проверка в services.products.
    """

    name: str | None = None
    description: str | None = None
    price: float | str | None = None
    min_quantity: int | str | None = None
    category: str | None = None
    sub_category: str | None = None
    featured: bool | str | None = None
    in_stock: bool | str | None = None
    stock_count: int | str | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("name", "description", "category", "sub_category", mode="before")
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        return _strip_or_none(value)
