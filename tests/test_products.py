from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session

from models import Category, Product, SubCategory
from schemas.catalog import ProductPayload
from services import products as products_service
from services.errors import ValidationFailed


def test_clamp_take():
    assert products_service.clamp_take(None) == 50
    assert products_service.clamp_take(0) == 1
    assert products_service.clamp_take(7) == 7
    assert products_service.clamp_take(1000) == 100


def test_list_products_filters(db_session: Session, add_category):
    lighting = add_category("Lighting", sub_categories=[("Cup Bulb", None, 0, 0)])
    cup_bulb = lighting.sub_categories[0]
    now = datetime.utcnow()
    db_session.add_all(
        [
            Product(name="Panel", category_id=lighting.id, featured=True, created_at=now),
            Product(
                name="Cup 5W",
                sub_category_id=cup_bulb.id,
                created_at=now - timedelta(minutes=1),
            ),
            Product(name="Hammer", created_at=now - timedelta(minutes=2)),
        ]
    )
    db_session.commit()

    everything = products_service.list_products(db_session)
    assert [p.name for p in everything] == ["Panel", "Cup 5W", "Hammer"]

    featured = products_service.list_products(db_session, featured=True)
    assert [p.name for p in featured] == ["Panel"]
    assert featured[0].category == "Lighting"

    by_sub = products_service.list_products(db_session, category="Cup Bulb")
    assert [(p.name, p.sub_category) for p in by_sub] == [("Cup 5W", "Cup Bulb")]

    assert [p.name for p in products_service.list_products(db_session, take=1)] == ["Panel"]


def test_products_endpoint_is_not_cached(app, call):
    status, headers, body = call(app, "GET", "/products", query="take=5")

    assert status == 200
    assert headers["cache-control"] == "no-store"
    assert body == []


def test_products_endpoint_store_failure(broken_app, call):
    status, headers, body = call(broken_app, "GET", "/products")

    assert status == 500
    assert body == {"error": "Failed to fetch products"}
    assert "cache-control" not in headers


def test_get_product_endpoint(app, call, add_category, db_session: Session):
    lighting = add_category("Lighting")
    product = Product(name="Panel 18W", price=4500, category_id=lighting.id, stock_count=3)
    db_session.add(product)
    db_session.commit()

    status, headers, body = call(app, "GET", f"/products/{product.id}")

    assert status == 200
    assert headers["cache-control"] == "no-store"
    assert body["name"] == "Panel 18W"
    assert body["category"] == "Lighting"
    assert body["stock_count"] == 3
    assert body["min_quantity"] == 1


def test_get_unknown_product_returns_404(app, call):
    status, _, body = call(app, "GET", "/products/missing")

    assert status == 404
    assert body == {"error": "Product not found"}


def test_get_product_store_failure(broken_app, call):
    status, _, body = call(broken_app, "GET", "/products/any")

    assert status == 500
    assert body == {"error": "Failed to fetch product"}


def test_create_product_creates_missing_category(db_session: Session):
    payload = ProductPayload(
        name=" Cup Bulb 5W ",
        price="1200",
        category="LED Bulb",
        sub_category="Cup Bulb",
        featured="true",
        in_stock="false",
        stock_count="4",
    )

    product = products_service.create_product(db_session, payload)

    assert product.name == "Cup Bulb 5W"
    assert product.price == 1200.0
    assert (product.category, product.sub_category) == ("LED Bulb", "Cup Bulb")
    assert product.featured is True
    assert product.in_stock is False
    assert product.stock_count == 4
    category = db_session.scalars(select(Category).where(Category.name == "LED Bulb")).one()
    assert category.slug == "led-bulb"
    assert [sub.slug for sub in category.sub_categories] == ["cup-bulb"]


def test_create_product_reuses_existing_category(db_session: Session, add_category):
    add_category("LED Bulb", sub_categories=[("Cup Bulb", "cup-bulb", 0, 0)])

    products_service.create_product(
        db_session,
        ProductPayload(name="Cup 7W", price=900, category="LED Bulb", sub_category="Cup Bulb"),
    )

    assert len(db_session.scalars(select(Category)).all()) == 1
    assert len(db_session.scalars(select(SubCategory)).all()) == 1


@pytest.mark.parametrize(
    ("fields", "message"),
    [
        ({"price": 10, "category": "A", "sub_category": "B"},
         "Name, price, category, and subCategory are required"),
        ({"name": "X", "price": "abc", "category": "A", "sub_category": "B"},
         "Price must be a valid number greater than or equal to 0"),
        ({"name": "X", "price": -1, "category": "A", "sub_category": "B"},
         "Price must be a valid number greater than or equal to 0"),
        ({"name": "X", "price": 1, "min_quantity": 0, "category": "A", "sub_category": "B"},
         "Minimum quantity must be at least 1"),
        ({"name": "X", "price": 1, "stock_count": -2, "category": "A", "sub_category": "B"},
         "Stock count must be a valid number greater than or equal to 0"),
    ],
)
def test_create_product_validation(db_session: Session, fields, message):
    with pytest.raises(ValidationFailed) as exc_info:
        products_service.create_product(db_session, ProductPayload(**fields))

    assert exc_info.value.message == message
    assert db_session.scalars(select(Product)).all() == []


def test_admin_product_endpoints(app, call, db_session: Session):
    body = {"name": "Flood 50W", "price": 15000, "category": "Flood", "sub_category": "AC"}

    status, _, created = call(app, "POST", "/admin/products", body)
    assert status == 201
    assert created["category"] == "Flood"

    status, _, duplicate = call(app, "POST", "/admin/products", body)
    assert status == 400
    assert duplicate == {"error": "Product with this name already exists"}

    status, _, updated = call(
        app,
        "PUT",
        f"/admin/products/{created['id']}",
        {**body, "price": "16000", "sub_category": "Solar"},
    )
    assert status == 200
    assert updated["price"] == 16000.0
    assert updated["sub_category"] == "Solar"

    status, _, listed = call(app, "GET", "/admin/products")
    assert status == 200
    assert [item["id"] for item in listed] == [created["id"]]

    status, _, body = call(app, "DELETE", f"/admin/products/{created['id']}")
    assert status == 200
    assert body == {"success": True}
    db_session.expire_all()
    assert db_session.scalars(select(Product)).all() == []


def test_admin_product_unknown_id_returns_404(app, call):
    body = {"name": "Flood 50W", "price": 1, "category": "Flood", "sub_category": "AC"}

    put_status, _, put_body = call(app, "PUT", "/admin/products/missing", body)
    delete_status, _, delete_body = call(app, "DELETE", "/admin/products/missing")

    assert (put_status, put_body) == (404, {"error": "Product not found"})
    assert (delete_status, delete_body) == (404, {"error": "Product not found"})
