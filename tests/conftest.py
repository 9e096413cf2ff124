from __future__ import annotations

import asyncio
import json
from pathlib import Path
import sys
from typing import Any, Callable, Iterator

import pytest
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from api.main import create_app
from config import Settings
from database import Base, build_engine, build_session_factory
from models import Category, Order, Product, SubCategory


def _memory_engine():
    return build_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture()
def session_factory() -> Iterator[sessionmaker]:
    engine = _memory_engine()
    Base.metadata.create_all(bind=engine)
    try:
        yield build_session_factory(engine)
    finally:
        engine.dispose()


@pytest.fixture()
def broken_session_factory() -> Iterator[sessionmaker]:
    # Таблиц нет: любой запрос падает с OperationalError
    engine = _memory_engine()
    try:
        yield build_session_factory(engine)
    finally:
        engine.dispose()


@pytest.fixture()
def db_session(session_factory: sessionmaker) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(database_url="sqlite+pysqlite:///:memory:")


@pytest.fixture()
def app(session_factory: sessionmaker, test_settings: Settings):
    return create_app(test_settings, session_factory=session_factory)


@pytest.fixture()
def broken_app(broken_session_factory: sessionmaker, test_settings: Settings):
    return create_app(test_settings, session_factory=broken_session_factory)


async def _call_app(
    app, method: str, path: str, body: Any = None, query: str = ""
) -> tuple[int, dict[str, str], Any]:
    raw_body = b"" if body is None else json.dumps(body).encode()
    response_body = bytearray()
    status: int | None = None
    headers: list[tuple[bytes, bytes]] = []
    request_sent = False

    async def receive() -> dict[str, object]:
        nonlocal request_sent
        if request_sent:
            return {"type": "http.disconnect"}
        request_sent = True
        return {"type": "http.request", "body": raw_body, "more_body": False}

    async def send(message: dict[str, object]) -> None:
        nonlocal status, headers, response_body
        if message["type"] == "http.response.start":
            status = int(message["status"])
            headers = list(message.get("headers", []))
        elif message["type"] == "http.response.body":
            response_body += message.get("body", b"")

    request_headers = [(b"host", b"testserver")]
    if body is not None:
        request_headers.append((b"content-type", b"application/json"))
        request_headers.append((b"content-length", str(len(raw_body)).encode()))

    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": query.encode(),
        "headers": request_headers,
        "client": ("testclient", 50000),
        "server": ("testserver", 80),
        "scheme": "http",
    }

    await app(scope, receive, send)
    decoded = json.loads(response_body) if response_body else None
    return status or 500, {k.decode(): v.decode() for k, v in headers}, decoded


@pytest.fixture()
def call() -> Callable[..., tuple[int, dict[str, str], Any]]:
    def _call(app, method: str, path: str, body: Any = None, query: str = ""):
        return asyncio.run(_call_app(app, method, path, body=body, query=query))

    return _call


@pytest.fixture()
def add_category(db_session: Session):
    def _add(
        name: str,
        *,
        slug: str | None = None,
        display_order: int = 0,
        products: int = 0,
        sub_categories: list[tuple[str, str | None, int, int]] | None = None,
    ) -> Category:
        category = Category(name=name, slug=slug, display_order=display_order)
        db_session.add(category)
        db_session.flush()
        for index in range(products):
            db_session.add(Product(name=f"{name} product {index}", category_id=category.id))
        for sub_name, sub_slug, sub_order, sub_products in sub_categories or []:
            sub = SubCategory(
                name=sub_name, slug=sub_slug, display_order=sub_order, category_id=category.id
            )
            db_session.add(sub)
            db_session.flush()
            for index in range(sub_products):
                db_session.add(Product(name=f"{sub_name} product {index}", sub_category_id=sub.id))
        db_session.commit()
        return category

    return _add


@pytest.fixture()
def add_order(db_session: Session):
    def _add(**fields: Any) -> Order:
        fields.setdefault("customer_name", "Ada Obi")
        fields.setdefault("email", "ada@example.com")
        fields.setdefault("total", 1075.0)
        order = Order(**fields)
        db_session.add(order)
        db_session.commit()
        return order

    return _add
