"""Общие зависимости для маршрутов API."""

from typing import Iterator

from fastapi import Request
from sqlalchemy.orm import Session


def get_db_session(request: Request) -> Iterator[Session]:
    # фабрика сессий создаётся в create_app и лежит в app.state
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
