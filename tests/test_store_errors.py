from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError, NoResultFound, OperationalError

from services.errors import (
    NotFound,
    StoreUnavailable,
    ValidationFailed,
    translate_store_error,
)


@pytest.mark.parametrize(
    "exc, expected",
    [
        (NoResultFound("no row"), NotFound),
        (IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")), ValidationFailed),
        (OperationalError("SELECT 1", {}, Exception("connection refused")), StoreUnavailable),
    ],
)
def test_translate_store_error(exc, expected):
    translated = translate_store_error(exc)

    assert type(translated) is expected
    assert translated.message is None
    assert "cause" in translated.to_dict()


def test_store_error_formats_context():
    err = NotFound("ORDER_NOT_FOUND", "Order not found", order_id="42")

    assert str(err) == "[ORDER_NOT_FOUND] order_id='42'"
    assert err.to_dict() == {"code": "ORDER_NOT_FOUND", "order_id": "42"}
