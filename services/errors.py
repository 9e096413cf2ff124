"""
Ошибки слоя хранилища.

Все ошибки SQLAlchemy переводятся в один из трёх видов:
- NotFound: запись не найдена;
- ValidationFailed: хранилище отклонило данные (ограничения, формат);
- StoreUnavailable: соединение и всё остальное.

Роутеры сопоставляют вид ошибки с HTTP-кодом (см. api/errors.py).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import DataError, IntegrityError, NoResultFound, SQLAlchemyError


class ErrorCodes:
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    NO_RESULT = "NO_RESULT"

    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    DUPLICATE_NAME = "DUPLICATE_NAME"
    DUPLICATE_SLUG = "DUPLICATE_SLUG"
    INVALID_VALUE = "INVALID_VALUE"
    MISSING_FIELD = "MISSING_FIELD"
    HAS_PRODUCTS = "HAS_PRODUCTS"
    STATUS_LOCKED = "STATUS_LOCKED"

    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class StoreError(Exception):
    """
    Базовая ошибка хранилища.

    message: текст для клиента (если None, роутер подставит свой);
    context: детали для логов, клиенту не отдаются.

    Usage:
        raise NotFound(ErrorCodes.ORDER_NOT_FOUND, order_id=order_id)
    """

    def __init__(self, code: str, message: str | None = None, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            **self.context,
        }


class NotFound(StoreError):
    pass


class ValidationFailed(StoreError):
    pass


class StoreUnavailable(StoreError):
    pass


def translate_store_error(exc: SQLAlchemyError) -> StoreError:
    cause = str(getattr(exc, "orig", None) or exc)
    if isinstance(exc, NoResultFound):
        return NotFound(ErrorCodes.NO_RESULT, cause=cause)
    if isinstance(exc, (IntegrityError, DataError)):
        return ValidationFailed(ErrorCodes.CONSTRAINT_VIOLATION, cause=cause)
    return StoreUnavailable(ErrorCodes.STORE_UNAVAILABLE, cause=cause)
