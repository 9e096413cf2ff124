"""Сопоставление ошибок хранилища с HTTP-ответами."""

from __future__ import annotations

import logging

from fastapi.responses import JSONResponse

from services.errors import NotFound, StoreError, ValidationFailed


def error_response(
    exc: StoreError,
    *,
    logger: logging.Logger,
    log_message: str,
    fallback: str,
    not_found: str | None = None,
    invalid: str | None = None,
) -> JSONResponse:
    """
    NotFound -> 404, ValidationFailed -> 400 (если роутер задал текст),
    всё остальное -> 500 с фиксированным сообщением.
    Детали исходной ошибки уходят только в лог.
    """
    if isinstance(exc, NotFound) and not_found is not None:
        logger.warning("%s: %s", log_message, exc)
        return JSONResponse(status_code=404, content={"error": exc.message or not_found})

    if isinstance(exc, ValidationFailed) and invalid is not None:
        logger.warning("%s: %s", log_message, exc)
        return JSONResponse(status_code=400, content={"error": exc.message or invalid})

    logger.exception(log_message, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": fallback})
