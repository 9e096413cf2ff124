"""
Логирование витрины: консоль и файл с ротацией.

Файловый обработчик общий для корневого логгера и логгеров uvicorn,
у которых propagate=False. Повторный вызов setup_logging (reload uvicorn,
тесты) заменяет обработчики, а не добавляет новые.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
API_LOG_FILE = LOG_DIR / "storefront-api.log"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_MAX_BYTES = 5_000_000
LOG_BACKUPS = 3

# uvicorn.error пишет через родительский "uvicorn"
SERVER_LOGGERS = ("uvicorn", "uvicorn.access")

FILE_HANDLER_NAME = "storefront-file"


def _file_handler(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
    )
    handler.set_name(FILE_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _attach_file_handler(logger: logging.Logger, handler: RotatingFileHandler | None) -> None:
    for existing in list(logger.handlers):
        if existing.get_name() == FILE_HANDLER_NAME:
            logger.removeHandler(existing)
            existing.close()
    if handler is not None:
        logger.addHandler(handler)


def setup_logging(
    level: int = logging.INFO, *, log_file: Path | None = None
) -> RotatingFileHandler | None:
    """Настраивает корневой логгер и логгеры uvicorn. Возвращает файловый обработчик."""

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)
    console = logging.StreamHandler()
    console.setFormatter(formatter)

    file_handler = _file_handler(Path(log_file), level, formatter) if log_file else None
    handlers: list[logging.Handler] = [console]
    if file_handler is not None:
        handlers.append(file_handler)

    # force=True закрывает обработчики предыдущего вызова
    logging.basicConfig(level=level, handlers=handlers, force=True)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.setLevel(level)
        _attach_file_handler(server_logger, file_handler)

    return file_handler
