from dataclasses import dataclass, field
from pathlib import Path
import logging
import os

from dotenv import load_dotenv

# Загружаем .env один раз при импорте модуля
load_dotenv()


DEFAULT_DB_NAME = "storefront"
DEFAULT_DB_USER = "storefront_user"


@dataclass
class Settings:
    database_url: str
    sql_echo: bool = False
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: int = logging.INFO
    log_file: Path | None = None


def normalize_database_url(raw: str | None) -> str | None:
    """
    Приводит DATABASE_URL к рабочему виду:
    - убирает пробелы и обрамляющие кавычки;
    - для Neon дописывает sslmode=require, если его нет.
    """
    if raw is None:
        return None

    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        value = value[1:-1].strip()
    if not value:
        return None

    if "neon.tech" in value and "sslmode=" not in value:
        separator = "&" if "?" in value else "?"
        value = f"{value}{separator}sslmode=require"

    return value


def _default_database_url() -> str:
    name = os.getenv("DB_NAME", DEFAULT_DB_NAME)
    user = os.getenv("DB_USER", DEFAULT_DB_USER)
    password = os.getenv("DB_PASSWORD", "strongpassword")
    host = os.getenv("DB_HOST", "localhost")
    port = os.getenv("DB_PORT", "5432")
    return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{name}"


def _load_cors_origins() -> list[str]:
    raw = os.getenv("CORS_ORIGINS", "").strip()
    if not raw:
        return ["*"]

    origins = [part.strip() for part in raw.split(",") if part.strip()]
    return origins or ["*"]


def _load_log_level() -> int:
    raw = os.getenv("LOG_LEVEL", "").strip().upper()
    if not raw:
        return logging.INFO
    if raw.isdigit():
        return int(raw)

    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.INFO


def get_settings() -> Settings:
    """
    Возвращает объект настроек из окружения:
    - database_url (DATABASE_URL или сборка из DB_*)
    - sql_echo (SQLALCHEMY_ECHO=1)
    - cors_origins (CORS_ORIGINS через запятую)
    - log_level / log_file
    """
    database_url = normalize_database_url(os.getenv("DATABASE_URL")) or _default_database_url()

    log_file_raw = os.getenv("LOG_FILE", "").strip()

    return Settings(
        database_url=database_url,
        sql_echo=os.getenv("SQLALCHEMY_ECHO") == "1",
        cors_origins=_load_cors_origins(),
        log_level=_load_log_level(),
        log_file=Path(log_file_raw) if log_file_raw else None,
    )
