"""
Конфигурация SQLAlchemy.
Движок и фабрика сессий создаются один раз при старте приложения
(см. api.main.create_app) и передаются дальше явно.
Таблицы создаются через Base.metadata.create_all.
"""

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from services.errors import StoreError, translate_store_error


Base = declarative_base()


def build_engine(database_url: str, *, echo: bool = False, **kwargs) -> Engine:
    return create_engine(database_url, future=True, echo=echo, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


@contextmanager
def store_operation(session: Session) -> Iterator[Session]:
    """
    Откатывает сессию при любой ошибке хранилища.
    Ошибки SQLAlchemy переводятся в StoreError, уже готовые StoreError
    пробрасываются как есть (после отката несохранённых изменений).
    """

    try:
        yield session
    except StoreError:
        session.rollback()
        raise
    except SQLAlchemyError as exc:
        session.rollback()
        raise translate_store_error(exc) from exc


def init_db(engine: Engine) -> None:
    import models  # noqa: F401  регистрирует таблицы в Base.metadata

    Base.metadata.create_all(bind=engine)
