import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker

from config import Settings, get_settings
from database import build_engine, build_session_factory, init_db

from api.routers import (
    admin_categories,
    admin_dashboard,
    admin_products,
    categories,
    customer_orders,
    orders,
    products,
)


APP_TITLE = "Storefront API"
APP_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    session_factory: sessionmaker | None = None,
) -> FastAPI:
    """
    Собирает приложение. Хранилище создаётся здесь один раз;
    в тестах вместо него передаётся готовая session_factory.
    """
    settings = settings or get_settings()
    app = FastAPI(title=APP_TITLE, version=APP_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if session_factory is None:
        engine = build_engine(settings.database_url, echo=settings.sql_echo, pool_pre_ping=True)
        session_factory = build_session_factory(engine)

        @app.on_event("startup")
        def _startup() -> None:
            init_db(engine)
            logger.info("Database schema ensured")

        @app.on_event("shutdown")
        def _shutdown() -> None:
            engine.dispose()

    app.state.session_factory = session_factory

    app.include_router(categories.router)
    app.include_router(products.router)
    app.include_router(orders.router)
    app.include_router(admin_categories.router)
    app.include_router(customer_orders.router)
    app.include_router(admin_products.router)
    app.include_router(admin_dashboard.router)

    @app.exception_handler(Exception)
    async def json_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # noqa: WPS430
        logger.exception("Unhandled application error", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    @app.get("/")
    def healthcheck() -> dict[str, bool]:
        return {"ok": True}

    return app


__all__ = ["create_app"]
