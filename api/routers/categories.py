import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from api.dependencies import get_db_session
from api.errors import error_response
from services import categories as categories_service
from services.errors import StoreError

router = APIRouter(tags=["catalog"])

logger = logging.getLogger(__name__)

CATEGORIES_CACHE_CONTROL = "public, s-maxage=60, stale-while-revalidate=300"


@router.get("/categories")
def api_categories(db: Session = Depends(get_db_session)):
    try:
        categories = categories_service.list_categories(db)
    except StoreError as exc:
        # без Cache-Control: ошибку кешировать нельзя
        return error_response(
            exc,
            logger=logger,
            log_message="Error fetching categories",
            fallback="Failed to fetch categories",
        )

    return JSONResponse(
        content=[category.model_dump() for category in categories],
        headers={"Cache-Control": CATEGORIES_CACHE_CONTROL},
    )
