import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from api.dependencies import get_db_session
from api.errors import error_response
from services import products as products_service
from services.errors import StoreError

router = APIRouter(tags=["catalog"])

logger = logging.getLogger(__name__)


@router.get("/products")
def api_products(
    featured: bool | None = None,
    take: int | None = None,
    category: str | None = None,
    db: Session = Depends(get_db_session),
):
    try:
        products = products_service.list_products(
            db, featured=featured, take=take, category=category
        )
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error fetching public products",
            fallback="Failed to fetch products",
        )

    return JSONResponse(
        content=[product.model_dump() for product in products],
        headers={"Cache-Control": "no-store"},
    )


@router.get("/products/{product_id}")
def api_product(product_id: str, db: Session = Depends(get_db_session)):
    try:
        product = products_service.get_product(db, product_id)
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error fetching product",
            fallback="Failed to fetch product",
            not_found="Product not found",
        )

    return JSONResponse(content=product.model_dump(), headers={"Cache-Control": "no-store"})
