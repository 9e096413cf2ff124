import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from api.dependencies import get_db_session
from api.errors import error_response
from schemas.catalog import ProductPayload, ProductView
from services import products as products_service
from services.errors import StoreError

router = APIRouter(prefix="/admin/products", tags=["admin-products"])

logger = logging.getLogger(__name__)


@router.get("", response_model=list[ProductView])
def admin_list_products(db: Session = Depends(get_db_session)):
    try:
        return products_service.list_admin_products(db)
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error fetching products",
            fallback="Failed to fetch products",
        )


@router.post("", response_model=ProductView, status_code=201)
def admin_create_product(payload: ProductPayload, db: Session = Depends(get_db_session)):
    try:
        return products_service.create_product(db, payload)
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error creating product",
            fallback="Failed to create product",
            invalid="Product with this name already exists",
        )


@router.put("/{product_id}", response_model=ProductView)
def admin_update_product(
    product_id: str,
    payload: ProductPayload,
    db: Session = Depends(get_db_session),
):
    try:
        return products_service.update_product(db, product_id, payload)
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error updating product",
            fallback="Failed to update product",
            not_found="Product not found",
            invalid="Product with this name already exists",
        )


@router.delete("/{product_id}")
def admin_delete_product(product_id: str, db: Session = Depends(get_db_session)):
    try:
        products_service.delete_product(db, product_id)
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error deleting product",
            fallback="Failed to delete product",
            not_found="Product not found",
        )
    return JSONResponse(content={"success": True})
