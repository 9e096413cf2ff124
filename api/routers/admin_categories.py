import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from api.dependencies import get_db_session
from api.errors import error_response
from schemas.catalog import AdminCategoryView, CategoryCreatePayload, CategoryUpdatePayload
from services import categories as categories_service
from services.errors import StoreError

router = APIRouter(prefix="/admin/categories", tags=["admin-categories"])

logger = logging.getLogger(__name__)


@router.get("", response_model=list[AdminCategoryView])
def admin_list_categories(db: Session = Depends(get_db_session)):
    try:
        categories = categories_service.list_admin_categories(db)
        return [AdminCategoryView.from_category(category) for category in categories]
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error fetching categories",
            fallback="Failed to fetch categories",
        )


@router.post("", response_model=AdminCategoryView, status_code=201)
def admin_create_category(
    payload: CategoryCreatePayload,
    db: Session = Depends(get_db_session),
):
    try:
        category = categories_service.create_category(db, payload)
        return AdminCategoryView.from_category(category)
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error creating category",
            fallback="Failed to create category",
            invalid="A category with this name or slug already exists",
        )


@router.put("/{category_id}", response_model=AdminCategoryView)
def admin_update_category(
    category_id: str,
    payload: CategoryUpdatePayload,
    db: Session = Depends(get_db_session),
):
    try:
        category = categories_service.update_category(db, category_id, payload)
        return AdminCategoryView.from_category(category)
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error updating category",
            fallback="Failed to update category",
            not_found="Category not found",
            invalid="A category with this name or slug already exists",
        )


@router.delete("/{category_id}")
def admin_delete_category(category_id: str, db: Session = Depends(get_db_session)):
    try:
        categories_service.delete_category(db, category_id)
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error deleting category",
            fallback="Failed to delete category",
            not_found="Category not found",
            invalid="Cannot delete category",
        )
    return JSONResponse(content={"success": True})
