"""Заказы в админке: просмотр и смена статуса."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import get_db_session
from api.errors import error_response
from schemas.orders import OrderDetailResponse, OrderResponse, OrderStatusPayload
from services import orders as orders_service
from services.errors import StoreError

router = APIRouter(prefix="/admin/orders", tags=["admin-orders"])

logger = logging.getLogger(__name__)


@router.get("", response_model=list[OrderResponse])
def admin_list_orders(
    status: str | None = None,
    limit: int = 100,
    db: Session = Depends(get_db_session),
):
    try:
        return orders_service.list_orders(db, status=status, limit=max(1, min(limit, 500)))
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error fetching orders",
            fallback="Failed to fetch orders",
        )


@router.get("/{order_id}", response_model=OrderDetailResponse)
def admin_get_order(order_id: str, db: Session = Depends(get_db_session)):
    try:
        return orders_service.get_order(db, order_id)
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error fetching order",
            fallback="Failed to fetch order",
            not_found="Order not found",
        )


@router.patch("/{order_id}", response_model=OrderResponse)
def admin_update_order_status(
    order_id: str,
    payload: OrderStatusPayload,
    db: Session = Depends(get_db_session),
):
    try:
        return orders_service.update_order_status(db, order_id, payload.status)
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error updating order",
            fallback="Failed to update order",
            not_found="Order not found",
            invalid="Invalid order status",
        )
