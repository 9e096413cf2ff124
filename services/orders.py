from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from database import store_operation
from models import Order
from services.errors import ErrorCodes, NotFound, ValidationFailed

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_PROCESSING = "processing"
STATUS_SHIPPED = "shipped"
STATUS_DELIVERED = "delivered"
STATUS_CANCELLED = "cancelled"

# Адрес доставки можно менять, пока заказ не отправлен
SHIPPING_EDITABLE_STATUSES = {STATUS_PENDING, STATUS_PROCESSING}


def _order_not_found(order_id: str) -> NotFound:
    return NotFound(ErrorCodes.ORDER_NOT_FOUND, "Order not found", order_id=order_id)


def get_order(session: Session, order_id: str) -> Order:
    query = select(Order).options(selectinload(Order.items)).where(Order.id == order_id)
    with store_operation(session):
        order = session.scalars(query).first()
    if not order:
        raise _order_not_found(order_id)
    return order


def list_orders(session: Session, status: str | None = None, limit: int = 100) -> list[Order]:
    query = select(Order).order_by(Order.created_at.desc(), Order.id).limit(limit)
    if status and status != "all":
        query = query.where(Order.status == status)
    with store_operation(session):
        return list(session.scalars(query).all())


def update_order_status(session: Session, order_id: str, status: str) -> Order:
    """
    Перезаписывает статус заказа и возвращает обновлённую запись.
    Значение статуса не проверяется: его принимает или отклоняет схема БД.
    """
    with store_operation(session):
        order = session.get(Order, order_id)
        if not order:
            raise _order_not_found(order_id)

        order.status = status
        session.commit()
        session.refresh(order)

    logger.info("Order %s status set to %r", order_id, status)
    return order


def update_shipping_address(
    session: Session,
    order_id: str,
    *,
    customer_id: str | None,
    shipping_address: str | None,
) -> Order:
    address = (shipping_address or "").strip()
    if not address:
        raise ValidationFailed(
            ErrorCodes.MISSING_FIELD, "Shipping address is required", field="shipping_address"
        )
    if not customer_id:
        raise ValidationFailed(
            ErrorCodes.MISSING_FIELD, "Customer ID is required", field="customer_id"
        )

    query = (
        select(Order)
        .options(selectinload(Order.items))
        .where(Order.id == order_id, Order.customer_id == customer_id)
    )
    with store_operation(session):
        order = session.scalars(query).first()
        if not order:
            raise NotFound(
                ErrorCodes.ORDER_NOT_FOUND,
                "Order not found or access denied",
                order_id=order_id,
                customer_id=customer_id,
            )

        if order.status not in SHIPPING_EDITABLE_STATUSES:
            raise ValidationFailed(
                ErrorCodes.STATUS_LOCKED,
                "Cannot update shipping address for orders that are already shipped or delivered",
                order_id=order_id,
                status=order.status,
            )

        order.shipping_address = address
        session.commit()
        session.refresh(order)

    return order
