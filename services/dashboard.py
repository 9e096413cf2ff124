"""
Сводка для главной страницы админки: счётчики, выручка,
последние заказы и товары с малым остатком.
"""

from __future__ import annotations

from sqlalchemy import distinct, func, or_, select
from sqlalchemy.orm import Session, selectinload

from database import store_operation
from models import Order, Product
from schemas.dashboard import DashboardView
from schemas.orders import OrderResponse
from services.orders import STATUS_DELIVERED, STATUS_PENDING, STATUS_PROCESSING, STATUS_SHIPPED
from services.products import serialize_product

RECENT_ORDERS_LIMIT = 10
LOW_STOCK_LIMIT = 10
LOW_STOCK_THRESHOLD = 10
# Налог считается как 7.5% от прибыли
PROFIT_TAX_RATE = 0.075


def _count(session: Session, query) -> int:
    return int(session.execute(query).scalar_one() or 0)


def get_dashboard(session: Session) -> DashboardView:
    low_stock_query = (
        select(Product)
        .options(selectinload(Product.category), selectinload(Product.sub_category))
        .where(or_(Product.stock_count <= LOW_STOCK_THRESHOLD, Product.in_stock.is_(False)))
        .order_by(Product.stock_count, Product.name)
        .limit(LOW_STOCK_LIMIT)
    )
    recent_query = (
        select(Order).order_by(Order.created_at.desc(), Order.id).limit(RECENT_ORDERS_LIMIT)
    )

    with store_operation(session):
        revenue, tax = session.execute(
            select(
                func.coalesce(func.sum(Order.total), 0),
                func.coalesce(func.sum(Order.tax), 0),
            )
        ).one()
        status_query = select(Order.status, func.count(Order.id)).group_by(Order.status)
        by_status = dict(session.execute(status_query).all())

        return DashboardView(
            total_products=_count(session, select(func.count(Product.id))),
            total_orders=_count(session, select(func.count(Order.id))),
            # покупатель = уникальный customer_id в заказах
            total_customers=_count(session, select(func.count(distinct(Order.customer_id)))),
            total_revenue=float(revenue),
            total_profit=float(tax) / PROFIT_TAX_RATE,
            pending_orders=by_status.get(STATUS_PENDING, 0),
            processing_orders=by_status.get(STATUS_PROCESSING, 0),
            shipped_orders=by_status.get(STATUS_SHIPPED, 0),
            delivered_orders=by_status.get(STATUS_DELIVERED, 0),
            recent_orders=[
                OrderResponse.model_validate(order) for order in session.scalars(recent_query)
            ],
            low_stock_products=[
                serialize_product(product) for product in session.scalars(low_stock_query)
            ],
        )
