import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import get_db_session
from api.errors import error_response
from schemas.dashboard import DashboardView
from services import dashboard as dashboard_service
from services.errors import StoreError

router = APIRouter(prefix="/admin/dashboard", tags=["admin-dashboard"])

logger = logging.getLogger(__name__)


@router.get("", response_model=DashboardView)
def admin_dashboard(db: Session = Depends(get_db_session)):
    try:
        summary = dashboard_service.get_dashboard(db)
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error fetching dashboard data",
            fallback="Failed to fetch dashboard data",
        )

    logger.info(
        "Dashboard data fetched: %s products, %s orders, revenue %.2f",
        summary.total_products,
        summary.total_orders,
        summary.total_revenue,
    )
    return summary
