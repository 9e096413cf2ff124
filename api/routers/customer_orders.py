import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.dependencies import get_db_session
from api.errors import error_response
from schemas.orders import OrderDetailResponse, ShippingAddressPayload
from services import orders as orders_service
from services.errors import StoreError

router = APIRouter(prefix="/customers/orders", tags=["customer-orders"])

logger = logging.getLogger(__name__)


@router.put("/{order_id}/shipping")
def customer_update_shipping(
    order_id: str,
    payload: ShippingAddressPayload,
    db: Session = Depends(get_db_session),
):
    try:
        order = orders_service.update_shipping_address(
            db,
            order_id,
            customer_id=payload.customer_id,
            shipping_address=payload.shipping_address,
        )
    except StoreError as exc:
        return error_response(
            exc,
            logger=logger,
            log_message="Error updating order shipping address",
            fallback="Failed to update shipping address",
            not_found="Order not found or access denied",
            invalid="Invalid shipping address",
        )

    return {
        "order": OrderDetailResponse.model_validate(order).model_dump(mode="json"),
        "message": "Shipping address updated successfully",
    }
