from datetime import datetime

from pydantic import BaseModel, ConfigDict


class OrderStatusPayload(BaseModel):
    status: str


class ShippingAddressPayload(BaseModel):
    shipping_address: str | None = None
    customer_id: str | None = None


class OrderItemResponse(BaseModel):
    id: int
    product_id: str | None
    quantity: int
    price: float

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    id: str
    customer_id: str | None
    customer_name: str | None
    email: str | None
    status: str
    subtotal: float
    tax: float
    shipping: float
    total: float
    shipping_address: str | None
    contact_number: str | None
    payment_reference: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderDetailResponse(OrderResponse):
    items: list[OrderItemResponse] = []
