from pydantic import BaseModel, Field

from schemas.catalog import ProductView
from schemas.orders import OrderResponse


class DashboardView(BaseModel):
    total_products: int = 0
    total_orders: int = 0
    total_customers: int = 0
    total_revenue: float = 0.0
    total_profit: float = 0.0
    pending_orders: int = 0
    processing_orders: int = 0
    shipped_orders: int = 0
    delivered_orders: int = 0
    recent_orders: list[OrderResponse] = Field(default_factory=list)
    low_stock_products: list[ProductView] = Field(default_factory=list)
