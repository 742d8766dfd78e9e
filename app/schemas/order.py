# app/schemas/order.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, HttpUrl

from app.schemas.common import PaginatedResponse

Platform = Literal["instagram", "youtube"]
Service = Literal["likes", "followers", "views", "comments", "subscribers"]
Speed = Literal["normal", "fast", "express"]
Timeframe = Literal["7d", "30d", "90d", "1y"]


class OrderCreate(BaseModel):
    platform: Platform
    service: Service
    target_url: HttpUrl
    quantity: int = Field(..., ge=1, le=1_000_000)
    speed: Speed = "normal"
    start_count: int = Field(0, ge=0)


class BulkOrderCreate(BaseModel):
    orders: List[OrderCreate] = Field(..., min_length=1, max_length=50)


class Order(BaseModel):
    id: str
    user_id: str
    platform: str
    service: str
    target_url: str
    quantity: int
    start_count: int
    remaining_count: int
    status: str
    speed: str
    amount: float
    admin_notes: str | None = None
    rejection_reason: str | None = None
    refund_reason: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PaginatedOrders(PaginatedResponse[Order]):
    pass


class BulkOrderResult(BaseModel):
    orders: List[Order]
    total_amount: float
    balance: float


class OrderPriceQuote(BaseModel):
    platform: str
    service: str
    quantity: int
    speed: str
    amount: float


class OrderStats(BaseModel):
    platform: str
    timeframe: str
    active_orders: int
    completed_orders: int
    total_orders: int
    total_spent: float
    active_orders_growth: float
    completed_orders_growth: float
    total_orders_growth: float
    total_spent_growth: float
    last_calculated_at: datetime

    class Config:
        from_attributes = True


class OrderReport(BaseModel):
    type: Literal["order_issue", "payment_issue", "technical_issue", "other"] = "order_issue"
    subject: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)

