# app/routers/order.py

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.dependencies import get_current_user, get_db
from app.models.user import User
from app.schemas.dispute import Dispute
from app.schemas.order import (
    BulkOrderCreate, BulkOrderResult, Order, OrderCreate, OrderPriceQuote, OrderReport, OrderStats,
    PaginatedOrders, Platform, Service, Timeframe,
)
from app.services import activity as activity_service
from app.services import order as order_service

router = APIRouter(prefix="/orders")


@router.post("", response_model=Order, status_code=status.HTTP_201_CREATED)
def create_order(
    data: OrderCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Создает заказ и списывает его стоимость с баланса."""
    order = order_service.create_order(db, current_user, data)
    activity_service.log_action(db, request, current_user, "orders", "create", order.id,
                                {"amount": str(order.amount), "service": order.service})
    return order


@router.post("/bulk", response_model=BulkOrderResult, status_code=status.HTTP_201_CREATED)
def create_bulk_orders(
    data: BulkOrderCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return order_service.create_bulk_orders(db, current_user, data.orders)


@router.post("/calculate-price", response_model=OrderPriceQuote)
def calculate_price(data: OrderCreate, current_user: User = Depends(get_current_user)):
    """Расчет стоимости без создания заказа."""
    return order_service.quote(data)


@router.get("", response_model=PaginatedOrders)
def list_orders(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    status_filter: str | None = Query(None, alias="status"),
    platform: Platform | None = Query(None),
    service: Service | None = Query(None),
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
    sort_by: Literal["created_at", "amount", "quantity", "status"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Пагинированный список заказов текущего пользователя."""
    filters = {
        "status": status_filter,
        "platform": platform,
        "service": service,
        "date_from": date_from,
        "date_to": date_to,
    }
    active_filters = {k: v for k, v in filters.items() if v is not None}
    return order_service.get_paginated_orders(db, current_user, page, size, sort_by, sort_order, **active_filters)


@router.get("/stats", response_model=OrderStats)
def get_order_stats(
    platform: Platform = Query(...),
    timeframe: Timeframe = Query("30d"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Сводка по заказам за период с ростом относительно предыдущего периода."""
    return order_service.get_order_stats(db, current_user, platform, timeframe)


@router.get("/{order_id}", response_model=Order)
def get_order(order_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return order_service.get_user_order(db, current_user, order_id)


@router.post("/{order_id}/repeat", response_model=Order, status_code=status.HTTP_201_CREATED)
def repeat_order(order_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Повторяет ранее созданный заказ с теми же параметрами."""
    return order_service.repeat_order(db, current_user, order_id)


@router.post("/{order_id}/report", response_model=Dispute, status_code=status.HTTP_201_CREATED)
def report_order(
    order_id: str,
    data: OrderReport,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Жалоба на заказ (открывает спор)."""
    return order_service.report_order(db, current_user, order_id, data)
