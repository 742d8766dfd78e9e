# app/routers/admin/orders.py

import logging
from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.dependencies import get_current_admin, get_db, require_admin_or_above
from app.models.user import User
from app.schemas.admin import (
    AdminOrder, OrderApprove, OrderRefund, OrderReject, OrderStatisticsOverview,
    OrderStatusUpdate, PaginatedAdminOrders,
)
from app.schemas.order import Platform, Service
from app.services import activity as activity_service
from app.services import admin_orders as admin_order_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=PaginatedAdminOrders)
def get_orders_list(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    status_filter: str | None = Query(None, alias="status"),
    user_id: str | None = Query(None),
    platform: Platform | None = Query(None),
    service: Service | None = Query(None),
    date_from: datetime | None = Query(None),
    date_to: datetime | None = Query(None),
    search: str | None = Query(None, description="Поиск по ID заказа или ссылке"),
    sort_by: Literal["created_at", "amount", "quantity", "status"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    db: Session = Depends(get_db),
):
    """
    [АДМИН] Возвращает пагинированный список всех заказов с фильтрами.
    """
    filters = {
        "status": status_filter,
        "user_id": user_id,
        "platform": platform,
        "service": service,
        "date_from": date_from,
        "date_to": date_to,
        "search": search,
    }
    active_filters = {k: v for k, v in filters.items() if v is not None}
    return admin_order_service.get_paginated_orders(db, page, size, sort_by, sort_order, **active_filters)


@router.get("/pending-approval", response_model=PaginatedAdminOrders)
def get_pending_orders(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """[АДМИН] Очередь заказов, ожидающих решения. Старые первыми."""
    return admin_order_service.get_paginated_orders(db, page, size, "created_at", "asc", status="pending")


@router.get("/statistics/overview", response_model=OrderStatisticsOverview)
async def get_orders_statistics(db: Session = Depends(get_db)):
    """[АДМИН] Сводка по заказам: статусы, выручка, платформы и услуги."""
    return await admin_order_service.get_statistics_overview(db)


@router.get("/{order_id}", response_model=AdminOrder)
def get_order_details(order_id: str, db: Session = Depends(get_db)):
    """[АДМИН] Детальная информация о заказе."""
    return admin_order_service.get_order_details(db, order_id)


@router.put("/{order_id}/approve", response_model=AdminOrder)
async def approve_order(
    order_id: str,
    data: OrderApprove,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """[АДМИН] Берет ожидающий заказ в работу."""
    order = await admin_order_service.approve_order(db, order_id, admin, data.admin_notes)
    activity_service.log_admin_action(db, request, admin, "order", "approve", order_id)
    return order


@router.put("/{order_id}/reject", response_model=AdminOrder)
async def reject_order(
    order_id: str,
    data: OrderReject,
    request: Request,
    admin: User = Depends(require_admin_or_above),
    db: Session = Depends(get_db),
):
    """[АДМИН] Отклоняет ожидающий заказ с полным возвратом средств."""
    order = await admin_order_service.reject_order(db, order_id, admin, data.reason, data.admin_notes)
    activity_service.log_admin_action(db, request, admin, "order", "reject", order_id, {"reason": data.reason})
    return order


@router.put("/{order_id}/refund", response_model=AdminOrder)
async def refund_order(
    order_id: str,
    data: OrderRefund,
    request: Request,
    admin: User = Depends(require_admin_or_above),
    db: Session = Depends(get_db),
):
    """[АДМИН] Возврат средств по заказу в работе или завершенному."""
    order = await admin_order_service.refund_order(db, order_id, admin, data.reason, data.admin_notes)
    activity_service.log_admin_action(db, request, admin, "order", "refund", order_id, {"reason": data.reason})
    return order


@router.put("/{order_id}/status", response_model=AdminOrder)
async def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    request: Request,
    admin: User = Depends(require_admin_or_above),
    db: Session = Depends(get_db),
):
    """
    [АДМИН] Ручная смена статуса заказа.
    Недопустимые переходы (например, из завершенного обратно в работу) вернут 400.
    """
    order = await admin_order_service.update_order_status(db, order_id, data.status, admin, data.admin_notes)
    activity_service.log_admin_action(db, request, admin, "order", "update_status", order_id,
                                      {"status": data.status})
    return order
