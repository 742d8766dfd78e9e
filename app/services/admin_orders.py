# app/services/admin_orders.py

import logging
import math
from datetime import timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from app.core import constants as c
from app.core.exceptions import ApiError
from app.core.lifecycle import ensure_transition
from app.core.redis import redis_client
from app.crud import order as crud_order
from app.crud import task as crud_task
from app.crud import transaction as crud_transaction
from app.crud import user as crud_user
from app.models.order import Order
from app.models.user import User
from app.schemas.admin import AdminOrder, OrderStatisticsOverview, PaginatedAdminOrders
from app.services.admin import ORDER_STATS_CACHE_KEY, invalidate_admin_caches
from app.services.notification_api import notify
from app.utils.dates import utcnow
from app.utils.money import to_money

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 300
ORDER_CLOSED_REASON = "The order was closed before this submission was reviewed"


def _to_admin_order(order: Order) -> AdminOrder:
    item = AdminOrder.model_validate(order)
    if order.user is not None:
        item.user_email = order.user.email
        item.username = order.user.username
    return item


def get_paginated_orders(db: Session, page: int, size: int, sort_by: str = "created_at",
                         sort_order: str = "desc", **filters) -> PaginatedAdminOrders:
    """
    Собирает пагинированный список всех заказов для админки.
    """
    skip = (page - 1) * size
    orders = crud_order.get_orders(db, skip=skip, limit=size, sort_by=sort_by, sort_order=sort_order, **filters)
    total_items = crud_order.count_orders(db, **filters)
    total_pages = math.ceil(total_items / size) if total_items > 0 else 1
    return PaginatedAdminOrders(
        total_items=total_items, total_pages=total_pages, current_page=page, size=size,
        items=[_to_admin_order(o) for o in orders],
    )


def get_order_details(db: Session, order_id: str) -> AdminOrder:
    return _to_admin_order(get_order_or_404(db, order_id))


def get_order_or_404(db: Session, order_id: str) -> Order:
    order = crud_order.get_order(db, order_id)
    if order is None:
        raise ApiError.not_found("Order not found")
    return order


async def get_statistics_overview(db: Session) -> OrderStatisticsOverview:
    cached_data = await redis_client.get(ORDER_STATS_CACHE_KEY)
    if cached_data:
        logger.info("Serving order statistics overview from cache.")
        return OrderStatisticsOverview.model_validate_json(cached_data)

    since = utcnow() - timedelta(days=30)
    by_status = crud_order.count_orders_by_status(db)
    paid_statuses = (c.ORDER_PENDING, c.ORDER_PROCESSING, c.ORDER_COMPLETED)
    overview = OrderStatisticsOverview(
        total_orders=sum(by_status.values()),
        pending_orders=by_status.get(c.ORDER_PENDING, 0),
        processing_orders=by_status.get(c.ORDER_PROCESSING, 0),
        completed_orders=by_status.get(c.ORDER_COMPLETED, 0),
        failed_orders=by_status.get(c.ORDER_FAILED, 0),
        cancelled_orders=by_status.get(c.ORDER_CANCELLED, 0),
        refunded_orders=by_status.get(c.ORDER_REFUNDED, 0),
        total_revenue=to_money(crud_order.sum_order_amounts(db, statuses=paid_statuses)),
        revenue_last_30_days=to_money(crud_order.sum_order_amounts(db, statuses=paid_statuses, since=since)),
        orders_last_30_days=crud_order.count_orders(db, date_from=since),
        by_platform=crud_order.count_by_column(db, Order.platform),
        by_service=crud_order.count_by_column(db, Order.service),
    )
    await redis_client.set(ORDER_STATS_CACHE_KEY, overview.model_dump_json(), ex=CACHE_TTL_SECONDS)
    return overview


def _mark_reviewed(order: Order, admin: User, admin_notes: str | None) -> None:
    order.reviewed_by = admin.id
    order.reviewed_at = utcnow()
    if admin_notes:
        order.admin_notes = admin_notes


def _close_order_tasks(db: Session, order: Order) -> None:
    """
    Незавершенные задания заказа больше нельзя брать в работу,
    а выполнения без решения по ним отклоняются без оплаты.
    """
    for task in crud_task.get_tasks_by_order(db, order.id):
        if task.status in (c.TASK_AVAILABLE, c.TASK_IN_PROGRESS):
            ensure_transition("task", task.status, c.TASK_REJECTED)
            task.status = c.TASK_REJECTED
        for execution in crud_task.get_open_executions_for_task(db, task.id):
            ensure_transition("execution", execution.status, c.EXECUTION_REJECTED)
            execution.status = c.EXECUTION_REJECTED
            execution.rejection_reason = ORDER_CLOSED_REASON
            execution.cooldown_ends_at = None
            notify(db, execution.user_id, "task_rejected", "Task rejected", ORDER_CLOSED_REASON, execution.id)


def _refund(db: Session, order: Order, amount: Decimal, reason: str) -> None:
    if amount <= 0:
        return
    owner = crud_user.get_user_for_update(db, order.user_id)
    crud_transaction.add_transaction(
        db, user_id=owner.id, type=c.TX_REFUND, amount=amount, status=c.TX_COMPLETED,
        method=c.METHOD_BALANCE, order_id=order.id, details={"reason": reason},
    )
    owner.balance = to_money(owner.balance) + amount


async def approve_order(db: Session, order_id: str, admin: User, admin_notes: str | None = None) -> AdminOrder:
    order = get_order_or_404(db, order_id)
    ensure_transition("order", order.status, c.ORDER_PROCESSING)
    order.status = c.ORDER_PROCESSING
    _mark_reviewed(order, admin, admin_notes)
    notify(db, order.user_id, "order_status_update", "Order approved",
           f"Your {order.platform} {order.service} order is now processing.", order.id)
    db.commit()
    await invalidate_admin_caches()
    logger.info(f"Admin {admin.id} approved order {order.id}")
    return _to_admin_order(order)


async def reject_order(db: Session, order_id: str, admin: User, reason: str,
                       admin_notes: str | None = None) -> AdminOrder:
    """Отклонение ожидающего заказа: полный возврат средств и закрытие заданий."""
    try:
        order = crud_order.get_order_for_update(db, order_id)
        if order is None:
            raise ApiError.not_found("Order not found")
        ensure_transition("order", order.status, c.ORDER_CANCELLED)
        order.status = c.ORDER_CANCELLED
        order.rejection_reason = reason
        _mark_reviewed(order, admin, admin_notes)
        _close_order_tasks(db, order)
        _refund(db, order, to_money(order.amount), reason)
        notify(db, order.user_id, "order_status_update", "Order rejected",
               f"Your order was rejected and {to_money(order.amount)} was refunded. Reason: {reason}", order.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    await invalidate_admin_caches()
    logger.info(f"Admin {admin.id} rejected order {order.id}: {reason}")
    return _to_admin_order(order)


def refund_amount_for(order: Order) -> Decimal:
    """
    Сумма возврата: для заказа в работе - доля невыполненного объема,
    для завершенного - полная стоимость.
    """
    amount = to_money(order.amount)
    if order.status == c.ORDER_COMPLETED or order.quantity <= 0:
        return amount
    return to_money(amount * Decimal(order.remaining_count) / Decimal(order.quantity))


async def refund_order(db: Session, order_id: str, admin: User, reason: str,
                       admin_notes: str | None = None) -> AdminOrder:
    try:
        order = crud_order.get_order_for_update(db, order_id)
        if order is None:
            raise ApiError.not_found("Order not found")
        ensure_transition("order", order.status, c.ORDER_REFUNDED)
        amount = refund_amount_for(order)
        order.status = c.ORDER_REFUNDED
        order.refund_reason = reason
        _mark_reviewed(order, admin, admin_notes)
        _close_order_tasks(db, order)
        _refund(db, order, amount, reason)
        notify(db, order.user_id, "order_status_update", "Order refunded",
               f"{amount} was refunded to your balance. Reason: {reason}", order.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    await invalidate_admin_caches()
    logger.info(f"Admin {admin.id} refunded order {order.id} ({amount}): {reason}")
    return _to_admin_order(order)


async def update_order_status(db: Session, order_id: str, new_status: str, admin: User,
                              admin_notes: str | None = None) -> AdminOrder:
    """
    Ручная смена статуса. Переходы с деньгами (отмена, возврат) идут
    через reject/refund, чтобы не потерять возврат средств.
    """
    if new_status == c.ORDER_CANCELLED:
        return await reject_order(db, order_id, admin, admin_notes or "Cancelled by administrator", admin_notes)
    if new_status == c.ORDER_REFUNDED:
        return await refund_order(db, order_id, admin, admin_notes or "Refunded by administrator", admin_notes)

    order = get_order_or_404(db, order_id)
    ensure_transition("order", order.status, new_status)
    if new_status == c.ORDER_FAILED:
        # Невыполненная часть проваленного заказа возвращается заказчику
        _refund(db, order, refund_amount_for(order), admin_notes or "Order failed")
    order.status = new_status
    if new_status == c.ORDER_COMPLETED:
        order.remaining_count = 0
    if new_status in (c.ORDER_COMPLETED, c.ORDER_FAILED):
        _close_order_tasks(db, order)
    _mark_reviewed(order, admin, admin_notes)
    notify(db, order.user_id, "order_status_update", "Order status updated",
           f"Your order status changed to {new_status}.", order.id)
    db.commit()
    await invalidate_admin_caches()
    logger.info(f"Admin {admin.id} set order {order.id} status to {new_status}")
    return _to_admin_order(order)
