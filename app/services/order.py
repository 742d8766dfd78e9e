# app/services/order.py

import logging
import math
from decimal import Decimal

from sqlalchemy.orm import Session

from app.core import constants as c
from app.core.exceptions import ApiError
from app.crud import order as crud_order
from app.crud import transaction as crud_transaction
from app.crud import user as crud_user
from app.models.order import Order
from app.models.task import Task
from app.models.user import User
from app.schemas.dispute import DisputeCreate
from app.schemas.order import (
    BulkOrderResult, OrderCreate, OrderPriceQuote, OrderReport, PaginatedOrders,
)
from app.services import dispute as dispute_service
from app.services import statistics as statistics_service
from app.services.notification_api import notify
from app.utils.money import to_money

logger = logging.getLogger(__name__)


# --- Ценообразование ---

def calculate_order_amount(service: str, quantity: int, speed: str = "normal") -> Decimal:
    """
    Цена заказа: базовая цена * количество, скидка за объем, надбавка за скорость.
    """
    amount = c.BASE_PRICES[service] * quantity
    for threshold, multiplier in c.BULK_DISCOUNTS:
        if quantity >= threshold:
            amount *= multiplier
            break
    amount += c.SPEED_PREMIUMS.get(speed, Decimal("0"))
    return to_money(amount)


def calculate_task_rate(service: str, quantity: int) -> Decimal:
    """Вознаграждение исполнителю за одно выполнение с бонусом за крупный заказ."""
    rate = c.TASK_RATES.get(service, c.DEFAULT_TASK_RATE)
    for threshold, multiplier in c.TASK_RATE_BONUSES:
        if quantity >= threshold:
            rate *= multiplier
            break
    return to_money(rate)


def quote(data: OrderCreate) -> OrderPriceQuote:
    return OrderPriceQuote(
        platform=data.platform, service=data.service, quantity=data.quantity,
        speed=data.speed, amount=calculate_order_amount(data.service, data.quantity, data.speed),
    )


# --- Создание заказов ---

def _place_order(db: Session, user_id: str, data: OrderCreate, amount: Decimal) -> Order:
    """Создает заказ и связанное задание для исполнителей. Без коммита."""
    order = Order(
        user_id=user_id,
        platform=data.platform,
        service=data.service,
        target_url=str(data.target_url),
        quantity=data.quantity,
        start_count=data.start_count,
        remaining_count=data.quantity,
        status=c.ORDER_PENDING,
        speed=data.speed,
        amount=amount,
    )
    db.add(order)
    db.flush()

    task = Task(
        user_id=user_id,
        order_id=order.id,
        type=c.SERVICE_TO_TASK_TYPE[data.service],
        platform=data.platform,
        target_url=order.target_url,
        quantity=data.quantity,
        remaining_quantity=data.quantity,
        completed_count=0,
        rate=calculate_task_rate(data.service, data.quantity),
        status=c.TASK_AVAILABLE,
    )
    db.add(task)
    return order


def _charge(db: Session, user_id: str, total: Decimal) -> User:
    """Блокирует строку пользователя и проверяет, что денег хватает."""
    locked_user = crud_user.get_user_for_update(db, user_id)
    if locked_user is None:
        raise ApiError.not_found("User not found")
    if to_money(locked_user.balance) < total:
        logger.info(f"User {user_id} has insufficient balance for {total}.")
        raise ApiError.bad_request("Insufficient balance")
    return locked_user


def create_order(db: Session, user: User, data: OrderCreate) -> Order:
    """
    Покупка услуги. Заказ, задание, запись в журнале и списание с баланса
    фиксируются одной транзакцией БД.
    """
    amount = calculate_order_amount(data.service, data.quantity, data.speed)
    try:
        locked_user = _charge(db, user.id, amount)
        order = _place_order(db, user.id, data, amount)
        crud_transaction.add_transaction(
            db, user_id=user.id, type=c.TX_ORDER_PAYMENT, amount=-amount,
            status=c.TX_COMPLETED, method=c.METHOD_BALANCE, order_id=order.id,
        )
        locked_user.balance = to_money(locked_user.balance) - amount
        notify(db, user.id, "order_created", "Order placed",
               f"Your {data.platform} {data.service} order for {data.quantity} was created.", order.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(order)
    logger.info(f"Order {order.id} created by user {user.id}: {data.platform}/{data.service} x{data.quantity} = {amount}")
    statistics_service.refresh_user_platform_stats(db, user.id, data.platform)
    return order


def create_bulk_orders(db: Session, user: User, items: list[OrderCreate]) -> BulkOrderResult:
    """Несколько заказов за одно списание."""
    amounts = [calculate_order_amount(item.service, item.quantity, item.speed) for item in items]
    total = to_money(sum(amounts, Decimal("0")))
    try:
        locked_user = _charge(db, user.id, total)
        orders = [_place_order(db, user.id, item, amount) for item, amount in zip(items, amounts)]
        db.flush()
        crud_transaction.add_transaction(
            db, user_id=user.id, type=c.TX_ORDER_PAYMENT, amount=-total,
            status=c.TX_COMPLETED, method=c.METHOD_BALANCE,
            details={"bulk": True, "order_ids": [o.id for o in orders]},
        )
        locked_user.balance = to_money(locked_user.balance) - total
        db.commit()
    except Exception:
        db.rollback()
        raise

    for platform in {item.platform for item in items}:
        statistics_service.refresh_user_platform_stats(db, user.id, platform)
    logger.info(f"User {user.id} placed {len(orders)} bulk orders for {total}.")
    db.refresh(locked_user)
    return BulkOrderResult(orders=orders, total_amount=total, balance=locked_user.balance)


def repeat_order(db: Session, user: User, order_id: str) -> Order:
    original = get_user_order(db, user, order_id)
    data = OrderCreate(
        platform=original.platform,
        service=original.service,
        target_url=original.target_url,
        quantity=original.quantity,
        speed=original.speed,
    )
    return create_order(db, user, data)


# --- Чтение ---

def get_user_order(db: Session, user: User, order_id: str) -> Order:
    order = crud_order.get_user_order(db, user.id, order_id)
    if order is None:
        raise ApiError.not_found("Order not found")
    return order


def get_paginated_orders(db: Session, user: User, page: int, size: int,
                         sort_by: str = "created_at", sort_order: str = "desc", **filters) -> PaginatedOrders:
    skip = (page - 1) * size
    orders = crud_order.get_orders(db, skip=skip, limit=size, sort_by=sort_by, sort_order=sort_order,
                                   user_id=user.id, **filters)
    total_items = crud_order.count_orders(db, user_id=user.id, **filters)
    total_pages = math.ceil(total_items / size) if total_items > 0 else 1
    return PaginatedOrders(
        total_items=total_items, total_pages=total_pages,
        current_page=page, size=size, items=orders,
    )


def get_order_stats(db: Session, user: User, platform: str, timeframe: str):
    return statistics_service.get_stats(db, user.id, platform, timeframe)


def report_order(db: Session, user: User, order_id: str, data: OrderReport):
    """Жалоба на заказ оформляется как спор."""
    order = get_user_order(db, user, order_id)
    return dispute_service.create_dispute(
        db, user,
        DisputeCreate(order_id=order.id, type=data.type, subject=data.subject, description=data.description),
    )
