# app/crud/order.py
from datetime import datetime
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.order import Order


def get_order(db: Session, order_id: str) -> Order | None:
    return db.query(Order).filter(Order.id == order_id).first()

def get_user_order(db: Session, user_id: str, order_id: str) -> Order | None:
    """Заказ, только если он принадлежит пользователю."""
    return db.query(Order).filter(Order.id == order_id, Order.user_id == user_id).first()

def get_order_for_update(db: Session, order_id: str) -> Order | None:
    return db.query(Order).filter(Order.id == order_id).with_for_update().populate_existing().first()


SORTABLE_ORDER_FIELDS = {
    "created_at": Order.created_at,
    "amount": Order.amount,
    "quantity": Order.quantity,
    "status": Order.status,
}

def _apply_filters(
    query,
    user_id: str | None = None,
    status: str | None = None,
    platform: str | None = None,
    service: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    search: str | None = None,
):
    if user_id:
        query = query.filter(Order.user_id == user_id)
    if status:
        query = query.filter(Order.status == status)
    if platform:
        query = query.filter(Order.platform == platform)
    if service:
        query = query.filter(Order.service == service)
    if date_from:
        query = query.filter(Order.created_at >= date_from)
    if date_to:
        query = query.filter(Order.created_at <= date_to)
    if search:
        query = query.filter(Order.target_url.ilike(f"%{search}%"))
    return query

def get_orders(
    db: Session,
    skip: int = 0,
    limit: int = 20,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    **filters,
) -> list[Order]:
    query = _apply_filters(db.query(Order), **filters)
    column = SORTABLE_ORDER_FIELDS.get(sort_by, Order.created_at)
    query = query.order_by(column.asc() if sort_order == "asc" else column.desc())
    return query.offset(skip).limit(limit).all()

def count_orders(db: Session, **filters) -> int:
    return _apply_filters(db.query(func.count(Order.id)), **filters).scalar()

def count_orders_by_status(db: Session, since: datetime | None = None) -> dict:
    query = db.query(Order.status, func.count(Order.id))
    if since:
        query = query.filter(Order.created_at >= since)
    return {status: count for status, count in query.group_by(Order.status).all()}

def sum_order_amounts(db: Session, statuses: tuple | None = None, since: datetime | None = None):
    query = db.query(func.coalesce(func.sum(Order.amount), 0))
    if statuses:
        query = query.filter(Order.status.in_(statuses))
    if since:
        query = query.filter(Order.created_at >= since)
    return query.scalar()

def count_by_column(db: Session, column, since: datetime | None = None) -> dict:
    query = db.query(column, func.count(Order.id))
    if since:
        query = query.filter(Order.created_at >= since)
    return {value: count for value, count in query.group_by(column).all()}
