# app/crud/transaction.py
from datetime import datetime
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.transaction import Transaction


def add_transaction(
    db: Session,
    user_id: str,
    type: str,
    amount,
    status: str,
    method: str | None = None,
    order_id: str | None = None,
    details: dict | None = None,
    reference: str | None = None,
    admin_notes: str | None = None,
) -> Transaction:
    """
    Добавляет запись в журнал БЕЗ коммита.
    Коммит делает сервис вместе с изменением баланса, одной транзакцией БД.
    """
    db_tx = Transaction(
        user_id=user_id,
        type=type,
        amount=amount,
        status=status,
        method=method,
        order_id=order_id,
        details=details,
        reference=reference,
        admin_notes=admin_notes,
    )
    db.add(db_tx)
    db.flush()
    return db_tx

def get_transaction(db: Session, transaction_id: str) -> Transaction | None:
    return db.query(Transaction).filter(Transaction.id == transaction_id).first()

def get_transaction_for_update(db: Session, transaction_id: str) -> Transaction | None:
    return db.query(Transaction).filter(Transaction.id == transaction_id).with_for_update().first()


def _apply_filters(query, user_id: str | None = None, type: str | None = None,
                   types: tuple | None = None, status: str | None = None,
                   since: datetime | None = None, until: datetime | None = None):
    if user_id:
        query = query.filter(Transaction.user_id == user_id)
    if type:
        query = query.filter(Transaction.type == type)
    if types:
        query = query.filter(Transaction.type.in_(types))
    if status:
        query = query.filter(Transaction.status == status)
    if since:
        query = query.filter(Transaction.created_at >= since)
    if until:
        query = query.filter(Transaction.created_at < until)
    return query

def get_transactions(db: Session, skip: int = 0, limit: int = 20, **filters) -> list[Transaction]:
    query = _apply_filters(db.query(Transaction), **filters)
    return query.order_by(Transaction.created_at.desc()).offset(skip).limit(limit).all()

def count_transactions(db: Session, **filters) -> int:
    return _apply_filters(db.query(func.count(Transaction.id)), **filters).scalar()

def get_transactions_ascending(db: Session, **filters) -> list[Transaction]:
    return _apply_filters(db.query(Transaction), **filters).order_by(Transaction.created_at.asc()).all()

def sum_amount(db: Session, **filters):
    return _apply_filters(db.query(func.coalesce(func.sum(Transaction.amount), 0)), **filters).scalar()

def sum_by_type(db: Session, **filters) -> dict:
    query = _apply_filters(db.query(Transaction.type, func.coalesce(func.sum(Transaction.amount), 0)), **filters)
    return {tx_type: total for tx_type, total in query.group_by(Transaction.type).all()}

def group_by_column(db: Session, column, **filters) -> list[tuple]:
    """[(значение, количество, сумма)] для аналитики."""
    query = _apply_filters(
        db.query(column, func.count(Transaction.id), func.coalesce(func.sum(Transaction.amount), 0)),
        **filters,
    )
    return query.group_by(column).all()
