# app/services/analytics.py
"""
Аналитика по журналу транзакций пользователя.
Каждый вызов заново агрегирует строки за окно 7d/30d/90d/1y, без кеширования.
"""

import logging

from sqlalchemy.orm import Session

from app.core import constants as c
from app.crud import transaction as crud_transaction
from app.models.transaction import Transaction
from app.models.user import User
from app.schemas.analytics import (
    BalanceHistory, BalanceHistoryPoint, BreakdownItem, RefundAnalytics, TransactionStats,
    WithdrawalAnalytics,
)
from app.utils.dates import normalize_period, period_start
from app.utils.money import to_money

logger = logging.getLogger(__name__)


def get_balance_history(db: Session, user: User, period: str | None) -> BalanceHistory:
    period = normalize_period(period)
    start = period_start(period)

    opening = to_money(crud_transaction.sum_amount(db, user_id=user.id, status=c.TX_COMPLETED, until=start))
    running = opening
    items = []
    for tx in crud_transaction.get_transactions_ascending(db, user_id=user.id, status=c.TX_COMPLETED, since=start):
        amount = to_money(tx.amount)
        running += amount
        items.append(BalanceHistoryPoint(
            date=tx.created_at, type=tx.type, amount=amount, balance=running, transaction_id=tx.id,
        ))
    pending = crud_transaction.sum_amount(db, user_id=user.id, type=c.TX_WITHDRAWAL, status=c.TX_PENDING)
    return BalanceHistory(period=period, opening_balance=opening, closing_balance=running,
                          pending_withdrawals=abs(to_money(pending)), items=items)


def get_transaction_stats(db: Session, user: User, period: str | None) -> TransactionStats:
    period = normalize_period(period)
    filters = dict(user_id=user.id, status=c.TX_COMPLETED, since=period_start(period))
    totals = crud_transaction.sum_by_type(db, **filters)

    def total(tx_type: str):
        return to_money(totals.get(tx_type, 0))

    return TransactionStats(
        period=period,
        total_deposits=total(c.TX_DEPOSIT),
        total_withdrawals=abs(total(c.TX_WITHDRAWAL)),
        total_earnings=total(c.TX_TASK_EARNING),
        total_spent=abs(total(c.TX_ORDER_PAYMENT)),
        total_refunds=total(c.TX_REFUND),
        transaction_count=crud_transaction.count_transactions(db, **filters),
    )


def _breakdown(rows) -> list[BreakdownItem]:
    return [
        BreakdownItem(key=key or "unknown", count=count, total=abs(to_money(amount)))
        for key, count, amount in rows
    ]


def get_withdrawal_analytics(db: Session, user: User, period: str | None) -> WithdrawalAnalytics:
    period = normalize_period(period)
    filters = dict(user_id=user.id, type=c.TX_WITHDRAWAL, since=period_start(period))
    completed = crud_transaction.sum_amount(db, status=c.TX_COMPLETED, **filters)
    pending = crud_transaction.sum_amount(db, status=c.TX_PENDING, **filters)
    return WithdrawalAnalytics(
        period=period,
        total_withdrawn=abs(to_money(completed)),
        pending_amount=abs(to_money(pending)),
        by_method=_breakdown(crud_transaction.group_by_column(db, Transaction.method, **filters)),
        by_status=_breakdown(crud_transaction.group_by_column(db, Transaction.status, **filters)),
    )


def get_refund_analytics(db: Session, user: User, period: str | None) -> RefundAnalytics:
    period = normalize_period(period)
    filters = dict(user_id=user.id, type=c.TX_REFUND, since=period_start(period))
    completed = crud_transaction.sum_amount(db, status=c.TX_COMPLETED, **filters)
    return RefundAnalytics(
        period=period,
        total_refunded=to_money(completed),
        refund_count=crud_transaction.count_transactions(db, **filters),
        by_status=_breakdown(crud_transaction.group_by_column(db, Transaction.status, **filters)),
    )
