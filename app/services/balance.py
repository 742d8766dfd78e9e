# app/services/balance.py

import logging
import math
from decimal import Decimal

from sqlalchemy.orm import Session

from app.core import constants as c
from app.core.exceptions import ApiError
from app.core.lifecycle import ensure_transition
from app.crud import transaction as crud_transaction
from app.crud import user as crud_user
from app.models.transaction import Transaction
from app.models.user import User
from app.schemas.balance import (
    Balance, BalanceReconciliation, DepositRequest, PaginatedTransactions, WithdrawalRequest,
)
from app.services import settings as settings_service
from app.services.notification_api import notify
from app.utils.money import mask_card_number, to_money

logger = logging.getLogger(__name__)


def get_balance(db: Session, user: User) -> Balance:
    pending_withdrawals = crud_transaction.sum_amount(
        db, user_id=user.id, type=c.TX_WITHDRAWAL, status=c.TX_PENDING
    )
    pending_deposits = crud_transaction.sum_amount(
        db, user_id=user.id, type=c.TX_DEPOSIT, status=c.TX_PENDING
    )
    return Balance(
        balance=to_money(user.balance),
        pending_withdrawals=abs(to_money(pending_withdrawals)),
        pending_deposits=to_money(pending_deposits),
    )


def _safe_details(method: str, details: dict) -> dict:
    """Реквизиты для хранения: номер карты только в маскированном виде, CVV не сохраняется."""
    safe = {key: value for key, value in details.items() if key not in ("cvv", "cvc", "card_number")}
    if method == c.METHOD_CREDIT_CARD and details.get("card_number"):
        safe["card_number"] = mask_card_number(str(details["card_number"]))
    return safe


def create_deposit(db: Session, user: User, data: DepositRequest) -> Transaction:
    """
    Заявка на пополнение. Баланс не меняется, пока оператор не подтвердит поступление средств.
    """
    amount = to_money(data.amount)
    transaction = crud_transaction.add_transaction(
        db, user_id=user.id, type=c.TX_DEPOSIT, amount=amount, status=c.TX_PENDING,
        method=data.method, details=_safe_details(data.method, data.details),
    )
    db.commit()
    db.refresh(transaction)
    logger.info(f"Deposit request {transaction.id} for {amount} via {data.method} by user {user.id}")
    return transaction


async def create_withdrawal(db: Session, user: User, data: WithdrawalRequest) -> Transaction:
    """
    Заявка на вывод. Сумма сразу списывается с баланса и висит как pending-запись;
    при отклонении оператором возвращается.
    """
    amount = to_money(data.amount)
    platform_settings = await settings_service.get_platform_settings(db)
    min_amount = to_money(platform_settings.min_withdrawal_amount)
    if amount < min_amount:
        raise ApiError.bad_request(f"Minimum withdrawal amount is {min_amount}")

    try:
        locked_user = crud_user.get_user_for_update(db, user.id)
        if to_money(locked_user.balance) < amount:
            raise ApiError.bad_request("Insufficient balance")
        transaction = crud_transaction.add_transaction(
            db, user_id=user.id, type=c.TX_WITHDRAWAL, amount=-amount, status=c.TX_PENDING,
            method=data.method, details=_safe_details(data.method, data.details),
        )
        locked_user.balance = to_money(locked_user.balance) - amount
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(transaction)
    logger.info(f"Withdrawal request {transaction.id} for {amount} via {data.method} by user {user.id}")
    return transaction


def get_paginated_transactions(db: Session, page: int, size: int, **filters) -> PaginatedTransactions:
    skip = (page - 1) * size
    items = crud_transaction.get_transactions(db, skip=skip, limit=size, **filters)
    total_items = crud_transaction.count_transactions(db, **filters)
    total_pages = math.ceil(total_items / size) if total_items > 0 else 1
    return PaginatedTransactions(total_items=total_items, total_pages=total_pages,
                                 current_page=page, size=size, items=items)


# --- Действия администратора ---

def get_balance_request(db: Session, transaction_id: str) -> Transaction:
    transaction = crud_transaction.get_transaction(db, transaction_id)
    if transaction is None or transaction.type not in (c.TX_DEPOSIT, c.TX_WITHDRAWAL):
        raise ApiError.not_found("Balance request not found")
    return transaction


def approve_request(db: Session, transaction_id: str, admin: User, admin_notes: str | None = None) -> Transaction:
    """Пополнение - зачисляем сумму; вывод - деньги уже списаны, просто фиксируем."""
    try:
        transaction = crud_transaction.get_transaction_for_update(db, transaction_id)
        if transaction is None or transaction.type not in (c.TX_DEPOSIT, c.TX_WITHDRAWAL):
            raise ApiError.not_found("Balance request not found")
        ensure_transition("transaction", transaction.status, c.TX_COMPLETED)

        if transaction.type == c.TX_DEPOSIT:
            owner = crud_user.get_user_for_update(db, transaction.user_id)
            owner.balance = to_money(owner.balance) + to_money(transaction.amount)

        transaction.status = c.TX_COMPLETED
        transaction.admin_notes = admin_notes
        notify(db, transaction.user_id, "balance_update", f"{transaction.type.capitalize()} approved",
               f"Your {transaction.type} of {abs(to_money(transaction.amount))} was approved.", transaction.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(transaction)
    logger.info(f"Admin {admin.id} approved {transaction.type} {transaction.id}")
    return transaction


def reject_request(db: Session, transaction_id: str, admin: User, admin_notes: str | None = None) -> Transaction:
    """Отклонение: для вывода возвращаем зарезервированную сумму на баланс."""
    try:
        transaction = crud_transaction.get_transaction_for_update(db, transaction_id)
        if transaction is None or transaction.type not in (c.TX_DEPOSIT, c.TX_WITHDRAWAL):
            raise ApiError.not_found("Balance request not found")
        ensure_transition("transaction", transaction.status, c.TX_FAILED)

        if transaction.type == c.TX_WITHDRAWAL:
            owner = crud_user.get_user_for_update(db, transaction.user_id)
            owner.balance = to_money(owner.balance) + abs(to_money(transaction.amount))

        transaction.status = c.TX_FAILED
        transaction.admin_notes = admin_notes
        notify(db, transaction.user_id, "balance_update", f"{transaction.type.capitalize()} rejected",
               admin_notes or f"Your {transaction.type} request was rejected.", transaction.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(transaction)
    logger.info(f"Admin {admin.id} rejected {transaction.type} {transaction.id}")
    return transaction


def adjust_balance(db: Session, user_id: str, amount: float, reason: str, admin: User) -> Transaction:
    """Ручная корректировка баланса оператором, всегда через запись в журнале."""
    value = to_money(amount)
    try:
        locked_user = crud_user.get_user_for_update(db, user_id)
        if locked_user is None:
            raise ApiError.not_found("User not found")
        new_balance = to_money(locked_user.balance) + value
        if new_balance < 0:
            raise ApiError.bad_request("Adjustment would make the balance negative")
        transaction = crud_transaction.add_transaction(
            db, user_id=user_id,
            type=c.TX_DEPOSIT if value > 0 else c.TX_WITHDRAWAL,
            amount=value, status=c.TX_COMPLETED, method=c.METHOD_BALANCE,
            details={"adjustment": True, "reason": reason, "admin_id": admin.id},
            admin_notes=reason,
        )
        locked_user.balance = new_balance
        notify(db, user_id, "balance_update", "Balance adjusted",
               f"An administrator changed your balance by {value}. Reason: {reason}", transaction.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(transaction)
    logger.info(f"Admin {admin.id} adjusted balance of user {user_id} by {value}")
    return transaction


def ledger_balance(db: Session, user_id: str) -> Decimal:
    """
    Баланс по журналу: все завершенные записи плюс зарезервированные (pending) выводы.
    """
    completed = crud_transaction.sum_amount(db, user_id=user_id, status=c.TX_COMPLETED)
    reserved = crud_transaction.sum_amount(db, user_id=user_id, type=c.TX_WITHDRAWAL, status=c.TX_PENDING)
    return to_money(completed) + to_money(reserved)


def reconcile(db: Session, user_id: str) -> BalanceReconciliation:
    user = crud_user.get_user_by_id(db, user_id)
    if user is None:
        raise ApiError.not_found("User not found")
    stored = to_money(user.balance)
    ledger = ledger_balance(db, user_id)
    if stored != ledger:
        logger.warning(f"Balance mismatch for user {user_id}: stored={stored}, ledger={ledger}")
    return BalanceReconciliation(
        user_id=user_id, stored_balance=stored, ledger_balance=ledger,
        difference=stored - ledger, is_consistent=stored == ledger,
    )
