# app/routers/admin/balance.py

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.dependencies import get_db, require_admin_or_above
from app.models.user import User
from app.schemas.balance import BalanceRequestDecision, PaginatedTransactions, Transaction
from app.services import activity as activity_service
from app.services import admin as admin_service
from app.services import balance as balance_service

router = APIRouter()

BALANCE_REQUEST_TYPES = ("deposit", "withdrawal")


@router.get("/requests", response_model=PaginatedTransactions)
def get_balance_requests(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    request_type: Literal["deposit", "withdrawal"] | None = Query(None, alias="type"),
    status_filter: Literal["pending", "completed", "failed"] | None = Query("pending", alias="status"),
    user_id: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    [АДМИН] Заявки на пополнение и вывод. По умолчанию только ожидающие решения.
    """
    filters = {
        "type": request_type,
        "types": None if request_type else BALANCE_REQUEST_TYPES,
        "status": status_filter,
        "user_id": user_id,
    }
    active_filters = {k: v for k, v in filters.items() if v is not None}
    return balance_service.get_paginated_transactions(db, page, size, **active_filters)


@router.get("/requests/{transaction_id}", response_model=Transaction)
def get_balance_request(transaction_id: str, db: Session = Depends(get_db)):
    return balance_service.get_balance_request(db, transaction_id)


@router.put("/requests/{transaction_id}/approve", response_model=Transaction)
async def approve_balance_request(
    transaction_id: str,
    data: BalanceRequestDecision,
    request: Request,
    admin: User = Depends(require_admin_or_above),
    db: Session = Depends(get_db),
):
    """[АДМИН] Пополнение зачисляется на баланс, вывод отмечается выполненным."""
    transaction = balance_service.approve_request(db, transaction_id, admin, data.admin_notes)
    activity_service.log_admin_action(db, request, admin, "balance_request", "approve", transaction_id,
                                      {"type": transaction.type})
    await admin_service.invalidate_admin_caches()
    return transaction


@router.put("/requests/{transaction_id}/reject", response_model=Transaction)
async def reject_balance_request(
    transaction_id: str,
    data: BalanceRequestDecision,
    request: Request,
    admin: User = Depends(require_admin_or_above),
    db: Session = Depends(get_db),
):
    """[АДМИН] Отклоняет заявку. Сумма отклоненного вывода возвращается на баланс."""
    transaction = balance_service.reject_request(db, transaction_id, admin, data.admin_notes)
    activity_service.log_admin_action(db, request, admin, "balance_request", "reject", transaction_id,
                                      {"type": transaction.type})
    await admin_service.invalidate_admin_caches()
    return transaction
