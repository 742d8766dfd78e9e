# app/routers/balance.py

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from app.dependencies import get_current_user, get_db
from app.models.user import User
from app.schemas.balance import Balance, DepositRequest, PaginatedTransactions, Transaction, WithdrawalRequest
from app.services import activity as activity_service
from app.services import balance as balance_service

router = APIRouter(prefix="/balance")


@router.get("", response_model=Balance)
def get_balance(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return balance_service.get_balance(db, current_user)


@router.post("/deposit", response_model=Transaction, status_code=status.HTTP_201_CREATED)
def deposit(
    data: DepositRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Заявка на пополнение. Зачисление - после подтверждения оператором."""
    transaction = balance_service.create_deposit(db, current_user, data)
    activity_service.log_action(db, request, current_user, "balance", "deposit", transaction.id,
                                {"amount": data.amount, "method": data.method})
    return transaction


@router.post("/withdraw", response_model=Transaction, status_code=status.HTTP_201_CREATED)
async def withdraw(
    data: WithdrawalRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Заявка на вывод средств. Сумма резервируется сразу."""
    transaction = await balance_service.create_withdrawal(db, current_user, data)
    activity_service.log_action(db, request, current_user, "balance", "withdraw", transaction.id,
                                {"amount": data.amount, "method": data.method})
    return transaction


@router.get("/transactions", response_model=PaginatedTransactions)
def list_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    type: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return balance_service.get_paginated_transactions(
        db, page, limit, user_id=current_user.id, type=type, status=status_filter
    )
