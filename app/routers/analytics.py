# app/routers/analytics.py

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.dependencies import get_current_user, get_db
from app.models.user import User
from app.schemas.analytics import BalanceHistory, RefundAnalytics, TransactionStats, WithdrawalAnalytics
from app.services import analytics as analytics_service

router = APIRouter(prefix="/analytics")

PERIOD_QUERY = Query("30d", description="7d, 30d, 90d или 1y")


@router.get("/balance-history", response_model=BalanceHistory)
def balance_history(period: str = PERIOD_QUERY, current_user: User = Depends(get_current_user),
                    db: Session = Depends(get_db)):
    return analytics_service.get_balance_history(db, current_user, period)


@router.get("/transactions", response_model=TransactionStats)
def transaction_stats(period: str = PERIOD_QUERY, current_user: User = Depends(get_current_user),
                      db: Session = Depends(get_db)):
    return analytics_service.get_transaction_stats(db, current_user, period)


@router.get("/withdrawals", response_model=WithdrawalAnalytics)
def withdrawal_analytics(period: str = PERIOD_QUERY, current_user: User = Depends(get_current_user),
                         db: Session = Depends(get_db)):
    return analytics_service.get_withdrawal_analytics(db, current_user, period)


@router.get("/refunds", response_model=RefundAnalytics)
def refund_analytics(period: str = PERIOD_QUERY, current_user: User = Depends(get_current_user),
                     db: Session = Depends(get_db)):
    return analytics_service.get_refund_analytics(db, current_user, period)
