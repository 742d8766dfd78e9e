# app/schemas/analytics.py
from datetime import datetime
from typing import List

from pydantic import BaseModel


class BalanceHistoryPoint(BaseModel):
    date: datetime
    type: str
    amount: float
    balance: float
    transaction_id: str


class BalanceHistory(BaseModel):
    """
    История по завершенным транзакциям. Ожидающие выводы уже списаны с баланса,
    но в историю не входят: closing_balance - pending_withdrawals = текущий баланс.
    """
    period: str
    opening_balance: float
    closing_balance: float
    pending_withdrawals: float
    items: List[BalanceHistoryPoint]


class TransactionStats(BaseModel):
    period: str
    total_deposits: float
    total_withdrawals: float
    total_earnings: float
    total_spent: float
    total_refunds: float
    transaction_count: int


class BreakdownItem(BaseModel):
    key: str
    count: int
    total: float


class WithdrawalAnalytics(BaseModel):
    period: str
    total_withdrawn: float
    pending_amount: float
    by_method: List[BreakdownItem]
    by_status: List[BreakdownItem]


class RefundAnalytics(BaseModel):
    period: str
    total_refunded: float
    refund_count: int
    by_status: List[BreakdownItem]
