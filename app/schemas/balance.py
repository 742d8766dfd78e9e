# app/schemas/balance.py
from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from app.schemas.common import PaginatedResponse


class Balance(BaseModel):
    balance: float
    pending_withdrawals: float
    pending_deposits: float


class DepositRequest(BaseModel):
    amount: float = Field(..., gt=0, le=1_000_000)
    method: Literal["bank_transfer", "credit_card", "crypto"]
    details: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_method_details(self):
        details = self.details
        if self.method == "bank_transfer":
            if not details.get("bank_name") or not details.get("account_holder"):
                raise ValueError("Bank name and account holder are required for bank transfer")
        elif self.method == "credit_card":
            card_number = str(details.get("card_number", "")).replace(" ", "")
            if not (card_number.isdigit() and len(card_number) == 16):
                raise ValueError("A valid 16-digit card number is required")
        elif self.method == "crypto":
            if not details.get("wallet_address"):
                raise ValueError("Wallet address is required for crypto payment")
        return self


class WithdrawalRequest(BaseModel):
    amount: float = Field(..., gt=0, le=1_000_000)
    method: Literal["bank_transfer", "crypto"]
    details: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_method_details(self):
        details = self.details
        if self.method == "bank_transfer":
            missing = [key for key in ("bank_name", "account_holder", "iban") if not details.get(key)]
            if missing:
                raise ValueError(f"Missing bank details: {', '.join(missing)}")
        elif self.method == "crypto":
            if not details.get("wallet_address"):
                raise ValueError("Wallet address is required for crypto withdrawal")
        return self


class Transaction(BaseModel):
    id: str
    user_id: str
    order_id: str | None = None
    type: str
    amount: float
    status: str
    method: str | None = None
    details: Dict[str, Any] | None = None
    reference: str | None = None
    admin_notes: str | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PaginatedTransactions(PaginatedResponse[Transaction]):
    pass


class BalanceAdjustment(BaseModel):
    amount: float = Field(..., description="Положительное - начисление, отрицательное - списание")
    reason: str = Field(..., min_length=3, max_length=500)

    @model_validator(mode="after")
    def non_zero(self):
        if self.amount == 0:
            raise ValueError("Amount must not be zero")
        return self


class BalanceRequestDecision(BaseModel):
    admin_notes: Optional[str] = Field(None, max_length=1000)


class BalanceReconciliation(BaseModel):
    user_id: str
    stored_balance: float
    ledger_balance: float
    difference: float
    is_consistent: bool
