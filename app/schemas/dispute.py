# app/schemas/dispute.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.common import PaginatedResponse

DisputeType = Literal["order_issue", "payment_issue", "technical_issue", "other"]


class DisputeCreate(BaseModel):
    order_id: str
    type: DisputeType
    subject: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)


class DisputeUpdate(BaseModel):
    subject: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)


class DisputeResolve(BaseModel):
    resolution: str = Field(..., min_length=3, max_length=2000)


class Dispute(BaseModel):
    id: str
    user_id: str
    order_id: str
    type: str
    status: str
    subject: str
    description: str
    resolution: str | None = None
    resolved_by: str | None = None
    resolved_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PaginatedDisputes(PaginatedResponse[Dispute]):
    pass
