# app/schemas/task.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from app.schemas.common import PaginatedResponse


class Task(BaseModel):
    id: str
    order_id: str | None = None
    type: str
    platform: str
    target_url: str
    quantity: int
    remaining_quantity: int
    completed_count: int
    rate: float
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class PaginatedTasks(PaginatedResponse[Task]):
    pass


class TaskExecution(BaseModel):
    id: str
    task_id: str
    user_id: str
    device_id: str | None = None
    social_account_id: str | None = None
    status: str
    proof: Dict[str, Any] | None = None
    earnings: float
    started_at: datetime
    completed_at: datetime | None = None
    cooldown_ends_at: datetime | None = None
    reviewed_at: datetime | None = None
    rejection_reason: str | None = None

    class Config:
        from_attributes = True


class PaginatedExecutions(PaginatedResponse[TaskExecution]):
    pass


class TaskDetails(Task):
    my_executions: List[TaskExecution] = []


class TaskStart(BaseModel):
    device_id: Optional[str] = None
    social_account_id: Optional[str] = None


class TaskComplete(BaseModel):
    proof: Dict[str, Any] = Field(default_factory=dict)


class ExecutionReject(BaseModel):
    reason: str = Field(..., min_length=3, max_length=500)
