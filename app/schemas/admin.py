# app/schemas/admin.py
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from app.schemas.common import PaginatedResponse
from app.schemas.order import Order
from app.schemas.user import PHONE_PATTERN, User

AdminRole = Literal["user", "moderator", "admin", "super_admin"]


# --- Аутентификация админки ---
class AdminLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AdminAuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: User


# --- Пользователи ---
class AdminUserListItem(User):
    pass


class PaginatedAdminUsers(PaginatedResponse[AdminUserListItem]):
    pass


class AdminUserDetails(User):
    settings: Dict[str, Any] | None = None
    updated_at: datetime
    orders_count: int
    total_spent: float
    tasks_completed: int
    total_earned: float
    active_sessions: int
    open_disputes: int


class AdminUserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    username: str = Field(..., min_length=3, max_length=50)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    role: AdminRole = "user"
    user_mode: Literal["task_doer", "task_giver"] = "task_doer"


class AdminUserUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    role: Optional[AdminRole] = None
    user_mode: Optional[Literal["task_doer", "task_giver"]] = None
    is_active: Optional[bool] = None


class UserStatistics(BaseModel):
    total_users: int
    active_users: int
    inactive_users: int
    new_users_last_30_days: int
    active_last_7_days: int
    by_role: Dict[str, int]
    by_mode: Dict[str, int]
    total_balance: float


# --- Заказы ---
class AdminOrder(Order):
    user_email: str | None = None
    username: str | None = None
    reviewed_by: str | None = None


class PaginatedAdminOrders(PaginatedResponse[AdminOrder]):
    pass


class OrderApprove(BaseModel):
    admin_notes: Optional[str] = Field(None, max_length=1000)


class OrderReject(BaseModel):
    reason: str = Field(..., min_length=5, max_length=1000)
    admin_notes: Optional[str] = Field(None, max_length=1000)


class OrderRefund(BaseModel):
    reason: str = Field(..., min_length=5, max_length=1000)
    admin_notes: Optional[str] = Field(None, max_length=1000)


class OrderStatusUpdate(BaseModel):
    status: Literal["pending", "processing", "completed", "failed", "cancelled", "refunded"]
    admin_notes: Optional[str] = Field(None, max_length=1000)


class OrderStatisticsOverview(BaseModel):
    total_orders: int
    pending_orders: int
    processing_orders: int
    completed_orders: int
    failed_orders: int
    cancelled_orders: int
    refunded_orders: int
    total_revenue: float
    revenue_last_30_days: float
    orders_last_30_days: int
    by_platform: Dict[str, int]
    by_service: Dict[str, int]


# --- Дашборд ---
class DashboardOverview(BaseModel):
    total_users: int
    new_users_today: int
    active_users_last_7_days: int
    total_orders: int
    orders_today: int
    pending_orders: int
    total_revenue: float
    revenue_today: float
    available_tasks: int
    pending_submissions: int
    pending_balance_requests: int
    open_disputes: int


# --- Споры ---
class DisputeReview(BaseModel):
    admin_notes: Optional[str] = Field(None, max_length=1000)


class DisputeClose(BaseModel):
    resolution: Optional[str] = Field(None, max_length=2000)


# --- Журнал действий ---
class ActivityLogItem(BaseModel):
    id: str
    user_id: str | None = None
    scope: str
    resource: str
    action: str
    resource_id: str | None = None
    details: Dict[str, Any] | None = None
    ip_address: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class PaginatedActivityLogs(PaginatedResponse[ActivityLogItem]):
    pass


# --- Фоновые задачи ---
class JobInfo(BaseModel):
    job_name: str
    description: str


class JobRunRequest(BaseModel):
    job_name: str = Field(..., description="Имя задачи из реестра или 'all'")


class JobRunResponse(BaseModel):
    status: str
    message: str
    jobs: List[str]
