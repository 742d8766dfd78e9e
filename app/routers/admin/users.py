# app/routers/admin/users.py

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from app.dependencies import get_db, require_admin_or_above
from app.models.user import User
from app.schemas.admin import (
    AdminUserCreate, AdminUserDetails, AdminUserListItem, AdminUserUpdate,
    PaginatedAdminUsers, UserStatistics,
)
from app.schemas.balance import BalanceAdjustment, BalanceReconciliation, Transaction
from app.services import activity as activity_service
from app.services import admin as admin_service
from app.services import balance as balance_service

logger = logging.getLogger(__name__)

# Префикс /users добавляется в admin/__init__.py
router = APIRouter()


@router.get("/statistics", response_model=UserStatistics)
async def get_user_statistics(db: Session = Depends(get_db)):
    """[АДМИН] Статистика по пользователям: роли, режимы, активность."""
    return await admin_service.get_user_statistics(db)


@router.get("", response_model=PaginatedAdminUsers)
def get_users_list(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    search: str | None = Query(None, description="Поиск по email, username или ФИО"),
    role: Literal["user", "moderator", "admin", "super_admin"] | None = Query(None),
    user_mode: Literal["task_doer", "task_giver"] | None = Query(None),
    is_active: bool | None = Query(None),
    sort_by: Literal["created_at", "email", "username", "balance", "last_login"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    db: Session = Depends(get_db),
):
    """
    [АДМИН] Возвращает пагинированный список пользователей с фильтрами и поиском.
    """
    filters = {
        "search": search,
        "role": role,
        "user_mode": user_mode,
        "is_active": is_active,
    }
    active_filters = {k: v for k, v in filters.items() if v is not None}
    return admin_service.get_paginated_users(db, page, size, sort_by, sort_order, **active_filters)


@router.post("", response_model=AdminUserListItem, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: AdminUserCreate,
    request: Request,
    admin: User = Depends(require_admin_or_above),
    db: Session = Depends(get_db),
):
    """[АДМИН] Создает пользователя. Административные роли выдает только супер-админ."""
    user = admin_service.create_user(db, data, admin)
    activity_service.log_admin_action(db, request, admin, "user", "create", user.id, {"role": user.role})
    await admin_service.invalidate_admin_caches()
    return user


@router.get("/{user_id}", response_model=AdminUserDetails)
def get_user_details(user_id: str, db: Session = Depends(get_db)):
    """[АДМИН] Карточка пользователя со счетчиками заказов, заработка и сессий."""
    return admin_service.get_user_details(db, user_id)


@router.put("/{user_id}", response_model=AdminUserListItem)
async def update_user(
    user_id: str,
    data: AdminUserUpdate,
    request: Request,
    admin: User = Depends(require_admin_or_above),
    db: Session = Depends(get_db),
):
    """[АДМИН] Обновляет профиль, роль или статус пользователя."""
    user = admin_service.update_user(db, user_id, data, admin)
    activity_service.log_admin_action(
        db, request, admin, "user", "update", user.id,
        data.model_dump(exclude_unset=True, exclude_none=True),
    )
    await admin_service.invalidate_admin_caches()
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_user(
    user_id: str,
    request: Request,
    admin: User = Depends(require_admin_or_above),
    db: Session = Depends(get_db),
):
    """[АДМИН] Деактивирует пользователя и отзывает все его сессии."""
    admin_service.deactivate_user(db, user_id, admin)
    activity_service.log_admin_action(db, request, admin, "user", "deactivate", user_id)
    await admin_service.invalidate_admin_caches()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{user_id}/balance", response_model=Transaction, status_code=status.HTTP_201_CREATED)
async def adjust_user_balance(
    user_id: str,
    data: BalanceAdjustment,
    request: Request,
    admin: User = Depends(require_admin_or_above),
    db: Session = Depends(get_db),
):
    """[АДМИН] Ручная корректировка баланса. Всегда оставляет запись в журнале транзакций."""
    transaction = balance_service.adjust_balance(db, user_id, data.amount, data.reason, admin)
    activity_service.log_admin_action(
        db, request, admin, "balance", "adjust", transaction.id,
        {"user_id": user_id, "amount": data.amount, "reason": data.reason},
    )
    await admin_service.invalidate_admin_caches()
    return transaction


@router.get("/{user_id}/balance/reconcile", response_model=BalanceReconciliation)
def reconcile_user_balance(user_id: str, db: Session = Depends(get_db)):
    """[АДМИН] Сверка сохраненного баланса с суммой по журналу транзакций."""
    return balance_service.reconcile(db, user_id)
