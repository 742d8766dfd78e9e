# app/services/admin.py

import logging
import math
from datetime import timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core import constants as c
from app.core.exceptions import ApiError
from app.core.redis import redis_client
from app.core.security import hash_password
from app.crud import dispute as crud_dispute
from app.crud import order as crud_order
from app.crud import task as crud_task
from app.crud import transaction as crud_transaction
from app.crud import user as crud_user
from app.models.order import Order
from app.models.session import Session as UserSession
from app.models.task import TaskExecution
from app.models.user import User
from app.schemas.admin import (
    AdminUserCreate, AdminUserDetails, AdminUserListItem, AdminUserUpdate, DashboardOverview,
    PaginatedAdminUsers, UserStatistics,
)
from app.services import session as session_service
from app.utils.dates import utcnow
from app.utils.money import to_money

logger = logging.getLogger(__name__)

DASHBOARD_CACHE_KEY = "admin:dashboard_overview"
USER_STATS_CACHE_KEY = "admin:user_statistics"
CACHE_TTL_SECONDS = 300


ORDER_STATS_CACHE_KEY = "admin:order_statistics"
ADMIN_CACHE_KEYS = (DASHBOARD_CACHE_KEY, USER_STATS_CACHE_KEY, ORDER_STATS_CACHE_KEY)


async def invalidate_admin_caches() -> None:
    """Сбрасывает кеш сводок после действий, меняющих цифры."""
    await redis_client.delete(*ADMIN_CACHE_KEYS)


async def get_dashboard_overview(db: Session) -> DashboardOverview:
    """Собирает сводку для главной страницы админки. Кешируется в Redis на 5 минут."""
    cached_data = await redis_client.get(DASHBOARD_CACHE_KEY)
    if cached_data:
        logger.info("Serving dashboard overview from cache.")
        return DashboardOverview.model_validate_json(cached_data)

    logger.info("Calculating fresh dashboard overview.")
    now = utcnow()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    paid_statuses = (c.ORDER_PENDING, c.ORDER_PROCESSING, c.ORDER_COMPLETED)
    orders_by_status = crud_order.count_orders_by_status(db)

    overview = DashboardOverview(
        total_users=crud_user.count_all_users(db),
        new_users_today=crud_user.count_new_users_since(db, today),
        active_users_last_7_days=crud_user.count_active_users_since(db, now - timedelta(days=7)),
        total_orders=sum(orders_by_status.values()),
        orders_today=crud_order.count_orders(db, date_from=today),
        pending_orders=orders_by_status.get(c.ORDER_PENDING, 0),
        total_revenue=to_money(crud_order.sum_order_amounts(db, statuses=paid_statuses)),
        revenue_today=to_money(crud_order.sum_order_amounts(db, statuses=paid_statuses, since=today)),
        available_tasks=crud_task.count_tasks(db, statuses=(c.TASK_AVAILABLE, c.TASK_IN_PROGRESS)),
        pending_submissions=crud_task.count_executions(db, status=c.EXECUTION_COMPLETED),
        pending_balance_requests=crud_transaction.count_transactions(
            db, types=(c.TX_DEPOSIT, c.TX_WITHDRAWAL), status=c.TX_PENDING
        ),
        open_disputes=crud_dispute.count_disputes(db, status=c.DISPUTE_OPEN),
    )
    await redis_client.set(DASHBOARD_CACHE_KEY, overview.model_dump_json(), ex=CACHE_TTL_SECONDS)
    return overview


async def get_user_statistics(db: Session) -> UserStatistics:
    cached_data = await redis_client.get(USER_STATS_CACHE_KEY)
    if cached_data:
        return UserStatistics.model_validate_json(cached_data)

    now = utcnow()
    total = crud_user.count_all_users(db)
    active = crud_user.count_users_with_filters(db, is_active=True)
    stats = UserStatistics(
        total_users=total,
        active_users=active,
        inactive_users=total - active,
        new_users_last_30_days=crud_user.count_new_users_since(db, now - timedelta(days=30)),
        active_last_7_days=crud_user.count_active_users_since(db, now - timedelta(days=7)),
        by_role=crud_user.count_users_by(db, User.role),
        by_mode=crud_user.count_users_by(db, User.user_mode),
        total_balance=to_money(crud_user.total_balance(db)),
    )
    await redis_client.set(USER_STATS_CACHE_KEY, stats.model_dump_json(), ex=CACHE_TTL_SECONDS)
    return stats


def get_paginated_users(db: Session, page: int, size: int, sort_by: str = "created_at",
                        sort_order: str = "desc", **filters) -> PaginatedAdminUsers:
    """Собирает пагинированный список пользователей для админки."""
    skip = (page - 1) * size
    users = crud_user.get_users(db, skip=skip, limit=size, sort_by=sort_by, sort_order=sort_order, **filters)
    total_users = crud_user.count_users_with_filters(db, **filters)
    total_pages = math.ceil(total_users / size) if total_users > 0 else 1
    return PaginatedAdminUsers(
        total_items=total_users, total_pages=total_pages,
        current_page=page, size=size,
        items=[AdminUserListItem.model_validate(u) for u in users],
    )


def get_user_or_404(db: Session, user_id: str) -> User:
    user = crud_user.get_user_by_id(db, user_id)
    if user is None:
        raise ApiError.not_found("User not found")
    return user


def get_user_details(db: Session, user_id: str) -> AdminUserDetails:
    """Полная карточка пользователя: заказы, траты, заработок, сессии, споры."""
    user = get_user_or_404(db, user_id)
    spent = db.query(func.coalesce(func.sum(Order.amount), 0)).filter(
        Order.user_id == user.id,
        Order.status.notin_((c.ORDER_CANCELLED, c.ORDER_REFUNDED)),
    ).scalar()
    earned = crud_transaction.sum_amount(db, user_id=user.id, type=c.TX_TASK_EARNING, status=c.TX_COMPLETED)
    base = AdminUserListItem.model_validate(user).model_dump()
    return AdminUserDetails(
        **base,
        settings=user.settings,
        updated_at=user.updated_at,
        orders_count=crud_order.count_orders(db, user_id=user.id),
        total_spent=to_money(spent),
        tasks_completed=db.query(TaskExecution).filter(
            TaskExecution.user_id == user.id, TaskExecution.status == c.EXECUTION_APPROVED
        ).count(),
        total_earned=to_money(earned),
        active_sessions=db.query(UserSession).filter(
            UserSession.user_id == user.id, UserSession.expires_at > utcnow()
        ).count(),
        open_disputes=crud_dispute.count_disputes(db, user_id=user.id, status=c.DISPUTE_OPEN),
    )


def create_user(db: Session, data: AdminUserCreate, admin: User) -> User:
    if data.role != c.ROLE_USER and admin.role != c.ROLE_SUPER_ADMIN:
        raise ApiError.forbidden("Only super admins can assign administrative roles")
    if crud_user.get_user_by_email_or_username(db, data.email, data.username):
        raise ApiError.bad_request("User already exists")
    user = crud_user.create_user(
        db, email=data.email, username=data.username, password_hash=hash_password(data.password),
        first_name=data.first_name, last_name=data.last_name, phone=data.phone,
        role=data.role, user_mode=data.user_mode,
    )
    logger.info(f"Admin {admin.id} created user {user.id} with role {user.role}")
    return user


def update_user(db: Session, user_id: str, data: AdminUserUpdate, admin: User) -> User:
    user = get_user_or_404(db, user_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    if "role" in changes and changes["role"] != user.role and admin.role != c.ROLE_SUPER_ADMIN:
        raise ApiError.forbidden("Only super admins can change roles")
    if user.id == admin.id and (changes.get("is_active") is False or "role" in changes and changes["role"] != user.role):
        raise ApiError.bad_request("You cannot demote or deactivate yourself")

    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)

    if changes.get("is_active") is False:
        session_service.invalidate_all_user_sessions(db, user.id)
        session_service.invalidate_all_admin_sessions(db, user.id)
    logger.info(f"Admin {admin.id} updated user {user.id}: {list(changes)}")
    return user


def deactivate_user(db: Session, user_id: str, admin: User) -> None:
    """Пользователи не удаляются физически: деактивация и отзыв всех сессий."""
    user = get_user_or_404(db, user_id)
    if user.id == admin.id:
        raise ApiError.bad_request("You cannot deactivate yourself")
    if user.role == c.ROLE_SUPER_ADMIN and admin.role != c.ROLE_SUPER_ADMIN:
        raise ApiError.forbidden("Insufficient permissions")
    user.is_active = False
    db.commit()
    session_service.invalidate_all_user_sessions(db, user.id)
    session_service.invalidate_all_admin_sessions(db, user.id)
    logger.info(f"Admin {admin.id} deactivated user {user.id}")
