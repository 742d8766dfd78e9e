# app/services/task.py

import logging
import math
from datetime import timedelta

from sqlalchemy.orm import Session

from app.core import constants as c
from app.core.exceptions import ApiError
from app.core.lifecycle import ensure_transition
from app.crud import device as crud_device
from app.crud import order as crud_order
from app.crud import social_account as crud_social_account
from app.crud import task as crud_task
from app.crud import transaction as crud_transaction
from app.crud import user as crud_user
from app.models.order import Order
from app.models.task import Task, TaskExecution
from app.models.user import User
from app.schemas.task import PaginatedExecutions, PaginatedTasks, TaskDetails, TaskStart
from app.schemas.task import TaskExecution as TaskExecutionSchema
from app.services import settings as settings_service
from app.services.notification_api import notify
from app.utils.dates import utcnow
from app.utils.money import to_money

logger = logging.getLogger(__name__)

# Какой счетчик соцаккаунта растет при одобрении выполнения
ACCOUNT_COUNTERS = {
    c.TASK_FOLLOW: "total_followed",
    c.TASK_LIKE: "total_likes",
    c.TASK_VIEW: "total_views",
    c.TASK_SUBSCRIBE: "total_subscriptions",
}


def list_available_tasks(db: Session, user: User, page: int, size: int,
                         platform: str | None = None, type: str | None = None,
                         search: str | None = None) -> PaginatedTasks:
    """
    Задания, которые пользователь может взять прямо сейчас: чужие, с остатком,
    без открытого выполнения, вне кулдауна и не выполненные ранее (для одноразовых).
    """
    blocked_ids = crud_task.get_blocking_task_ids(db, user.id, utcnow(), c.ONE_TIME_TASK_TYPES)
    filters = dict(
        statuses=(c.TASK_AVAILABLE, c.TASK_IN_PROGRESS),
        platform=platform,
        type=type,
        search=search,
        exclude_user_id=user.id,
        exclude_task_ids=blocked_ids,
        min_remaining=1,
    )
    skip = (page - 1) * size
    items = crud_task.get_tasks(db, skip=skip, limit=size, **filters)
    total_items = crud_task.count_tasks(db, **filters)
    total_pages = math.ceil(total_items / size) if total_items > 0 else 1
    return PaginatedTasks(total_items=total_items, total_pages=total_pages,
                          current_page=page, size=size, items=items)


def get_task(db: Session, task_id: str) -> Task:
    task = crud_task.get_task(db, task_id)
    if task is None:
        raise ApiError.not_found("Task not found")
    return task


def get_task_details(db: Session, user: User, task_id: str) -> TaskDetails:
    task = get_task(db, task_id)
    executions = crud_task.get_user_executions_for_task(db, user.id, task.id)
    details = TaskDetails.model_validate(task)
    details.my_executions = [TaskExecutionSchema.model_validate(e) for e in executions]
    return details


def start_task(db: Session, user: User, task_id: str, data: TaskStart) -> TaskExecution:
    task = get_task(db, task_id)
    if task.user_id == user.id:
        raise ApiError.bad_request("You cannot complete your own task")
    if task.status not in (c.TASK_AVAILABLE, c.TASK_IN_PROGRESS) or task.remaining_quantity < 1:
        raise ApiError.bad_request("Task is not available")

    now = utcnow()
    for execution in crud_task.get_user_executions_for_task(db, user.id, task.id):
        if execution.status == c.EXECUTION_IN_PROGRESS:
            raise ApiError.bad_request("Task already started")
        if execution.status in (c.EXECUTION_COMPLETED, c.EXECUTION_APPROVED):
            if task.type in c.ONE_TIME_TASK_TYPES:
                raise ApiError.bad_request("Task already completed")
            if execution.cooldown_ends_at and execution.cooldown_ends_at > now:
                raise ApiError.bad_request("Task in cooldown period")

    if data.device_id:
        device = crud_device.get_user_device(db, user.id, data.device_id)
        if device is None:
            raise ApiError.not_found("Device not found")
        daily_limit = (device.settings or {}).get("max_daily_tasks", c.DEFAULT_DEVICE_SETTINGS["max_daily_tasks"])
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        if crud_task.count_device_executions_since(db, device.id, day_start) >= daily_limit:
            raise ApiError.bad_request("Device daily task limit reached")
    if data.social_account_id:
        account = crud_social_account.get_user_account(db, user.id, data.social_account_id)
        if account is None:
            raise ApiError.not_found("Social account not found")
        if account.platform != task.platform:
            raise ApiError.bad_request("Social account platform does not match the task")
        if account.status != "active":
            raise ApiError.bad_request("Social account is not active")

    execution = TaskExecution(
        task_id=task.id,
        user_id=user.id,
        device_id=data.device_id,
        social_account_id=data.social_account_id,
        status=c.EXECUTION_IN_PROGRESS,
        started_at=now,
    )
    db.add(execution)
    if task.status == c.TASK_AVAILABLE:
        ensure_transition("task", task.status, c.TASK_IN_PROGRESS)
        task.status = c.TASK_IN_PROGRESS
    db.commit()
    db.refresh(execution)
    logger.info(f"User {user.id} started task {task.id} (execution {execution.id})")
    return execution


async def complete_task(db: Session, user: User, task_id: str, proof: dict) -> TaskExecution:
    """Исполнитель отправляет доказательство выполнения; дальше - проверка админом или автоодобрение."""
    task = get_task(db, task_id)
    execution = crud_task.get_open_execution(db, user.id, task.id)
    if execution is None:
        raise ApiError.not_found("No active execution for this task")

    platform_settings = await settings_service.get_platform_settings(db)
    now = utcnow()
    ensure_transition("execution", execution.status, c.EXECUTION_COMPLETED)
    execution.status = c.EXECUTION_COMPLETED
    execution.proof = proof
    execution.completed_at = now
    if task.type not in c.ONE_TIME_TASK_TYPES:
        execution.cooldown_ends_at = now + timedelta(hours=platform_settings.task_cooldown_hours)
    db.commit()
    logger.info(f"User {user.id} submitted execution {execution.id} for task {task.id}")

    if platform_settings.auto_approve_task_submissions:
        execution = approve_execution(db, execution.id, reviewer=None)
    else:
        db.refresh(execution)
    return execution


def approve_execution(db: Session, execution_id: str, reviewer: User | None) -> TaskExecution:
    """
    Одобрение выполнения: начисление исполнителю, уменьшение остатков задания и заказа,
    счетчики соцаккаунта. Всё одной транзакцией БД.
    """
    try:
        execution = crud_task.get_execution_for_update(db, execution_id)
        if execution is None:
            raise ApiError.not_found("Submission not found")
        ensure_transition("execution", execution.status, c.EXECUTION_APPROVED)

        task = crud_task.get_task_for_update(db, execution.task_id)
        if task.status not in (c.TASK_AVAILABLE, c.TASK_IN_PROGRESS):
            raise ApiError.bad_request("Task is no longer active")
        if task.remaining_quantity < 1:
            raise ApiError.bad_request("Task has no remaining quantity")
        order = crud_order.get_order_for_update(db, task.order_id) if task.order_id else None
        if order is not None and order.status not in c.ACTIVE_ORDER_STATUSES:
            raise ApiError.bad_request("Order is no longer active")

        earnings = to_money(task.rate)
        doer = crud_user.get_user_for_update(db, execution.user_id)
        crud_transaction.add_transaction(
            db, user_id=doer.id, type=c.TX_TASK_EARNING, amount=earnings,
            status=c.TX_COMPLETED, method=c.METHOD_BALANCE, order_id=task.order_id,
            details={"task_id": task.id, "execution_id": execution.id},
        )
        doer.balance = to_money(doer.balance) + earnings

        task.remaining_quantity = max(task.remaining_quantity - 1, 0)
        task.completed_count += 1
        if task.remaining_quantity == 0:
            ensure_transition("task", task.status, c.TASK_COMPLETED)
            task.status = c.TASK_COMPLETED

        if order is not None:
            _advance_order(db, order)

        if execution.social_account_id and execution.social_account:
            account = execution.social_account
            counter = ACCOUNT_COUNTERS.get(task.type)
            if counter:
                setattr(account, counter, (getattr(account, counter) or 0) + 1)
            account.total_earnings = to_money(account.total_earnings) + earnings

        execution.status = c.EXECUTION_APPROVED
        execution.earnings = earnings
        execution.reviewed_by = reviewer.id if reviewer else None
        execution.reviewed_at = utcnow()

        notify(db, doer.id, "task_approved", "Task approved",
               f"You earned {earnings} for completing a task.", execution.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(execution)
    logger.info(f"Execution {execution.id} approved by {reviewer.id if reviewer else 'auto-approval'}; paid {earnings}")
    return execution


def _advance_order(db: Session, order: Order) -> None:
    """Заказ уже заблокирован и активен: учитываем одно выполнение."""
    if order.status == c.ORDER_PENDING:
        ensure_transition("order", order.status, c.ORDER_PROCESSING)
        order.status = c.ORDER_PROCESSING
    order.remaining_count = max(order.remaining_count - 1, 0)
    if order.remaining_count == 0:
        ensure_transition("order", order.status, c.ORDER_COMPLETED)
        order.status = c.ORDER_COMPLETED
        notify(db, order.user_id, "order_status_update", "Order completed",
               f"Your {order.platform} {order.service} order is complete.", order.id)


def reject_execution(db: Session, execution_id: str, reviewer: User, reason: str) -> TaskExecution:
    try:
        execution = crud_task.get_execution_for_update(db, execution_id)
        if execution is None:
            raise ApiError.not_found("Submission not found")
        ensure_transition("execution", execution.status, c.EXECUTION_REJECTED)
        execution.status = c.EXECUTION_REJECTED
        execution.rejection_reason = reason
        execution.reviewed_by = reviewer.id
        execution.reviewed_at = utcnow()
        # Отклоненное выполнение не должно держать кулдаун
        execution.cooldown_ends_at = None
        notify(db, execution.user_id, "task_rejected", "Task rejected", reason, execution.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(execution)
    logger.info(f"Execution {execution.id} rejected by admin {reviewer.id}: {reason}")
    return execution


# --- Для админки ---

def get_paginated_tasks(db: Session, page: int, size: int, **filters) -> PaginatedTasks:
    skip = (page - 1) * size
    items = crud_task.get_tasks(db, skip=skip, limit=size, **filters)
    total_items = crud_task.count_tasks(db, **filters)
    total_pages = math.ceil(total_items / size) if total_items > 0 else 1
    return PaginatedTasks(total_items=total_items, total_pages=total_pages,
                          current_page=page, size=size, items=items)


def get_paginated_executions(db: Session, page: int, size: int, **filters) -> PaginatedExecutions:
    skip = (page - 1) * size
    items = crud_task.get_executions(db, skip=skip, limit=size, **filters)
    total_items = crud_task.count_executions(db, **filters)
    total_pages = math.ceil(total_items / size) if total_items > 0 else 1
    return PaginatedExecutions(total_items=total_items, total_pages=total_pages,
                               current_page=page, size=size, items=items)
