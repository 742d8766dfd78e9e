# app/crud/task.py
from datetime import datetime
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.task import Task, TaskExecution


def get_task(db: Session, task_id: str) -> Task | None:
    return db.query(Task).filter(Task.id == task_id).first()

def get_task_for_update(db: Session, task_id: str) -> Task | None:
    return db.query(Task).filter(Task.id == task_id).with_for_update().populate_existing().first()

def get_tasks_by_order(db: Session, order_id: str) -> list[Task]:
    return db.query(Task).filter(Task.order_id == order_id).all()


def _apply_task_filters(query, status: str | None = None, statuses: tuple | None = None,
                        platform: str | None = None, type: str | None = None,
                        search: str | None = None, exclude_user_id: str | None = None,
                        exclude_task_ids: list | None = None, min_remaining: int | None = None):
    if status:
        query = query.filter(Task.status == status)
    if statuses:
        query = query.filter(Task.status.in_(statuses))
    if platform:
        query = query.filter(Task.platform == platform)
    if type:
        query = query.filter(Task.type == type)
    if search:
        query = query.filter(Task.target_url.ilike(f"%{search}%"))
    if exclude_user_id:
        query = query.filter(Task.user_id != exclude_user_id)
    if exclude_task_ids:
        query = query.filter(Task.id.notin_(exclude_task_ids))
    if min_remaining is not None:
        query = query.filter(Task.remaining_quantity >= min_remaining)
    return query

def get_tasks(db: Session, skip: int = 0, limit: int = 20, **filters) -> list[Task]:
    query = _apply_task_filters(db.query(Task), **filters)
    return query.order_by(Task.created_at.desc()).offset(skip).limit(limit).all()

def count_tasks(db: Session, **filters) -> int:
    return _apply_task_filters(db.query(func.count(Task.id)), **filters).scalar()


# --- Выполнения ---

def get_execution(db: Session, execution_id: str) -> TaskExecution | None:
    return db.query(TaskExecution).filter(TaskExecution.id == execution_id).first()

def get_execution_for_update(db: Session, execution_id: str) -> TaskExecution | None:
    """Выполнение с блокировкой строки: статус перечитывается под замком."""
    return db.query(TaskExecution).filter(TaskExecution.id == execution_id).with_for_update().populate_existing().first()

def get_open_executions_for_task(db: Session, task_id: str) -> list[TaskExecution]:
    """Выполнения, еще не получившие решения: в работе или на проверке."""
    return db.query(TaskExecution).filter(
        TaskExecution.task_id == task_id,
        TaskExecution.status.in_(("in_progress", "completed")),
    ).all()

def count_device_executions_since(db: Session, device_id: str, since: datetime) -> int:
    return db.query(func.count(TaskExecution.id)).filter(
        TaskExecution.device_id == device_id,
        TaskExecution.started_at >= since,
    ).scalar()

def get_user_executions_for_task(db: Session, user_id: str, task_id: str) -> list[TaskExecution]:
    return db.query(TaskExecution).filter(
        TaskExecution.user_id == user_id,
        TaskExecution.task_id == task_id,
    ).order_by(TaskExecution.started_at.desc()).all()

def get_open_execution(db: Session, user_id: str, task_id: str) -> TaskExecution | None:
    return db.query(TaskExecution).filter(
        TaskExecution.user_id == user_id,
        TaskExecution.task_id == task_id,
        TaskExecution.status == "in_progress",
    ).first()

def get_blocking_task_ids(db: Session, user_id: str, now: datetime, one_time_types: tuple) -> list[str]:
    """
    ID заданий, которые пользователь сейчас не может взять:
    открытое выполнение, одноразовое задание уже сделано (или на проверке),
    либо кулдаун еще не истек.
    """
    rows = db.query(TaskExecution.task_id, TaskExecution.status, TaskExecution.cooldown_ends_at, Task.type).join(
        Task, Task.id == TaskExecution.task_id
    ).filter(TaskExecution.user_id == user_id).all()

    blocked = set()
    for task_id, status, cooldown_ends_at, task_type in rows:
        if status == "in_progress":
            blocked.add(task_id)
        elif status in ("completed", "approved"):
            if task_type in one_time_types:
                blocked.add(task_id)
            elif cooldown_ends_at and cooldown_ends_at > now:
                blocked.add(task_id)
    return list(blocked)

def get_executions(db: Session, skip: int = 0, limit: int = 20, status: str | None = None,
                   user_id: str | None = None, task_id: str | None = None) -> list[TaskExecution]:
    query = db.query(TaskExecution)
    if status:
        query = query.filter(TaskExecution.status == status)
    if user_id:
        query = query.filter(TaskExecution.user_id == user_id)
    if task_id:
        query = query.filter(TaskExecution.task_id == task_id)
    return query.order_by(TaskExecution.completed_at.desc(), TaskExecution.started_at.desc()).offset(skip).limit(limit).all()

def count_executions(db: Session, status: str | None = None, user_id: str | None = None,
                     task_id: str | None = None) -> int:
    query = db.query(func.count(TaskExecution.id))
    if status:
        query = query.filter(TaskExecution.status == status)
    if user_id:
        query = query.filter(TaskExecution.user_id == user_id)
    if task_id:
        query = query.filter(TaskExecution.task_id == task_id)
    return query.scalar()

def execution_totals(db: Session, column, value: str, since: datetime | None = None) -> dict:
    """Сводка выполнений по устройству или соцаккаунту: всего, одобрено, заработок."""
    base = db.query(TaskExecution).filter(column == value)
    if since:
        base = base.filter(TaskExecution.started_at >= since)
    total = base.count()
    approved = base.filter(TaskExecution.status == "approved")
    approved_count = approved.count()
    earnings = approved.with_entities(func.coalesce(func.sum(TaskExecution.earnings), 0)).scalar()
    last_activity = base.with_entities(func.max(TaskExecution.started_at)).scalar()
    return {
        "total_tasks": total,
        "approved_tasks": approved_count,
        "earnings": earnings,
        "last_activity": last_activity,
    }
