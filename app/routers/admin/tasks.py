# app/routers/admin/tasks.py

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.dependencies import get_current_admin, get_db
from app.models.user import User
from app.schemas.order import Platform
from app.schemas.task import ExecutionReject, PaginatedExecutions, PaginatedTasks, Task, TaskExecution
from app.services import activity as activity_service
from app.services import task as task_service

router = APIRouter()


@router.get("", response_model=PaginatedTasks)
def get_tasks_list(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    status_filter: Literal["available", "in_progress", "completed", "rejected"] | None = Query(None, alias="status"),
    platform: Platform | None = Query(None),
    task_type: Literal["like", "follow", "view", "subscribe"] | None = Query(None, alias="type"),
    search: str | None = Query(None, description="Поиск по ссылке"),
    db: Session = Depends(get_db),
):
    """[АДМИН] Все задания с фильтрами по статусу, платформе и типу."""
    filters = {
        "status": status_filter,
        "platform": platform,
        "type": task_type,
        "search": search,
    }
    active_filters = {k: v for k, v in filters.items() if v is not None}
    return task_service.get_paginated_tasks(db, page, size, **active_filters)


@router.get("/submissions", response_model=PaginatedExecutions)
def get_submissions(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    status_filter: Literal["in_progress", "completed", "approved", "rejected"] = Query("completed", alias="status"),
    user_id: str | None = Query(None),
    task_id: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """
    [АДМИН] Очередь выполнений на проверку. По умолчанию показывает
    отправленные (completed), но еще не рассмотренные.
    """
    filters = {"status": status_filter, "user_id": user_id, "task_id": task_id}
    active_filters = {k: v for k, v in filters.items() if v is not None}
    return task_service.get_paginated_executions(db, page, size, **active_filters)


@router.get("/{task_id}", response_model=Task)
def get_task(task_id: str, db: Session = Depends(get_db)):
    return task_service.get_task(db, task_id)


@router.put("/submissions/{execution_id}/approve", response_model=TaskExecution)
def approve_submission(
    execution_id: str,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """[АДМИН] Одобряет выполнение и начисляет исполнителю оплату."""
    execution = task_service.approve_execution(db, execution_id, admin)
    activity_service.log_admin_action(db, request, admin, "task_execution", "approve", execution_id,
                                      {"earnings": float(execution.earnings or 0)})
    return execution


@router.put("/submissions/{execution_id}/reject", response_model=TaskExecution)
def reject_submission(
    execution_id: str,
    data: ExecutionReject,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """[АДМИН] Отклоняет выполнение без оплаты."""
    execution = task_service.reject_execution(db, execution_id, admin, data.reason)
    activity_service.log_admin_action(db, request, admin, "task_execution", "reject", execution_id,
                                      {"reason": data.reason})
    return execution
