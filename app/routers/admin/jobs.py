# app/routers/admin/jobs.py

import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.exceptions import ApiError
from app.dependencies import get_db, require_admin_or_above
from app.models.user import User
from app.schemas.admin import JobInfo, JobRunRequest, JobRunResponse
from app.services import activity as activity_service
from app.tasks_registry import TASKS, get_tasks_list

logger = logging.getLogger(__name__)

# Префикс /jobs будет добавлен на уровне выше в admin/__init__.py
router = APIRouter()


@router.get("", response_model=List[JobInfo])
def get_jobs_list_endpoint():
    """
    [АДМИН] Возвращает список всех доступных для ручного запуска фоновых задач.
    """
    return get_tasks_list()


@router.post("/run", response_model=JobRunResponse, status_code=status.HTTP_202_ACCEPTED)
def run_job_endpoint(
    request_data: JobRunRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin_or_above),
    db: Session = Depends(get_db),
):
    """
    [АДМИН] Запускает одну фоновую задачу или все сразу ('all').
    Каждая задача сама открывает сессию БД, поэтому сессия запроса ей не передается.
    """
    job_name = request_data.job_name

    if job_name == "all":
        scheduled = list(TASKS)
        message = "All background jobs have been scheduled to run."
    elif job_name in TASKS:
        scheduled = [job_name]
        message = f"Job '{job_name}' has been scheduled to run."
    else:
        raise ApiError.not_found(f"Job '{job_name}' not found")

    for name in scheduled:
        background_tasks.add_task(TASKS[name]["function"])

    logger.info(f"Admin {admin.id} manually triggered jobs: {scheduled}")
    activity_service.log_admin_action(db, request, admin, "job", "run", None, {"jobs": scheduled})
    return JobRunResponse(status="accepted", message=message, jobs=scheduled)
