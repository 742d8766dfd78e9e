# app/routers/task.py

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.core.limiter import limiter
from app.dependencies import get_current_user, get_db
from app.models.user import User
from app.schemas.task import PaginatedTasks, TaskComplete, TaskDetails, TaskExecution, TaskStart
from app.services import task as task_service

router = APIRouter(prefix="/tasks")


@router.get("", response_model=PaginatedTasks)
@limiter.limit("30/minute")
def list_available_tasks(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    platform: str | None = Query(None),
    type: str | None = Query(None, description="like / follow / view / subscribe"),
    search: str | None = Query(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Задания, доступные текущему пользователю."""
    return task_service.list_available_tasks(db, current_user, page, limit, platform, type, search)


@router.get("/{task_id}", response_model=TaskDetails)
def get_task(task_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return task_service.get_task_details(db, current_user, task_id)


@router.post("/{task_id}/start", response_model=TaskExecution)
@limiter.limit("10/minute")
def start_task(
    request: Request,
    task_id: str,
    data: TaskStart | None = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Берет задание в работу (с учетом кулдауна и одноразовых заданий)."""
    return task_service.start_task(db, current_user, task_id, data or TaskStart())


@router.post("/{task_id}/complete", response_model=TaskExecution)
@limiter.limit("10/minute")
async def complete_task(
    request: Request,
    task_id: str,
    data: TaskComplete | None = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Отправляет выполнение задания на проверку."""
    proof = data.proof if data else {}
    return await task_service.complete_task(db, current_user, task_id, proof)
