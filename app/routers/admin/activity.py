# app/routers/admin/activity.py

import math
from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.crud import activity_log as crud_activity_log
from app.dependencies import get_db
from app.schemas.admin import PaginatedActivityLogs

router = APIRouter()


@router.get("", response_model=PaginatedActivityLogs)
def get_activity_log(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    user_id: str | None = Query(None),
    scope: Literal["user", "admin"] | None = Query(None),
    resource: str | None = Query(None, description="Например: order, user, balance_request"),
    since: datetime | None = Query(None),
    db: Session = Depends(get_db),
):
    """[АДМИН] Журнал действий пользователей и администраторов, новые первыми."""
    filters = {"user_id": user_id, "scope": scope, "resource": resource, "since": since}
    active_filters = {k: v for k, v in filters.items() if v is not None}

    skip = (page - 1) * size
    items = crud_activity_log.get_logs(db, skip=skip, limit=size, **active_filters)
    total_items = crud_activity_log.count_logs(db, **active_filters)
    total_pages = math.ceil(total_items / size) if total_items > 0 else 1
    return PaginatedActivityLogs(
        total_items=total_items, total_pages=total_pages,
        current_page=page, size=size, items=items,
    )
