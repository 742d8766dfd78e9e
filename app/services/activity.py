# app/services/activity.py

import logging
from typing import Any

from fastapi import Request
from sqlalchemy.orm import Session

from app.crud import activity_log as crud_activity_log
from app.models.user import User

logger = logging.getLogger(__name__)


def log_action(
    db: Session,
    request: Request | None,
    user: User | None,
    resource: str,
    action: str,
    resource_id: str | None = None,
    details: dict[str, Any] | None = None,
    scope: str = "user",
) -> None:
    """Пишет действие в журнал. Ошибка записи журнала не должна ломать основной запрос."""
    ip_address = request.client.host if request is not None and request.client else None
    user_agent = request.headers.get("user-agent") if request is not None else None
    try:
        crud_activity_log.create_log(
            db,
            user_id=user.id if user else None,
            scope=scope,
            resource=resource,
            action=action,
            resource_id=resource_id,
            details=details,
            ip_address=ip_address,
            user_agent=user_agent,
        )
    except Exception:
        logger.error(f"Failed to write activity log {scope}:{resource}:{action}", exc_info=True)
        db.rollback()
    logger.info(f"[{scope}] user={user.id if user else None} {resource}.{action} id={resource_id}")


def log_admin_action(db: Session, request: Request | None, admin: User, resource: str, action: str,
                     resource_id: str | None = None, details: dict[str, Any] | None = None) -> None:
    log_action(db, request, admin, resource, action, resource_id, details, scope="admin")
