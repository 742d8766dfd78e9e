# app/crud/activity_log.py
from datetime import datetime
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.activity_log import ActivityLog


def create_log(db: Session, **fields) -> ActivityLog:
    entry = ActivityLog(**fields)
    db.add(entry)
    db.commit()
    return entry


def _apply_filters(query, user_id: str | None = None, scope: str | None = None,
                   resource: str | None = None, since: datetime | None = None):
    if user_id:
        query = query.filter(ActivityLog.user_id == user_id)
    if scope:
        query = query.filter(ActivityLog.scope == scope)
    if resource:
        query = query.filter(ActivityLog.resource == resource)
    if since:
        query = query.filter(ActivityLog.created_at >= since)
    return query

def get_logs(db: Session, skip: int = 0, limit: int = 50, **filters) -> list[ActivityLog]:
    return _apply_filters(db.query(ActivityLog), **filters).order_by(
        ActivityLog.created_at.desc()
    ).offset(skip).limit(limit).all()

def count_logs(db: Session, **filters) -> int:
    return _apply_filters(db.query(func.count(ActivityLog.id)), **filters).scalar()
