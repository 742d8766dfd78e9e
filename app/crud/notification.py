# app/crud/notification.py
from datetime import timedelta
from typing import List

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from app.models.notification import Notification
from app.utils.dates import utcnow


def create_notification(
    db: Session,
    user_id: str,
    type: str,
    title: str,
    message: str | None = None,
    related_entity_id: str | None = None,
    commit: bool = True,
) -> Notification:
    """Создает новое уведомление для пользователя."""
    db_notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        related_entity_id=related_entity_id,
    )
    db.add(db_notification)
    if commit:
        db.commit()
        db.refresh(db_notification)
    return db_notification

def get_notifications(
    db: Session,
    user_id: str,
    skip: int = 0,
    limit: int = 20,
    unread_only: bool = False
) -> List[Notification]:
    """Получает пагинированный список уведомлений."""
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read == False)
    return query.order_by(Notification.created_at.desc()).offset(skip).limit(limit).all()

def count_notifications(db: Session, user_id: str, unread_only: bool = False) -> int:
    """Считает уведомления с фильтром."""
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.is_read == False)
    return query.count()

def mark_notification_as_read(db: Session, user_id: str, notification_id: str) -> int:
    """Помечает конкретное уведомление как прочитанное. Возвращает число обновленных строк."""
    stmt = update(Notification).where(
        Notification.id == notification_id,
        Notification.user_id == user_id
    ).values(is_read=True)
    result = db.execute(stmt)
    db.commit()
    return result.rowcount

def mark_all_notifications_as_read(db: Session, user_id: str):
    """Помечает все уведомления пользователя как прочитанные."""
    stmt = update(Notification).where(
        Notification.user_id == user_id,
        Notification.is_read == False
    ).values(is_read=True)
    db.execute(stmt)
    db.commit()

def smart_delete_old_notifications(
    db: Session,
    read_older_than_days: int,
    any_older_than_days: int
) -> int:
    """Удаляет прочитанные старше первого порога и любые старше второго."""
    now = utcnow()
    read_threshold = now - timedelta(days=read_older_than_days)
    any_threshold = now - timedelta(days=any_older_than_days)

    result = db.query(Notification).filter(
        or_(
            (Notification.is_read == True) & (Notification.created_at < read_threshold),
            Notification.created_at < any_threshold,
        )
    ).delete(synchronize_session=False)

    db.commit()
    return result
