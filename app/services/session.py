# app/services/session.py

import logging
from datetime import timedelta

from jose import JWTError
from sqlalchemy.orm import Session as DbSession

from app.core.config import settings
from app.core.exceptions import ApiError
from app.core.security import SCOPE_ADMIN, SCOPE_USER, create_access_token, decode_access_token
from app.crud import session as crud_session
from app.db.session import SessionLocal
from app.models.session import AdminSession, Session
from app.models.user import User
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)


def _issue(db: DbSession, model, scope: str, expire_minutes: int, user: User,
           ip_address: str | None, user_agent: str | None):
    token, expires_at = create_access_token(
        {"sub": user.id}, expires_delta=timedelta(minutes=expire_minutes), scope=scope
    )
    return crud_session.create_session(
        db, model, user_id=user.id, token=token, expires_at=expires_at,
        ip_address=ip_address, user_agent=user_agent,
    )


def _validate(db: DbSession, model, scope: str, token: str):
    """
    Проверка токена по таблице сессий:
    нет записи -> 401; запись истекла -> удаляем и 401; подпись/scope не сходятся -> 401.
    """
    db_session = crud_session.get_session_by_token(db, model, token)
    if db_session is None:
        logger.warning(f"{scope} token without a session was rejected.")
        raise ApiError.unauthorized("Invalid session")

    now = utcnow()
    if db_session.expires_at <= now:
        logger.info(f"{scope} session {db_session.id} of user {db_session.user_id} expired, removing it.")
        crud_session.delete_session(db, db_session)
        raise ApiError.unauthorized("Session expired")

    try:
        payload = decode_access_token(token)
    except JWTError as e:
        logger.warning(f"JWT error for {scope} session {db_session.id}: {e}")
        raise ApiError.unauthorized("Invalid token")

    if payload.get("sub") != db_session.user_id or payload.get("scope") != scope:
        logger.warning(f"Token payload does not match {scope} session {db_session.id}.")
        raise ApiError.unauthorized("Invalid token")

    db_session.last_activity = now
    db.commit()
    return db_session


# --- Сессии пользовательского приложения ---

def create_session(db: DbSession, user: User, ip_address: str | None = None,
                   user_agent: str | None = None) -> Session:
    return _issue(db, Session, SCOPE_USER, settings.ACCESS_TOKEN_EXPIRE_MINUTES, user, ip_address, user_agent)

def validate_session(db: DbSession, token: str) -> Session:
    return _validate(db, Session, SCOPE_USER, token)

def invalidate_session(db: DbSession, token: str) -> bool:
    return crud_session.delete_session_by_token(db, Session, token) > 0

def invalidate_all_user_sessions(db: DbSession, user_id: str) -> int:
    deleted = crud_session.delete_user_sessions(db, Session, user_id)
    logger.info(f"Invalidated {deleted} sessions of user {user_id}.")
    return deleted

def get_user_sessions(db: DbSession, user_id: str) -> list[Session]:
    return crud_session.get_user_sessions(db, Session, user_id)


# --- Сессии админ-панели ---

def create_admin_session(db: DbSession, user: User, ip_address: str | None = None,
                         user_agent: str | None = None) -> AdminSession:
    return _issue(db, AdminSession, SCOPE_ADMIN, settings.ADMIN_ACCESS_TOKEN_EXPIRE_MINUTES, user, ip_address, user_agent)

def validate_admin_session(db: DbSession, token: str) -> AdminSession:
    return _validate(db, AdminSession, SCOPE_ADMIN, token)

def invalidate_admin_session(db: DbSession, token: str) -> bool:
    return crud_session.delete_session_by_token(db, AdminSession, token) > 0

def invalidate_all_admin_sessions(db: DbSession, user_id: str) -> int:
    return crud_session.delete_user_sessions(db, AdminSession, user_id)


def purge_expired_sessions(db: DbSession) -> int:
    now = utcnow()
    return (
        crud_session.delete_expired_sessions(db, Session, now)
        + crud_session.delete_expired_sessions(db, AdminSession, now)
    )


def cleanup_expired_sessions_task():
    """Фоновая задача: удаляет истекшие пользовательские и админские сессии."""
    logger.info("--- Starting scheduled job: Cleanup of Expired Sessions ---")
    with SessionLocal() as db:
        try:
            deleted_count = purge_expired_sessions(db)
            logger.info(f"Removed {deleted_count} expired sessions.")
        except Exception:
            logger.error("An error occurred during session cleanup task", exc_info=True)
            db.rollback()
    logger.info("--- Finished scheduled job: Cleanup of Expired Sessions ---")
