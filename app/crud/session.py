# app/crud/session.py
from datetime import datetime
from typing import Type

from sqlalchemy.orm import Session as DbSession

from app.models.session import AdminSession, Session


SessionModel = Type[Session] | Type[AdminSession]


def create_session(
    db: DbSession,
    model: SessionModel,
    user_id: str,
    token: str,
    expires_at: datetime,
    ip_address: str | None = None,
    user_agent: str | None = None,
):
    db_session = model(
        user_id=user_id,
        token=token,
        expires_at=expires_at,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.add(db_session)
    db.commit()
    db.refresh(db_session)
    return db_session

def get_session_by_token(db: DbSession, model: SessionModel, token: str):
    return db.query(model).filter(model.token == token).first()

def get_user_sessions(db: DbSession, model: SessionModel, user_id: str) -> list:
    return db.query(model).filter(model.user_id == user_id).order_by(model.last_activity.desc()).all()

def delete_session(db: DbSession, db_session) -> None:
    db.delete(db_session)
    db.commit()

def delete_session_by_token(db: DbSession, model: SessionModel, token: str) -> int:
    deleted = db.query(model).filter(model.token == token).delete(synchronize_session=False)
    db.commit()
    return deleted

def delete_user_sessions(db: DbSession, model: SessionModel, user_id: str) -> int:
    deleted = db.query(model).filter(model.user_id == user_id).delete(synchronize_session=False)
    db.commit()
    return deleted

def delete_expired_sessions(db: DbSession, model: SessionModel, now: datetime) -> int:
    deleted = db.query(model).filter(model.expires_at < now).delete(synchronize_session=False)
    db.commit()
    return deleted
