# app/services/user.py

import copy
import logging

from sqlalchemy.orm import Session

from app.core import constants as c
from app.core.exceptions import ApiError
from app.core.security import hash_password, verify_password
from app.models.session import Session as UserSession
from app.models.user import User
from app.schemas.user import (
    ModeUpdate, PasswordChange, ProfileUpdate, SessionInfo, UserSettings, UserSettingsUpdate,
)
from app.services import session as session_service

logger = logging.getLogger(__name__)


def deep_merge(base: dict, updates: dict) -> dict:
    """Рекурсивно накладывает updates на копию base."""
    result = copy.deepcopy(base)
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def update_profile(db: Session, user: User, data: ProfileUpdate) -> User:
    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.id} updated profile fields: {list(changes)}")
    return user


def change_password(db: Session, user: User, data: PasswordChange, current_session: UserSession) -> None:
    """Меняет пароль и завершает все остальные сессии пользователя."""
    if not verify_password(data.current_password, user.password_hash):
        logger.warning(f"User {user.id} supplied a wrong current password.")
        raise ApiError.unauthorized("Current password is incorrect")

    user.password_hash = hash_password(data.new_password)
    db.query(UserSession).filter(
        UserSession.user_id == user.id,
        UserSession.id != current_session.id,
    ).delete(synchronize_session=False)
    db.commit()
    logger.info(f"User {user.id} changed password; other sessions revoked.")


def change_mode(db: Session, user: User, data: ModeUpdate) -> User:
    user.user_mode = data.user_mode
    db.commit()
    db.refresh(user)
    return user


def get_settings(user: User) -> UserSettings:
    merged = deep_merge(c.DEFAULT_USER_SETTINGS, user.settings or {})
    return UserSettings.model_validate(merged)


def update_settings(db: Session, user: User, data: UserSettingsUpdate) -> UserSettings:
    current = get_settings(user).model_dump()
    merged = deep_merge(current, data.model_dump(exclude_none=True))
    validated = UserSettings.model_validate(merged)
    # Новый объект, чтобы SQLAlchemy заметил изменение JSON-колонки
    user.settings = validated.model_dump()
    db.commit()
    return validated


def list_sessions(db: Session, user: User, current_session: UserSession) -> list[SessionInfo]:
    sessions = session_service.get_user_sessions(db, user.id)
    return [
        SessionInfo.model_validate(s).model_copy(update={"is_current": s.id == current_session.id})
        for s in sessions
    ]
