# app/dependencies.py

import logging
from typing import Callable, Iterator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core import constants as c
from app.core.exceptions import ApiError
from app.db.session import SessionLocal
from app.models.user import User
from app.services import session as session_service

# --- Инициализация логгера ---
logger = logging.getLogger(__name__)

# --- Схема аутентификации ---
# auto_error=False: отсутствие токена обрабатываем сами, чтобы вернуть 401, а не 403
bearer_scheme = HTTPBearer(auto_error=False)

# --- Управление сессией БД ---
def get_db_session_instance() -> Session:
    """Создает и возвращает экземпляр сессии БД."""
    return SessionLocal()

def get_db() -> Iterator[Session]:
    """
    Основная зависимость FastAPI для получения сессии БД.
    Это генератор, который корректно работает с `Depends`.
    """
    db = get_db_session_instance()
    try:
        yield db
    finally:
        db.close()


def get_client_info(request: Request) -> tuple[str | None, str | None]:
    """IP и User-Agent клиента для записи в сессию и журнал действий."""
    ip_address = request.client.host if request.client else None
    return ip_address, request.headers.get("user-agent")


def _extract_token(credentials: Optional[HTTPAuthorizationCredentials]) -> str:
    if credentials is None or not credentials.credentials:
        logger.warning("Request without bearer token rejected.")
        raise ApiError.unauthorized("No token provided")
    return credentials.credentials


# --- Зависимости аутентификации и авторизации ---

def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    ОБЯЗАТЕЛЬНАЯ зависимость.
    Требует токен с живой сессией. Если его нет, сессия истекла или пользователь
    деактивирован - вызывает ошибку 401.
    """
    token = _extract_token(credentials)
    db_session = session_service.validate_session(db, token)

    user = db_session.user
    if user is None or not user.is_active:
        logger.warning(f"Session {db_session.id} belongs to a missing or inactive user.")
        raise ApiError.unauthorized("User not found or inactive")

    request.state.user = user
    request.state.session = db_session
    logger.debug(f"Authenticated user ID: {user.id}")
    return user


def get_current_session(request: Request, current_user: User = Depends(get_current_user)):
    """Сессия текущего запроса (уже проверенная в get_current_user)."""
    return request.state.session


def get_current_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Зависимость для защиты админских эндпоинтов.
    Проверяет админскую сессию и то, что у пользователя административная роль.
    """
    token = _extract_token(credentials)
    admin_session = session_service.validate_admin_session(db, token)

    user = admin_session.user
    if user is None or not user.is_active:
        logger.warning(f"Admin session {admin_session.id} belongs to a missing or inactive user.")
        raise ApiError.unauthorized("User not found or inactive")
    if user.role not in c.ADMIN_ROLES:
        logger.warning(f"Permission denied for user {user.id} with role '{user.role}'.")
        raise ApiError.forbidden("Admin access required")

    request.state.user = user
    request.state.session = admin_session
    return user


def require_roles(*roles: str) -> Callable[..., User]:
    """
    Фабрика зависимостей: пропускает только администраторов с одной из указанных ролей.
    """
    def dependency(current_admin: User = Depends(get_current_admin)) -> User:
        if current_admin.role not in roles:
            logger.warning(
                f"Permission denied for admin {current_admin.id}: role '{current_admin.role}' not in {roles}"
            )
            raise ApiError.forbidden("Insufficient permissions")
        return current_admin
    return dependency


# Готовые уровни доступа
require_admin_or_above = require_roles(c.ROLE_ADMIN, c.ROLE_SUPER_ADMIN)
require_super_admin = require_roles(c.ROLE_SUPER_ADMIN)
