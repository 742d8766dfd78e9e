# app/services/auth.py

import logging

from sqlalchemy.orm import Session

from app.core import constants as c
from app.core.exceptions import ApiError
from app.core.security import hash_password, verify_password
from app.crud import user as crud_user
from app.models.user import User
from app.schemas.admin import AdminAuthResponse
from app.schemas.user import AuthResponse, UserRegister
from app.services import session as session_service
from app.services import settings as settings_service
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)


async def register(
    db: Session,
    data: UserRegister,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> AuthResponse:
    """
    Регистрация: проверка уникальности email/username, хеширование пароля,
    создание пользователя и первой сессии.
    """
    platform_settings = await settings_service.get_platform_settings(db)
    if not platform_settings.registration_enabled:
        raise ApiError.forbidden("Registration is currently disabled")

    existing = crud_user.get_user_by_email_or_username(db, data.email, data.username)
    if existing:
        field = "email" if existing.email == data.email.lower() else "username"
        logger.info(f"Registration rejected: {field} is already taken.")
        raise ApiError.bad_request(
            "User already exists",
            [{"field": field, "message": f"This {field} is already registered"}],
        )

    user = crud_user.create_user(
        db,
        email=data.email,
        username=data.username,
        password_hash=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
    )
    logger.info(f"New user registered: {user.id} ({user.email})")

    db_session = session_service.create_session(db, user, ip_address, user_agent)
    return AuthResponse(token=db_session.token, expires_at=db_session.expires_at, user=user)


def authenticate(db: Session, email: str, password: str) -> User:
    """Проверяет пару email/пароль. Любая ошибка - одинаковый 401, чтобы не раскрывать существование email."""
    user = crud_user.get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login attempt for email: {email}")
        raise ApiError.unauthorized("Invalid credentials")
    if not user.is_active:
        logger.warning(f"Login attempt for deactivated user {user.id}")
        raise ApiError.unauthorized("Invalid credentials")
    return user


def login(
    db: Session,
    email: str,
    password: str,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> AuthResponse:
    user = authenticate(db, email, password)
    user.last_login = utcnow()
    db.commit()

    db_session = session_service.create_session(db, user, ip_address, user_agent)
    logger.info(f"User {user.id} logged in.")
    return AuthResponse(token=db_session.token, expires_at=db_session.expires_at, user=user)


def logout(db: Session, token: str) -> None:
    session_service.invalidate_session(db, token)


def admin_login(
    db: Session,
    email: str,
    password: str,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> AdminAuthResponse:
    """Вход в админ-панель: тот же пользователь, но нужна административная роль."""
    user = authenticate(db, email, password)
    if user.role not in c.ADMIN_ROLES:
        logger.warning(f"Non-admin user {user.id} tried to log into the admin panel.")
        raise ApiError.unauthorized("Invalid credentials")

    user.last_login = utcnow()
    db.commit()

    admin_session = session_service.create_admin_session(db, user, ip_address, user_agent)
    logger.info(f"Admin {user.id} ({user.role}) logged in.")
    return AdminAuthResponse(token=admin_session.token, expires_at=admin_session.expires_at, user=user)
