# app/core/security.py

import uuid
from datetime import datetime, timedelta

import bcrypt
from jose import jwt

from app.core.config import settings
from app.utils.dates import utcnow

SCOPE_USER = "user"
SCOPE_ADMIN = "admin"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Невалидный хеш в БД
        return False


def create_access_token(
    data: dict,
    expires_delta: timedelta | None = None,
    scope: str = SCOPE_USER,
) -> tuple[str, datetime]:
    """Создает JWT токен. Возвращает сам токен и момент его истечения (naive UTC)."""
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    # jti делает каждый токен уникальным, даже если выпущен в ту же секунду
    to_encode.update({"exp": expire, "scope": scope, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM), expire


def decode_access_token(token: str) -> dict:
    """Проверяет подпись и срок токена. Бросает jose.JWTError при невалидном токене."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
