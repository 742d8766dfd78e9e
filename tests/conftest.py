# tests/conftest.py
import os

# Настройки должны быть выставлены до первого импорта app.*
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTO_CREATE_TABLES"] = "false"

from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

import app.models  # noqa: F401  Регистрирует все модели в метаданных
from app.core.redis import redis_client
from app.core.security import hash_password
from app.db.session import Base, SessionLocal, engine
from app.dependencies import get_db
from app.main import app
from app.models.transaction import Transaction
from app.models.user import User
from app.services import session as session_service

TEST_PASSWORD = "Secret123"


@pytest.fixture(autouse=True)
def mock_redis(mocker):
    """Redis в тестах не нужен: кеш всегда пуст, запись молча проходит."""
    mocker.patch.object(redis_client, "get", AsyncMock(return_value=None))
    mocker.patch.object(redis_client, "set", AsyncMock(return_value=True))
    mocker.patch.object(redis_client, "delete", AsyncMock(return_value=1))
    return redis_client


@pytest.fixture(scope="function")
def db_session() -> Session:
    """
    Фикстура для создания чистой базы данных для каждого теста.
    In-memory SQLite на StaticPool: тест и приложение видят одно и то же соединение.
    """
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
async def client(db_session: Session):
    """HTTP-клиент поверх ASGI-приложения; запросы используют сессию БД теста."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def make_user(db: Session, email: str, username: str, role: str = "user",
              balance: str = "0", user_mode: str = "task_doer") -> User:
    user = User(
        email=email,
        username=username,
        password_hash=hash_password(TEST_PASSWORD),
        first_name="Test",
        last_name="User",
        role=role,
        user_mode=user_mode,
        balance=Decimal(balance),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def add_completed_transaction(db: Session, user: User, type: str, amount: str, **fields) -> Transaction:
    transaction = Transaction(user_id=user.id, type=type, amount=Decimal(amount), status="completed", **fields)
    db.add(transaction)
    db.commit()
    return transaction


@pytest.fixture
def test_user(db_session: Session) -> User:
    return make_user(db_session, "doer@example.com", "doer", balance="100.00")


@pytest.fixture
def other_user(db_session: Session) -> User:
    return make_user(db_session, "giver@example.com", "giver", balance="500.00", user_mode="task_giver")


@pytest.fixture
def admin_user(db_session: Session) -> User:
    return make_user(db_session, "admin@example.com", "admin", role="admin")


@pytest.fixture
def super_admin_user(db_session: Session) -> User:
    return make_user(db_session, "root@example.com", "root", role="super_admin")


@pytest.fixture
def moderator_user(db_session: Session) -> User:
    return make_user(db_session, "mod@example.com", "moderator", role="moderator")


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(db_session: Session, test_user: User) -> dict:
    db_session_row = session_service.create_session(db_session, test_user)
    return bearer(db_session_row.token)


@pytest.fixture
def other_auth_headers(db_session: Session, other_user: User) -> dict:
    return bearer(session_service.create_session(db_session, other_user).token)


@pytest.fixture
def admin_auth_headers(db_session: Session, admin_user: User) -> dict:
    return bearer(session_service.create_admin_session(db_session, admin_user).token)


@pytest.fixture
def super_admin_auth_headers(db_session: Session, super_admin_user: User) -> dict:
    return bearer(session_service.create_admin_session(db_session, super_admin_user).token)


@pytest.fixture
def moderator_auth_headers(db_session: Session, moderator_user: User) -> dict:
    return bearer(session_service.create_admin_session(db_session, moderator_user).token)


@pytest.fixture
def expire_session(db_session: Session):
    """Сдвигает срок жизни сессии в прошлое."""
    def _expire(db_row):
        db_row.expires_at = db_row.expires_at - timedelta(days=30)
        db_session.commit()
    return _expire
