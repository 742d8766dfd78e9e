# tests/api/test_auth.py

from httpx import AsyncClient

from app.crud import platform_setting as crud_platform_setting
from app.models.session import Session as UserSession
from app.models.user import User
from app.services import session as session_service
from tests.conftest import TEST_PASSWORD, bearer

REGISTER_PAYLOAD = {
    "email": "new@example.com",
    "password": "Secret123",
    "first_name": "New",
    "last_name": "User",
    "username": "newbie",
}


async def test_register_returns_usable_token(client: AsyncClient, db_session):
    response = await client.post("/api/auth/register", json=REGISTER_PAYLOAD)

    assert response.status_code == 201
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "new@example.com"
    assert data["user"]["role"] == "user"
    assert data["user"]["balance"] == 0

    me = await client.get("/api/auth/validate", headers=bearer(data["token"]))
    assert me.status_code == 200
    assert me.json()["username"] == "newbie"


async def test_register_duplicate_email_is_rejected(client: AsyncClient, db_session, test_user: User):
    payload = {**REGISTER_PAYLOAD, "email": test_user.email}

    response = await client.post("/api/auth/register", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Bad Request"
    assert body["message"] == "User already exists"
    assert body["details"][0]["field"] == "email"
    assert db_session.query(User).filter(User.email == test_user.email).count() == 1
    assert db_session.query(User).filter(User.username == "newbie").count() == 0


async def test_register_validation_error_envelope(client: AsyncClient, db_session):
    payload = {**REGISTER_PAYLOAD, "email": "not-an-email", "password": "123"}

    response = await client.post("/api/auth/register", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation Error"
    fields = {item["field"] for item in body["details"]}
    assert {"email", "password"} <= fields


async def test_register_disabled_by_platform_settings(client: AsyncClient, db_session):
    crud_platform_setting.set_values(db_session, {"registration_enabled": False})

    response = await client.post("/api/auth/register", json=REGISTER_PAYLOAD)

    assert response.status_code == 403
    assert db_session.query(User).count() == 0


async def test_login_success(client: AsyncClient, test_user: User):
    response = await client.post("/api/auth/login", json={"email": test_user.email, "password": TEST_PASSWORD})

    assert response.status_code == 200
    token = response.json()["token"]
    profile = await client.get("/api/user/profile", headers=bearer(token))
    assert profile.status_code == 200
    assert profile.json()["id"] == test_user.id


async def test_login_wrong_password(client: AsyncClient, test_user: User):
    response = await client.post("/api/auth/login", json={"email": test_user.email, "password": "Wrong123"})

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized", "message": "Invalid credentials"}


async def test_login_inactive_user(client: AsyncClient, db_session, test_user: User):
    test_user.is_active = False
    db_session.commit()

    response = await client.post("/api/auth/login", json={"email": test_user.email, "password": TEST_PASSWORD})

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized", "message": "Invalid credentials"}


async def test_request_without_token(client: AsyncClient, db_session):
    response = await client.get("/api/user/profile")

    assert response.status_code == 401
    assert response.json()["message"] == "No token provided"


async def test_unknown_token_is_rejected(client: AsyncClient, db_session):
    response = await client.get("/api/user/profile", headers=bearer("garbage"))

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid session"


async def test_expired_session_is_deleted(client: AsyncClient, db_session, test_user: User, expire_session):
    row = session_service.create_session(db_session, test_user)
    token, session_id = row.token, row.id
    expire_session(row)

    response = await client.get("/api/user/profile", headers=bearer(token))

    assert response.status_code == 401
    assert response.json()["message"] == "Session expired"
    db_session.expire_all()
    assert db_session.get(UserSession, session_id) is None


async def test_admin_token_is_not_a_user_token(client: AsyncClient, admin_auth_headers: dict):
    response = await client.get("/api/user/profile", headers=admin_auth_headers)

    assert response.status_code == 401


async def test_logout_invalidates_token(client: AsyncClient, auth_headers: dict):
    response = await client.post("/api/auth/logout", headers=auth_headers)
    assert response.status_code == 204

    again = await client.get("/api/auth/validate", headers=auth_headers)
    assert again.status_code == 401
