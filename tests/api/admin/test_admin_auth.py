# tests/api/admin/test_admin_auth.py

from httpx import AsyncClient

from app.models.session import AdminSession
from app.models.user import User
from app.services import session as session_service
from tests.conftest import TEST_PASSWORD, bearer


async def test_admin_login_and_me(client: AsyncClient, admin_user: User):
    response = await client.post("/api/admin/auth/login", json={"email": admin_user.email, "password": TEST_PASSWORD})

    assert response.status_code == 200
    token = response.json()["token"]
    me = await client.get("/api/admin/auth/me", headers=bearer(token))
    assert me.status_code == 200
    assert me.json()["role"] == "admin"


async def test_regular_user_cannot_log_in(client: AsyncClient, test_user: User):
    response = await client.post("/api/admin/auth/login", json={"email": test_user.email, "password": TEST_PASSWORD})

    assert response.status_code == 401


async def test_user_token_is_not_an_admin_token(client: AsyncClient, auth_headers: dict):
    response = await client.get("/api/admin/dashboard/overview", headers=auth_headers)

    assert response.status_code == 401


async def test_missing_token(client: AsyncClient, db_session):
    response = await client.get("/api/admin/users")

    assert response.status_code == 401


async def test_demoted_admin_is_forbidden(client: AsyncClient, db_session, admin_user: User,
                                          admin_auth_headers: dict):
    admin_user.role = "user"
    db_session.commit()

    response = await client.get("/api/admin/users", headers=admin_auth_headers)

    assert response.status_code == 403


async def test_expired_admin_session_is_removed(client: AsyncClient, db_session, admin_user: User,
                                                expire_session):
    row = session_service.create_admin_session(db_session, admin_user)
    token, session_id = row.token, row.id
    expire_session(row)

    response = await client.get("/api/admin/auth/me", headers=bearer(token))

    assert response.status_code == 401
    db_session.expire_all()
    assert db_session.get(AdminSession, session_id) is None


async def test_admin_logout(client: AsyncClient, admin_auth_headers: dict):
    response = await client.post("/api/admin/auth/logout", headers=admin_auth_headers)
    again = await client.get("/api/admin/auth/me", headers=admin_auth_headers)

    assert response.status_code == 204
    assert again.status_code == 401
