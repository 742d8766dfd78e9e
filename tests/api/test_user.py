# tests/api/test_user.py

from httpx import AsyncClient

from app.core.security import verify_password
from app.models.session import Session as UserSession
from app.models.user import User
from app.services import session as session_service
from tests.conftest import TEST_PASSWORD, bearer


async def test_update_profile(client: AsyncClient, auth_headers: dict):
    response = await client.put(
        "/api/user/profile",
        json={"first_name": "Jane", "phone": "+905551112233"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["first_name"] == "Jane"
    assert data["last_name"] == "User"
    assert data["phone"] == "+905551112233"


async def test_update_profile_rejects_bad_phone(client: AsyncClient, auth_headers: dict):
    response = await client.put("/api/user/profile", json={"phone": "call me"}, headers=auth_headers)

    assert response.status_code == 400


async def test_change_password_revokes_other_sessions(client: AsyncClient, db_session, test_user: User,
                                                      auth_headers: dict):
    other = session_service.create_session(db_session, test_user)
    other_token = other.token

    response = await client.put(
        "/api/user/password",
        json={"current_password": TEST_PASSWORD, "new_password": "NewSecret456"},
        headers=auth_headers,
    )

    assert response.status_code == 204
    db_session.expire_all()
    assert verify_password("NewSecret456", db_session.get(User, test_user.id).password_hash)
    assert db_session.query(UserSession).filter(UserSession.user_id == test_user.id).count() == 1
    assert (await client.get("/api/user/profile", headers=bearer(other_token))).status_code == 401
    assert (await client.get("/api/user/profile", headers=auth_headers)).status_code == 200


async def test_change_password_wrong_current(client: AsyncClient, auth_headers: dict):
    response = await client.put(
        "/api/user/password",
        json={"current_password": "nope", "new_password": "NewSecret456"},
        headers=auth_headers,
    )

    assert response.status_code == 401


async def test_change_password_requires_strong_password(client: AsyncClient, auth_headers: dict):
    response = await client.put(
        "/api/user/password",
        json={"current_password": TEST_PASSWORD, "new_password": "alllowercase"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "new_password"


async def test_switch_mode(client: AsyncClient, auth_headers: dict):
    response = await client.put("/api/user/mode", json={"user_mode": "task_giver"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["user_mode"] == "task_giver"


async def test_settings_defaults_and_partial_update(client: AsyncClient, auth_headers: dict):
    defaults = await client.get("/api/user/settings", headers=auth_headers)
    assert defaults.json() == {
        "notifications": {"email": True, "browser": True},
        "privacy": {"hide_profile": False, "hide_stats": False},
        "language": "en",
    }

    response = await client.put(
        "/api/user/settings",
        json={"notifications": {"email": False}, "language": "tr"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["notifications"] == {"email": False, "browser": True}
    assert data["language"] == "tr"
    assert data["privacy"]["hide_profile"] is False


async def test_sessions_list_marks_current(client: AsyncClient, db_session, test_user: User, auth_headers: dict):
    session_service.create_session(db_session, test_user)

    response = await client.get("/api/user/sessions", headers=auth_headers)

    assert response.status_code == 200
    items = response.json()["items"]
    assert len(items) == 2
    assert sum(1 for item in items if item["is_current"]) == 1


async def test_logout_all(client: AsyncClient, db_session, test_user: User, auth_headers: dict):
    session_service.create_session(db_session, test_user)

    response = await client.post("/api/user/sessions/logout-all", headers=auth_headers)

    assert response.status_code == 204
    assert db_session.query(UserSession).filter(UserSession.user_id == test_user.id).count() == 0
