# tests/api/test_notifications.py

from httpx import AsyncClient

from app.crud import notification as crud_notification
from app.models.user import User


def seed(db_session, user: User, count: int = 3):
    return [
        crud_notification.create_notification(db_session, user.id, "balance_update", f"Notice {i}")
        for i in range(count)
    ]


async def test_list_and_unread_filter(client: AsyncClient, db_session, test_user: User, auth_headers: dict):
    notifications = seed(db_session, test_user)

    read = await client.post(f"/api/notifications/{notifications[0].id}/read", headers=auth_headers)
    everything = await client.get("/api/notifications", headers=auth_headers)
    unread = await client.get("/api/notifications", params={"unread_only": True}, headers=auth_headers)

    assert read.status_code == 204
    assert everything.json()["total_items"] == 3
    assert unread.json()["total_items"] == 2


async def test_read_foreign_notification(client: AsyncClient, db_session, other_user: User, auth_headers: dict):
    foreign = seed(db_session, other_user, count=1)[0]

    response = await client.post(f"/api/notifications/{foreign.id}/read", headers=auth_headers)

    assert response.status_code == 404


async def test_read_all(client: AsyncClient, db_session, test_user: User, auth_headers: dict):
    seed(db_session, test_user)

    response = await client.post("/api/notifications/read-all", headers=auth_headers)
    unread = await client.get("/api/notifications", params={"unread_only": True}, headers=auth_headers)

    assert response.status_code == 204
    assert unread.json()["total_items"] == 0
