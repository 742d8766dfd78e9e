# tests/api/test_tasks.py

from decimal import Decimal

import pytest
from httpx import AsyncClient

from app.crud import platform_setting as crud_platform_setting
from app.models.order import Order
from app.models.task import Task, TaskExecution
from app.models.user import User
from app.schemas.order import OrderCreate
from app.services import order as order_service


def place_order(db, user, service="likes", quantity=10):
    order = order_service.create_order(db, user, OrderCreate(
        platform="instagram", service=service, target_url="https://instagram.com/p/abc123", quantity=quantity,
    ))
    return db.query(Task).filter(Task.order_id == order.id).one()


@pytest.fixture
def like_task(db_session, other_user: User) -> Task:
    return place_order(db_session, other_user)


@pytest.fixture
def follow_task(db_session, other_user: User) -> Task:
    return place_order(db_session, other_user, service="followers")


async def test_available_tasks_exclude_own(client: AsyncClient, like_task: Task, auth_headers: dict,
                                           other_auth_headers: dict):
    doer_view = await client.get("/api/tasks", headers=auth_headers)
    giver_view = await client.get("/api/tasks", headers=other_auth_headers)

    assert doer_view.status_code == 200
    assert [t["id"] for t in doer_view.json()["items"]] == [like_task.id]
    assert giver_view.json()["total_items"] == 0


async def test_start_own_task_is_rejected(client: AsyncClient, like_task: Task, other_auth_headers: dict):
    response = await client.post(f"/api/tasks/{like_task.id}/start", headers=other_auth_headers)

    assert response.status_code == 400


async def test_start_twice_is_rejected(client: AsyncClient, db_session, like_task: Task, auth_headers: dict):
    first = await client.post(f"/api/tasks/{like_task.id}/start", json={}, headers=auth_headers)
    second = await client.post(f"/api/tasks/{like_task.id}/start", json={}, headers=auth_headers)

    assert first.status_code == 200
    assert first.json()["status"] == "in_progress"
    assert second.status_code == 400
    assert second.json()["message"] == "Task already started"
    db_session.expire_all()
    assert db_session.get(Task, like_task.id).status == "in_progress"


async def test_complete_without_start(client: AsyncClient, like_task: Task, auth_headers: dict):
    response = await client.post(f"/api/tasks/{like_task.id}/complete", json={"proof": {}}, headers=auth_headers)

    assert response.status_code == 404


async def test_complete_waits_for_review(client: AsyncClient, db_session, test_user: User, like_task: Task,
                                         auth_headers: dict):
    await client.post(f"/api/tasks/{like_task.id}/start", headers=auth_headers)

    response = await client.post(
        f"/api/tasks/{like_task.id}/complete",
        json={"proof": {"screenshot": "https://img.example.com/1.png"}},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "completed"
    assert data["proof"] == {"screenshot": "https://img.example.com/1.png"}
    db_session.expire_all()
    assert db_session.get(User, test_user.id).balance == Decimal("100.00")


async def test_auto_approve_pays_and_advances_order(client: AsyncClient, db_session, test_user: User,
                                                    like_task: Task, auth_headers: dict):
    crud_platform_setting.set_values(db_session, {"auto_approve_task_submissions": True})
    await client.post(f"/api/tasks/{like_task.id}/start", headers=auth_headers)

    response = await client.post(f"/api/tasks/{like_task.id}/complete", json={"proof": {}}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "approved"
    assert response.json()["earnings"] == 0.3

    db_session.expire_all()
    assert db_session.get(User, test_user.id).balance == Decimal("100.30")
    task = db_session.get(Task, like_task.id)
    assert task.remaining_quantity == 9
    assert task.completed_count == 1
    order = db_session.get(Order, like_task.order_id)
    assert order.status == "processing"
    assert order.remaining_count == 9


async def test_cooldown_blocks_repeat(client: AsyncClient, like_task: Task, auth_headers: dict):
    await client.post(f"/api/tasks/{like_task.id}/start", headers=auth_headers)
    await client.post(f"/api/tasks/{like_task.id}/complete", json={"proof": {}}, headers=auth_headers)

    again = await client.post(f"/api/tasks/{like_task.id}/start", headers=auth_headers)
    listing = await client.get("/api/tasks", headers=auth_headers)

    assert again.status_code == 400
    assert again.json()["message"] == "Task in cooldown period"
    assert listing.json()["total_items"] == 0


async def test_one_time_task_cannot_be_repeated(client: AsyncClient, db_session, follow_task: Task,
                                                auth_headers: dict):
    await client.post(f"/api/tasks/{follow_task.id}/start", headers=auth_headers)
    await client.post(f"/api/tasks/{follow_task.id}/complete", json={"proof": {}}, headers=auth_headers)

    again = await client.post(f"/api/tasks/{follow_task.id}/start", headers=auth_headers)

    assert again.status_code == 400
    assert again.json()["message"] == "Task already completed"
    execution = db_session.query(TaskExecution).filter(TaskExecution.task_id == follow_task.id).one()
    assert execution.cooldown_ends_at is None


async def test_task_details_include_my_executions(client: AsyncClient, like_task: Task, auth_headers: dict):
    await client.post(f"/api/tasks/{like_task.id}/start", headers=auth_headers)

    response = await client.get(f"/api/tasks/{like_task.id}", headers=auth_headers)

    assert response.status_code == 200
    assert len(response.json()["my_executions"]) == 1


async def test_start_with_foreign_device(client: AsyncClient, like_task: Task, auth_headers: dict,
                                         other_auth_headers: dict):
    device = await client.post("/api/devices", json={"name": "Giver PC", "type": "PC"}, headers=other_auth_headers)

    response = await client.post(
        f"/api/tasks/{like_task.id}/start",
        json={"device_id": device.json()["id"]},
        headers=auth_headers,
    )

    assert response.status_code == 404


async def test_device_daily_limit(client: AsyncClient, like_task: Task, follow_task: Task, auth_headers: dict):
    device = await client.post("/api/devices", json={"name": "Doer PC", "type": "PC"}, headers=auth_headers)
    device_id = device.json()["id"]
    await client.put(f"/api/devices/{device_id}/settings", json={"max_daily_tasks": 1}, headers=auth_headers)

    first = await client.post(f"/api/tasks/{like_task.id}/start", json={"device_id": device_id},
                              headers=auth_headers)
    second = await client.post(f"/api/tasks/{follow_task.id}/start", json={"device_id": device_id},
                               headers=auth_headers)

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json()["message"] == "Device daily task limit reached"
