# tests/api/admin/test_admin_orders.py

from decimal import Decimal

import pytest
from httpx import AsyncClient

from app.models.order import Order
from app.models.task import Task, TaskExecution
from app.models.transaction import Transaction
from app.models.user import User
from app.schemas.order import OrderCreate
from app.services import order as order_service

REASON = {"reason": "Target profile is private"}


@pytest.fixture
def pending_order(db_session, other_user: User) -> Order:
    # 10 лайков по 0.5 = 5.00, баланс заказчика 500 -> 495
    return order_service.create_order(db_session, other_user, OrderCreate(
        platform="instagram", service="likes", target_url="https://instagram.com/p/abc123", quantity=10,
    ))


def balance_of(db_session, user: User) -> Decimal:
    db_session.expire_all()
    return db_session.get(User, user.id).balance


async def test_list_and_pending_queue(client: AsyncClient, pending_order: Order, admin_auth_headers: dict):
    listing = await client.get("/api/admin/orders", params={"platform": "instagram"}, headers=admin_auth_headers)
    queue = await client.get("/api/admin/orders/pending-approval", headers=admin_auth_headers)

    assert listing.status_code == 200
    item = listing.json()["items"][0]
    assert item["id"] == pending_order.id
    assert item["user_email"] == "giver@example.com"
    assert [o["id"] for o in queue.json()["items"]] == [pending_order.id]


async def test_moderator_can_approve(client: AsyncClient, db_session, pending_order: Order,
                                     moderator_user: User, moderator_auth_headers: dict):
    response = await client.put(f"/api/admin/orders/{pending_order.id}/approve", json={},
                                headers=moderator_auth_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "processing"
    assert response.json()["reviewed_by"] == moderator_user.id


async def test_moderator_cannot_reject(client: AsyncClient, pending_order: Order, moderator_auth_headers: dict):
    response = await client.put(f"/api/admin/orders/{pending_order.id}/reject", json=REASON,
                                headers=moderator_auth_headers)

    assert response.status_code == 403


async def test_reject_refunds_in_full(client: AsyncClient, db_session, other_user: User, pending_order: Order,
                                      admin_auth_headers: dict):
    assert balance_of(db_session, other_user) == Decimal("495.00")

    response = await client.put(f"/api/admin/orders/{pending_order.id}/reject", json=REASON,
                                headers=admin_auth_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert response.json()["rejection_reason"] == REASON["reason"]
    assert balance_of(db_session, other_user) == Decimal("500.00")
    task = db_session.query(Task).filter(Task.order_id == pending_order.id).one()
    assert task.status == "rejected"
    refund = db_session.query(Transaction).filter(Transaction.type == "refund").one()
    assert refund.amount == Decimal("5.00")


async def test_reject_twice_is_rejected(client: AsyncClient, pending_order: Order, admin_auth_headers: dict):
    await client.put(f"/api/admin/orders/{pending_order.id}/reject", json=REASON, headers=admin_auth_headers)
    again = await client.put(f"/api/admin/orders/{pending_order.id}/reject", json=REASON,
                             headers=admin_auth_headers)

    assert again.status_code == 400


async def test_refund_returns_unfulfilled_share(client: AsyncClient, db_session, other_user: User,
                                                pending_order: Order, admin_auth_headers: dict):
    await client.put(f"/api/admin/orders/{pending_order.id}/approve", json={}, headers=admin_auth_headers)
    order = db_session.get(Order, pending_order.id)
    order.remaining_count = 4
    db_session.commit()

    response = await client.put(f"/api/admin/orders/{pending_order.id}/refund", json=REASON,
                                headers=admin_auth_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "refunded"
    # 5.00 * 4 / 10
    assert balance_of(db_session, other_user) == Decimal("497.00")


async def test_pending_order_cannot_be_refunded(client: AsyncClient, pending_order: Order,
                                                admin_auth_headers: dict):
    response = await client.put(f"/api/admin/orders/{pending_order.id}/refund", json=REASON,
                                headers=admin_auth_headers)

    assert response.status_code == 400


async def test_status_update_follows_lifecycle(client: AsyncClient, pending_order: Order,
                                               admin_auth_headers: dict):
    illegal = await client.put(f"/api/admin/orders/{pending_order.id}/status", json={"status": "completed"},
                               headers=admin_auth_headers)
    processing = await client.put(f"/api/admin/orders/{pending_order.id}/status", json={"status": "processing"},
                                  headers=admin_auth_headers)
    completed = await client.put(f"/api/admin/orders/{pending_order.id}/status", json={"status": "completed"},
                                 headers=admin_auth_headers)

    assert illegal.status_code == 400
    assert processing.json()["status"] == "processing"
    assert completed.status_code == 200
    assert completed.json()["remaining_count"] == 0


async def test_unknown_order(client: AsyncClient, admin_auth_headers: dict):
    response = await client.get("/api/admin/orders/does-not-exist", headers=admin_auth_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Not Found"


async def test_statistics_overview(client: AsyncClient, pending_order: Order, admin_auth_headers: dict):
    response = await client.get("/api/admin/orders/statistics/overview", headers=admin_auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total_orders"] == 1
    assert data["pending_orders"] == 1
    assert data["total_revenue"] == 5.0
    assert data["by_platform"] == {"instagram": 1}


@pytest.fixture
async def submission_id(client: AsyncClient, db_session, pending_order: Order, auth_headers: dict) -> str:
    task = db_session.query(Task).filter(Task.order_id == pending_order.id).one()
    await client.post(f"/api/tasks/{task.id}/start", headers=auth_headers)
    response = await client.post(f"/api/tasks/{task.id}/complete", json={"proof": {}}, headers=auth_headers)
    return response.json()["id"]


async def test_reject_order_rejects_pending_submissions(client: AsyncClient, db_session, test_user: User,
                                                        other_user: User, pending_order: Order,
                                                        submission_id: str, admin_auth_headers: dict):
    rejected = await client.put(f"/api/admin/orders/{pending_order.id}/reject", json=REASON,
                                headers=admin_auth_headers)
    approve = await client.put(f"/api/admin/tasks/submissions/{submission_id}/approve",
                               headers=admin_auth_headers)

    assert rejected.status_code == 200
    assert approve.status_code == 400
    db_session.expire_all()
    assert db_session.get(TaskExecution, submission_id).status == "rejected"
    assert balance_of(db_session, test_user) == Decimal("100.00")
    assert balance_of(db_session, other_user) == Decimal("500.00")
    order = db_session.get(Order, pending_order.id)
    assert order.status == "cancelled"
    assert order.remaining_count == 10


async def test_submission_on_closed_task_is_not_paid(client: AsyncClient, db_session, test_user: User,
                                                     pending_order: Order, submission_id: str,
                                                     admin_auth_headers: dict):
    task = db_session.query(Task).filter(Task.order_id == pending_order.id).one()
    task.status = "rejected"
    db_session.commit()

    response = await client.put(f"/api/admin/tasks/submissions/{submission_id}/approve",
                                headers=admin_auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Task is no longer active"
    assert balance_of(db_session, test_user) == Decimal("100.00")
    assert db_session.query(Transaction).filter(Transaction.type == "task_earning").count() == 0
