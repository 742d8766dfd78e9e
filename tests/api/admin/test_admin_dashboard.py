# tests/api/admin/test_admin_dashboard.py

from httpx import AsyncClient

from app.models.user import User
from app.schemas.order import OrderCreate
from app.services import order as order_service


async def test_overview_counts(client: AsyncClient, db_session, test_user: User, other_user: User,
                               admin_auth_headers: dict):
    order_service.create_order(db_session, other_user, OrderCreate(
        platform="instagram", service="followers", target_url="https://instagram.com/someone", quantity=20,
    ))

    response = await client.get("/api/admin/dashboard/overview", headers=admin_auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total_users"] == 3
    assert data["new_users_today"] == 3
    assert data["total_orders"] == 1
    assert data["pending_orders"] == 1
    assert data["total_revenue"] == 20.0
    assert data["available_tasks"] == 1
    assert data["pending_submissions"] == 0
    assert data["open_disputes"] == 0


async def test_overview_served_from_cache(client: AsyncClient, mock_redis, admin_auth_headers: dict):
    cached = (
        '{"total_users": 42, "new_users_today": 0, "active_users_last_7_days": 0, "total_orders": 0,'
        ' "orders_today": 0, "pending_orders": 0, "total_revenue": 0, "revenue_today": 0,'
        ' "available_tasks": 0, "pending_submissions": 0, "pending_balance_requests": 0, "open_disputes": 0}'
    )
    mock_redis.get.return_value = cached

    response = await client.get("/api/admin/dashboard/overview", headers=admin_auth_headers)

    assert response.json()["total_users"] == 42


async def test_activity_log_records_admin_actions(client: AsyncClient, admin_auth_headers: dict):
    await client.post("/api/admin/jobs/run", json={"job_name": "missing"}, headers=admin_auth_headers)
    await client.put("/api/admin/settings", json={}, headers=admin_auth_headers)
    await client.post("/api/admin/users", json={
        "email": "new@example.com", "password": "Secret123", "username": "newbie",
        "first_name": "New", "last_name": "User",
    }, headers=admin_auth_headers)

    response = await client.get("/api/admin/activity", params={"scope": "admin"}, headers=admin_auth_headers)

    assert response.status_code == 200
    items = response.json()["items"]
    assert [(i["resource"], i["action"]) for i in items] == [("user", "create")]
