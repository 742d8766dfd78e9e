# tests/api/test_orders.py

from decimal import Decimal

from httpx import AsyncClient

from app.models.order import Order
from app.models.task import Task
from app.models.transaction import Transaction
from app.models.user import User

ORDER_PAYLOAD = {
    "platform": "instagram",
    "service": "likes",
    "target_url": "https://instagram.com/p/abc123",
    "quantity": 100,
}


async def test_create_order_charges_balance_and_creates_task(client: AsyncClient, db_session,
                                                              other_user: User, other_auth_headers: dict):
    response = await client.post("/api/orders", json=ORDER_PAYLOAD, headers=other_auth_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["amount"] == 50.0
    assert data["remaining_count"] == 100

    db_session.expire_all()
    assert db_session.get(User, other_user.id).balance == Decimal("450.00")

    task = db_session.query(Task).filter(Task.order_id == data["id"]).one()
    assert task.type == "like"
    assert task.remaining_quantity == 100
    assert task.rate == Decimal("0.30")

    payment = db_session.query(Transaction).filter(Transaction.order_id == data["id"]).one()
    assert payment.type == "order_payment"
    assert payment.amount == Decimal("-50.00")
    assert payment.status == "completed"


async def test_create_order_insufficient_balance_changes_nothing(client: AsyncClient, db_session,
                                                                  test_user: User, auth_headers: dict):
    payload = {**ORDER_PAYLOAD, "service": "followers", "quantity": 1000}

    response = await client.post("/api/orders", json=payload, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Insufficient balance"
    db_session.expire_all()
    assert db_session.get(User, test_user.id).balance == Decimal("100.00")
    assert db_session.query(Order).count() == 0
    assert db_session.query(Transaction).count() == 0


async def test_create_order_validation(client: AsyncClient, auth_headers: dict):
    payload = {**ORDER_PAYLOAD, "platform": "tiktok", "quantity": 0}

    response = await client.post("/api/orders", json=payload, headers=auth_headers)

    assert response.status_code == 400
    fields = {item["field"] for item in response.json()["details"]}
    assert {"platform", "quantity"} <= fields


async def test_calculate_price_applies_discount_and_speed(client: AsyncClient, auth_headers: dict):
    payload = {**ORDER_PAYLOAD, "service": "followers", "quantity": 10000, "speed": "fast"}

    response = await client.post("/api/orders/calculate-price", json=payload, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["amount"] == 9005.0


async def test_bulk_orders_single_charge(client: AsyncClient, db_session, other_user: User,
                                         other_auth_headers: dict):
    payload = {"orders": [
        ORDER_PAYLOAD,
        {**ORDER_PAYLOAD, "platform": "youtube", "service": "views", "target_url": "https://youtube.com/watch?v=x", "quantity": 500},
    ]}

    response = await client.post("/api/orders/bulk", json=payload, headers=other_auth_headers)

    assert response.status_code == 201
    data = response.json()
    assert len(data["orders"]) == 2
    assert data["total_amount"] == 150.0
    assert data["balance"] == 350.0
    assert db_session.query(Transaction).filter(Transaction.type == "order_payment").count() == 1


async def test_bulk_orders_insufficient_balance_is_atomic(client: AsyncClient, db_session,
                                                          test_user: User, auth_headers: dict):
    payload = {"orders": [ORDER_PAYLOAD, {**ORDER_PAYLOAD, "quantity": 200}]}

    response = await client.post("/api/orders/bulk", json=payload, headers=auth_headers)

    assert response.status_code == 400
    assert db_session.query(Order).count() == 0


async def test_list_and_get_orders_are_scoped_to_owner(client: AsyncClient, auth_headers: dict,
                                                       other_auth_headers: dict):
    created = (await client.post("/api/orders", json=ORDER_PAYLOAD, headers=other_auth_headers)).json()

    own_list = await client.get("/api/orders", headers=other_auth_headers)
    assert own_list.json()["total_items"] == 1
    assert own_list.json()["items"][0]["id"] == created["id"]

    foreign_list = await client.get("/api/orders", headers=auth_headers)
    assert foreign_list.json()["total_items"] == 0

    foreign_get = await client.get(f"/api/orders/{created['id']}", headers=auth_headers)
    assert foreign_get.status_code == 404


async def test_list_orders_filters_by_status(client: AsyncClient, other_auth_headers: dict):
    await client.post("/api/orders", json=ORDER_PAYLOAD, headers=other_auth_headers)

    pending = await client.get("/api/orders", params={"status": "pending"}, headers=other_auth_headers)
    completed = await client.get("/api/orders", params={"status": "completed"}, headers=other_auth_headers)

    assert pending.json()["total_items"] == 1
    assert completed.json()["total_items"] == 0


async def test_repeat_order(client: AsyncClient, db_session, other_user: User, other_auth_headers: dict):
    created = (await client.post("/api/orders", json=ORDER_PAYLOAD, headers=other_auth_headers)).json()

    response = await client.post(f"/api/orders/{created['id']}/repeat", headers=other_auth_headers)

    assert response.status_code == 201
    assert response.json()["id"] != created["id"]
    assert response.json()["quantity"] == 100
    db_session.expire_all()
    assert db_session.get(User, other_user.id).balance == Decimal("400.00")


async def test_order_stats(client: AsyncClient, other_auth_headers: dict):
    await client.post("/api/orders", json=ORDER_PAYLOAD, headers=other_auth_headers)

    response = await client.get("/api/orders/stats", params={"platform": "instagram", "timeframe": "30d"},
                                headers=other_auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total_orders"] == 1
    assert data["active_orders"] == 1
    assert data["total_spent"] == 50.0
    assert data["total_orders_growth"] == 100.0


async def test_report_order_opens_dispute(client: AsyncClient, other_auth_headers: dict):
    created = (await client.post("/api/orders", json=ORDER_PAYLOAD, headers=other_auth_headers)).json()

    response = await client.post(
        f"/api/orders/{created['id']}/report",
        json={"subject": "No likes yet", "description": "Nothing delivered after a day"},
        headers=other_auth_headers,
    )

    assert response.status_code == 201
    assert response.json()["status"] == "open"
    assert response.json()["order_id"] == created["id"]
