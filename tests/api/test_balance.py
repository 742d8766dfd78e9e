# tests/api/test_balance.py

from decimal import Decimal

from httpx import AsyncClient

from app.models.transaction import Transaction
from app.models.user import User

BANK_DETAILS = {"bank_name": "Test Bank", "account_holder": "Test User", "iban": "TR000000000000000000000000"}


async def test_get_balance(client: AsyncClient, auth_headers: dict):
    response = await client.get("/api/balance", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"balance": 100.0, "pending_withdrawals": 0.0, "pending_deposits": 0.0}


async def test_deposit_stays_pending(client: AsyncClient, db_session, test_user: User, auth_headers: dict):
    response = await client.post(
        "/api/balance/deposit",
        json={"amount": 25, "method": "bank_transfer", "details": BANK_DETAILS},
        headers=auth_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["type"] == "deposit"
    assert data["status"] == "pending"
    assert data["amount"] == 25.0

    balance = (await client.get("/api/balance", headers=auth_headers)).json()
    assert balance["balance"] == 100.0
    assert balance["pending_deposits"] == 25.0


async def test_card_deposit_is_masked(client: AsyncClient, db_session, auth_headers: dict):
    response = await client.post(
        "/api/balance/deposit",
        json={"amount": 10, "method": "credit_card",
              "details": {"card_number": "4111111111111111", "cvv": "123"}},
        headers=auth_headers,
    )

    assert response.status_code == 201
    details = response.json()["details"]
    assert "cvv" not in details
    assert details["card_number"].endswith("1111")
    assert "4111111111111111" not in details["card_number"]


async def test_deposit_requires_method_details(client: AsyncClient, auth_headers: dict):
    response = await client.post(
        "/api/balance/deposit",
        json={"amount": 10, "method": "crypto", "details": {}},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Validation Error"


async def test_withdrawal_reserves_funds(client: AsyncClient, db_session, test_user: User, auth_headers: dict):
    response = await client.post(
        "/api/balance/withdraw",
        json={"amount": 100, "method": "bank_transfer", "details": BANK_DETAILS},
        headers=auth_headers,
    )

    assert response.status_code == 201
    assert response.json()["amount"] == -100.0
    assert response.json()["status"] == "pending"
    db_session.expire_all()
    assert db_session.get(User, test_user.id).balance == Decimal("0.00")
    balance = (await client.get("/api/balance", headers=auth_headers)).json()
    assert balance["pending_withdrawals"] == 100.0


async def test_withdrawal_below_minimum(client: AsyncClient, db_session, auth_headers: dict):
    response = await client.post(
        "/api/balance/withdraw",
        json={"amount": 50, "method": "crypto", "details": {"wallet_address": "0xabc"}},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert db_session.query(Transaction).count() == 0


async def test_withdrawal_insufficient_balance(client: AsyncClient, db_session, test_user: User,
                                               auth_headers: dict):
    response = await client.post(
        "/api/balance/withdraw",
        json={"amount": 150, "method": "crypto", "details": {"wallet_address": "0xabc"}},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Insufficient balance"
    db_session.expire_all()
    assert db_session.get(User, test_user.id).balance == Decimal("100.00")


async def test_transactions_history_filters(client: AsyncClient, auth_headers: dict):
    await client.post("/api/balance/deposit", json={"amount": 5, "method": "crypto",
                                                    "details": {"wallet_address": "0xabc"}}, headers=auth_headers)
    await client.post("/api/balance/withdraw", json={"amount": 100, "method": "crypto",
                                                     "details": {"wallet_address": "0xabc"}}, headers=auth_headers)

    everything = await client.get("/api/balance/transactions", headers=auth_headers)
    deposits = await client.get("/api/balance/transactions", params={"type": "deposit"}, headers=auth_headers)

    assert everything.json()["total_items"] == 2
    assert deposits.json()["total_items"] == 1
    assert deposits.json()["items"][0]["type"] == "deposit"
