# tests/api/admin/test_admin_balance.py

from decimal import Decimal

import pytest
from httpx import AsyncClient

from app.models.user import User
from tests.api.test_balance import BANK_DETAILS


@pytest.fixture
async def deposit_id(client: AsyncClient, auth_headers: dict) -> str:
    response = await client.post(
        "/api/balance/deposit",
        json={"amount": 40, "method": "bank_transfer", "details": BANK_DETAILS},
        headers=auth_headers,
    )
    return response.json()["id"]


@pytest.fixture
async def withdrawal_id(client: AsyncClient, auth_headers: dict) -> str:
    response = await client.post(
        "/api/balance/withdraw",
        json={"amount": 100, "method": "bank_transfer", "details": BANK_DETAILS},
        headers=auth_headers,
    )
    return response.json()["id"]


def balance_of(db_session, user: User) -> Decimal:
    db_session.expire_all()
    return db_session.get(User, user.id).balance


async def test_pending_requests_listing(client: AsyncClient, deposit_id: str, withdrawal_id: str,
                                        admin_auth_headers: dict):
    everything = await client.get("/api/admin/balance/requests", headers=admin_auth_headers)
    deposits = await client.get("/api/admin/balance/requests", params={"type": "deposit"},
                                headers=admin_auth_headers)

    assert everything.json()["total_items"] == 2
    assert [t["id"] for t in deposits.json()["items"]] == [deposit_id]


async def test_approve_deposit_credits_balance(client: AsyncClient, db_session, test_user: User,
                                               deposit_id: str, admin_auth_headers: dict):
    response = await client.put(f"/api/admin/balance/requests/{deposit_id}/approve",
                                json={"admin_notes": "Payment received"}, headers=admin_auth_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert balance_of(db_session, test_user) == Decimal("140.00")


async def test_reject_deposit_keeps_balance(client: AsyncClient, db_session, test_user: User,
                                            deposit_id: str, admin_auth_headers: dict):
    response = await client.put(f"/api/admin/balance/requests/{deposit_id}/reject", json={},
                                headers=admin_auth_headers)

    assert response.json()["status"] == "failed"
    assert balance_of(db_session, test_user) == Decimal("100.00")


async def test_reject_withdrawal_returns_funds(client: AsyncClient, db_session, test_user: User,
                                               withdrawal_id: str, admin_auth_headers: dict):
    assert balance_of(db_session, test_user) == Decimal("0.00")

    response = await client.put(f"/api/admin/balance/requests/{withdrawal_id}/reject",
                                json={"admin_notes": "IBAN mismatch"}, headers=admin_auth_headers)

    assert response.status_code == 200
    assert balance_of(db_session, test_user) == Decimal("100.00")


async def test_approve_withdrawal_keeps_debit(client: AsyncClient, db_session, test_user: User,
                                              withdrawal_id: str, admin_auth_headers: dict):
    await client.put(f"/api/admin/balance/requests/{withdrawal_id}/approve", json={}, headers=admin_auth_headers)
    again = await client.put(f"/api/admin/balance/requests/{withdrawal_id}/reject", json={},
                             headers=admin_auth_headers)

    assert again.status_code == 400
    assert balance_of(db_session, test_user) == Decimal("0.00")


async def test_moderator_cannot_decide(client: AsyncClient, deposit_id: str, moderator_auth_headers: dict):
    response = await client.put(f"/api/admin/balance/requests/{deposit_id}/approve", json={},
                                headers=moderator_auth_headers)

    assert response.status_code == 403
