# tests/api/test_devices.py

from httpx import AsyncClient


async def register(client: AsyncClient, headers: dict, name: str = "Office PC", type: str = "PC") -> dict:
    response = await client.post("/api/devices", json={"name": name, "type": type}, headers=headers)
    assert response.status_code == 201
    return response.json()


async def test_register_device_with_default_settings(client: AsyncClient, auth_headers: dict):
    device = await register(client, auth_headers)

    assert device["status"] == "offline"
    assert device["settings"] == {
        "auto_renew": False,
        "max_daily_tasks": 10,
        "notifications": {"email": True, "browser": True},
    }


async def test_register_device_validation(client: AsyncClient, auth_headers: dict):
    response = await client.post("/api/devices", json={"name": "PC", "type": "Tablet"}, headers=auth_headers)

    assert response.status_code == 400


async def test_list_devices_by_status(client: AsyncClient, auth_headers: dict):
    first = await register(client, auth_headers)
    await register(client, auth_headers, name="Phone", type="Mobile")
    await client.put(f"/api/devices/{first['id']}/status", json={"status": "online"}, headers=auth_headers)

    online = await client.get("/api/devices", params={"status": "online"}, headers=auth_headers)
    everything = await client.get("/api/devices", headers=auth_headers)

    assert [d["id"] for d in online.json()] == [first["id"]]
    assert len(everything.json()) == 2


async def test_status_update_sets_last_active(client: AsyncClient, auth_headers: dict):
    device = await register(client, auth_headers)

    response = await client.put(f"/api/devices/{device['id']}/status", json={"status": "busy"}, headers=auth_headers)

    assert response.json()["status"] == "busy"
    assert response.json()["last_active"] is not None


async def test_settings_partial_merge(client: AsyncClient, auth_headers: dict):
    device = await register(client, auth_headers)

    response = await client.put(
        f"/api/devices/{device['id']}/settings",
        json={"max_daily_tasks": 25, "notifications": {"browser": False}},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["settings"] == {
        "auto_renew": False,
        "max_daily_tasks": 25,
        "notifications": {"email": True, "browser": False},
    }


async def test_settings_limits(client: AsyncClient, auth_headers: dict):
    device = await register(client, auth_headers)

    response = await client.put(f"/api/devices/{device['id']}/settings", json={"max_daily_tasks": 100},
                                headers=auth_headers)

    assert response.status_code == 400


async def test_device_stats_empty(client: AsyncClient, auth_headers: dict):
    device = await register(client, auth_headers)

    response = await client.get(f"/api/devices/{device['id']}/stats", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["total_tasks"] == 0
    assert response.json()["earnings"] == 0.0


async def test_foreign_device_is_not_found(client: AsyncClient, auth_headers: dict, other_auth_headers: dict):
    device = await register(client, other_auth_headers)

    response = await client.get(f"/api/devices/{device['id']}", headers=auth_headers)

    assert response.status_code == 404


async def test_delete_device(client: AsyncClient, auth_headers: dict):
    device = await register(client, auth_headers)

    deleted = await client.delete(f"/api/devices/{device['id']}", headers=auth_headers)
    missing = await client.get(f"/api/devices/{device['id']}", headers=auth_headers)

    assert deleted.status_code == 204
    assert missing.status_code == 404
