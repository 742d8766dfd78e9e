# tests/api/admin/test_admin_jobs.py

from unittest.mock import MagicMock

from httpx import AsyncClient

from app.tasks_registry import TASKS


async def test_jobs_list(client: AsyncClient, moderator_auth_headers: dict):
    response = await client.get("/api/admin/jobs", headers=moderator_auth_headers)

    assert response.status_code == 200
    assert {job["job_name"] for job in response.json()} == set(TASKS)


async def test_run_single_job(client: AsyncClient, mocker, admin_auth_headers: dict):
    job = MagicMock()
    mocker.patch.dict(TASKS["cleanup_expired_sessions"], {"function": job})

    response = await client.post("/api/admin/jobs/run", json={"job_name": "cleanup_expired_sessions"},
                                 headers=admin_auth_headers)

    assert response.status_code == 202
    assert response.json()["jobs"] == ["cleanup_expired_sessions"]
    job.assert_called_once_with()


async def test_run_all_jobs(client: AsyncClient, mocker, admin_auth_headers: dict):
    jobs = {}
    for name in TASKS:
        jobs[name] = MagicMock()
        mocker.patch.dict(TASKS[name], {"function": jobs[name]})

    response = await client.post("/api/admin/jobs/run", json={"job_name": "all"}, headers=admin_auth_headers)

    assert response.status_code == 202
    assert response.json()["jobs"] == list(TASKS)
    for job in jobs.values():
        job.assert_called_once_with()


async def test_unknown_job(client: AsyncClient, admin_auth_headers: dict):
    response = await client.post("/api/admin/jobs/run", json={"job_name": "rebuild_universe"},
                                 headers=admin_auth_headers)

    assert response.status_code == 404


async def test_moderator_cannot_run_jobs(client: AsyncClient, moderator_auth_headers: dict):
    response = await client.post("/api/admin/jobs/run", json={"job_name": "all"}, headers=moderator_auth_headers)

    assert response.status_code == 403
