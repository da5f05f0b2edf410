from datetime import datetime

import pytest

from app.models import BackupSchedule


@pytest.mark.anyio("asyncio")
async def test_create_schedule_sets_next_run(client, admin_headers, admin_user):
    resp = await client.post(
        "/backup/schedule",
        json={"name": "Weekly", "frequency": "weekly", "time": "03:30", "dayOfWeek": 1, "retentionDays": 30},
        headers=admin_headers,
    )

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["isActive"] is True
    assert data["createdBy"] == admin_user.id
    next_run = datetime.fromisoformat(data["nextRun"])
    assert next_run.tzinfo is not None
    assert (next_run.hour, next_run.minute) == (3, 30)
    assert next_run.weekday() == 0  # Monday


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize(
    "payload",
    [
        {"name": "W", "frequency": "weekly", "time": "01:00"},
        {"name": "M", "frequency": "monthly", "time": "01:00"},
    ],
)
async def test_missing_day_for_frequency_is_rejected(client, admin_headers, payload):
    resp = await client.post("/backup/schedule", json=payload, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.anyio("asyncio")
async def test_malformed_time_is_rejected(client, admin_headers):
    resp = await client.post(
        "/backup/schedule",
        json={"name": "Bad", "frequency": "daily", "time": "25:00"},
        headers=admin_headers,
    )

    assert resp.status_code == 422


@pytest.mark.anyio("asyncio")
async def test_deactivate_clears_next_run_and_reactivate_restores_it(client, admin_headers, db_session):
    created = await client.post(
        "/backup/schedule",
        json={"name": "Daily", "frequency": "daily", "time": "02:00"},
        headers=admin_headers,
    )
    schedule_id = created.json()["data"]["id"]

    off = await client.put(f"/backup/schedule/{schedule_id}", json={"isActive": False}, headers=admin_headers)
    assert off.status_code == 200
    assert off.json()["data"]["nextRun"] is None

    listed = await client.get("/backup/schedule", headers=admin_headers)
    assert listed.json()["data"][0]["nextRun"] is None

    on = await client.put(f"/backup/schedule/{schedule_id}", json={"isActive": True}, headers=admin_headers)
    assert on.json()["data"]["nextRun"] is not None


@pytest.mark.anyio("asyncio")
async def test_changing_time_recomputes_next_run(client, admin_headers):
    created = await client.post(
        "/backup/schedule",
        json={"name": "Daily", "frequency": "daily", "time": "02:00"},
        headers=admin_headers,
    )
    schedule_id = created.json()["data"]["id"]

    resp = await client.put(f"/backup/schedule/{schedule_id}", json={"time": "17:45"}, headers=admin_headers)

    next_run = datetime.fromisoformat(resp.json()["data"]["nextRun"])
    assert (next_run.hour, next_run.minute) == (17, 45)


@pytest.mark.anyio("asyncio")
async def test_list_recomputes_next_run_for_active_schedules(client, admin_headers, admin_user, db_session):
    stale = BackupSchedule(
        name="Stale",
        frequency="monthly",
        time="00:00",
        day_of_month=1,
        is_active=True,
        next_run=datetime(2000, 1, 1),
        created_by=admin_user.id,
        created_by_name=admin_user.name,
        collections=[],
    )
    db_session.add(stale)
    db_session.commit()

    resp = await client.get("/backup/schedule", headers=admin_headers)

    [data] = resp.json()["data"]
    next_run = datetime.fromisoformat(data["nextRun"])
    assert next_run.year >= 2026
    assert next_run.day == 1


@pytest.mark.anyio("asyncio")
async def test_delete_schedule(client, admin_headers):
    created = await client.post(
        "/backup/schedule",
        json={"name": "Gone", "frequency": "daily", "time": "02:00"},
        headers=admin_headers,
    )
    schedule_id = created.json()["data"]["id"]

    resp = await client.delete(f"/backup/schedule/{schedule_id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Backup schedule deleted"}

    again = await client.delete(f"/backup/schedule/{schedule_id}", headers=admin_headers)
    assert again.status_code == 404
    assert again.json()["error"]["code"] == "SCHEDULE_NOT_FOUND"


@pytest.mark.anyio("asyncio")
async def test_schedules_are_admin_only(client, officer_headers):
    resp = await client.get("/backup/schedule", headers=officer_headers)

    assert resp.status_code == 403
