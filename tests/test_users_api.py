from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import select

from app.models import ActivityAction, ActivityLog, ApiKey, User


@pytest.mark.anyio("asyncio")
async def test_user_creation_is_logged_with_actor(client, admin_headers, admin_user, db_session):
    payload = {"username": "somsak", "name": "Somsak K.", "rank": "Corporal", "badgeNumber": "B-77"}

    resp = await client.post("/users", json=payload, headers=admin_headers)
    assert resp.status_code == 201
    body = resp.json()
    assert body["badgeNumber"] == "B-77"
    assert body["role"] == "officer"

    entry = db_session.scalars(select(ActivityLog).order_by(ActivityLog.id.desc())).first()
    assert entry.action == ActivityAction.create
    assert entry.entity_type == "User"
    assert entry.entity_id == str(body["id"])
    assert entry.performed_by == admin_user.id
    assert entry.performed_by_name == admin_user.name


@pytest.mark.anyio("asyncio")
async def test_duplicate_username_is_rejected(client, admin_headers):
    payload = {"username": "dup", "name": "First"}
    assert (await client.post("/users", json=payload, headers=admin_headers)).status_code == 201

    resp = await client.post("/users", json=payload, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "USER_EXISTS"


@pytest.mark.anyio("asyncio")
async def test_update_records_field_changes(client, admin_headers, officer_user, db_session):
    resp = await client.put(
        f"/users/{officer_user.id}",
        json={"rank": "Lieutenant", "name": officer_user.name},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["rank"] == "Lieutenant"

    entry = db_session.scalars(select(ActivityLog).order_by(ActivityLog.id.desc())).first()
    assert entry.action == ActivityAction.update
    assert entry.changes == [{"field": "rank", "oldValue": None, "newValue": "Lieutenant"}]


@pytest.mark.anyio("asyncio")
async def test_officer_cannot_create_users(client, officer_headers):
    resp = await client.post("/users", json={"username": "x", "name": "X"}, headers=officer_headers)

    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "ADMIN_REQUIRED"


@pytest.mark.anyio("asyncio")
async def test_list_and_search_users(client, officer_headers, make_user):
    make_user(name="Wichai Boonmee")
    make_user(name="Anan Srisuk")

    resp = await client.get("/users", params={"search": "wichai"}, headers=officer_headers)

    assert resp.status_code == 200
    assert [user["name"] for user in resp.json()["data"]] == ["Wichai Boonmee"]


@pytest.mark.anyio("asyncio")
async def test_unknown_user_is_404(client, officer_headers):
    resp = await client.get("/users/987654", headers=officer_headers)

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "USER_NOT_FOUND"


@pytest.mark.anyio("asyncio")
async def test_delete_user_removes_their_keys(client, admin_headers, make_user, make_api_key, db_session):
    victim = make_user(name="Leaving Officer")
    token = make_api_key(victim)

    resp = await client.delete(f"/users/{victim.id}", headers=admin_headers)
    assert resp.status_code == 200

    denied = await client.get("/users", headers={"Authorization": f"Bearer {token}"})
    assert denied.status_code == 401
    assert db_session.scalar(select(ApiKey).where(ApiKey.user_id == victim.id)) is None


@pytest.mark.anyio("asyncio")
async def test_inactive_or_expired_keys_are_refused(client, make_user, make_api_key, db_session):
    inactive_user = make_user(is_active=False)
    active_user = make_user()
    expired = make_api_key(active_user, expires_at=datetime.now(tz=UTC) - timedelta(minutes=1))
    revoked = make_api_key(active_user, is_active=False)
    disabled_owner = make_api_key(inactive_user)

    for token in (expired, revoked, disabled_owner, "stn_nope.bogus"):
        resp = await client.get("/users", headers={"X-API-Key": token})
        assert resp.status_code == 401, token


@pytest.mark.anyio("asyncio")
async def test_successful_call_stamps_key_usage(client, officer_headers, officer_user, db_session):
    resp = await client.get("/users", headers=officer_headers)
    assert resp.status_code == 200

    key = db_session.scalar(select(ApiKey).where(ApiKey.user_id == officer_user.id))
    assert key.last_used_at is not None
    assert db_session.get(User, officer_user.id) is not None
