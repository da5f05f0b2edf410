import pytest
from sqlalchemy import func, select

from app.models import ActivityAction, ActivityLog


async def _add_entry(client, headers, **overrides):
    payload = {
        "name": "Somsak Jaidee",
        "charge": "Disturbing the peace",
        "reason": "Shouted at the front desk",
        "category": "visitor",
        "severity": "high",
        "fineAmount": 500,
    }
    payload.update(overrides)
    return await client.post("/blacklist", json=payload, headers=headers)


def _activity_count(db_session) -> int:
    return db_session.scalar(select(func.count()).select_from(ActivityLog).where(ActivityLog.entity_type == "Blacklist"))


@pytest.mark.anyio("asyncio")
async def test_adding_an_entry_folds_details_into_reason(client, officer_headers, officer_user, db_session):
    resp = await _add_entry(client, officer_headers)

    assert resp.status_code == 201
    body = resp.json()
    assert body["reason"] == "Disturbing the peace\n\nDetails: Shouted at the front desk"
    assert body["addedBy"] == officer_user.id
    assert body["addedByName"] == "Officer Somchai"
    assert body["isActive"] is True
    assert body["paymentStatus"] == "unpaid"
    assert body["fineAmount"] == 500

    entry = db_session.scalars(select(ActivityLog).order_by(ActivityLog.id.desc())).first()
    assert entry.action == ActivityAction.create
    assert entry.entity_name == "Blacklist: Somsak Jaidee"
    assert entry.metadata_json["severity"] == "high"


@pytest.mark.anyio("asyncio")
async def test_charge_alone_becomes_the_reason(client, officer_headers):
    resp = await _add_entry(client, officer_headers, reason=None)

    assert resp.json()["reason"] == "Disturbing the peace"


@pytest.mark.anyio("asyncio")
async def test_negative_fine_is_rejected(client, officer_headers):
    resp = await _add_entry(client, officer_headers, fineAmount=-1)

    assert resp.status_code == 422


@pytest.mark.anyio("asyncio")
async def test_payment_stamps_and_clears_payer(client, officer_headers, admin_headers, admin_user, db_session):
    entry_id = (await _add_entry(client, officer_headers)).json()["id"]

    paid = await client.put(f"/blacklist/{entry_id}/payment", json={"paymentStatus": "paid"}, headers=admin_headers)
    assert paid.status_code == 200
    assert paid.json()["paidBy"] == admin_user.id
    assert paid.json()["paidByName"] == "Chief Admin"
    assert paid.json()["paidAt"] is not None

    logged = db_session.scalars(select(ActivityLog).order_by(ActivityLog.id.desc())).first()
    assert logged.changes == [{"field": "paymentStatus", "oldValue": "unpaid", "newValue": "paid"}]

    unpaid = await client.put(
        f"/blacklist/{entry_id}/payment", json={"paymentStatus": "unpaid"}, headers=officer_headers
    )
    assert unpaid.json()["paymentStatus"] == "unpaid"
    assert unpaid.json()["paidAt"] is None
    assert unpaid.json()["paidBy"] is None


@pytest.mark.anyio("asyncio")
async def test_repeating_the_current_payment_status_logs_nothing(client, officer_headers, db_session):
    entry_id = (await _add_entry(client, officer_headers)).json()["id"]
    before = _activity_count(db_session)

    resp = await client.put(f"/blacklist/{entry_id}/payment", json={"paymentStatus": "unpaid"}, headers=officer_headers)

    assert resp.status_code == 200
    assert _activity_count(db_session) == before


@pytest.mark.anyio("asyncio")
async def test_unknown_payment_status_is_rejected(client, officer_headers):
    entry_id = (await _add_entry(client, officer_headers)).json()["id"]

    resp = await client.put(f"/blacklist/{entry_id}/payment", json={"paymentStatus": "waived"}, headers=officer_headers)

    assert resp.status_code == 422


@pytest.mark.anyio("asyncio")
async def test_only_admin_or_adder_may_edit_or_delete(
    client, officer_headers, admin_headers, make_user, make_api_key, db_session
):
    entry_id = (await _add_entry(client, officer_headers)).json()["id"]
    stranger = {"X-API-Key": make_api_key(make_user(name="Officer Stranger"))}

    denied_edit = await client.put(f"/blacklist/{entry_id}", json={"severity": "low"}, headers=stranger)
    denied_delete = await client.delete(f"/blacklist/{entry_id}", headers=stranger)
    assert denied_edit.status_code == 403
    assert denied_edit.json()["error"]["code"] == "FORBIDDEN"
    assert denied_delete.status_code == 403

    own_edit = await client.put(
        f"/blacklist/{entry_id}", json={"severity": "low", "isActive": False}, headers=officer_headers
    )
    assert own_edit.status_code == 200
    assert own_edit.json()["severity"] == "low"
    logged = db_session.scalars(select(ActivityLog).order_by(ActivityLog.id.desc())).first()
    assert {change["field"] for change in logged.changes} == {"severity", "is_active"}

    removed = await client.delete(f"/blacklist/{entry_id}", headers=admin_headers)
    assert removed.status_code == 200
    missing = await client.put(f"/blacklist/{entry_id}", json={"severity": "high"}, headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "BLACKLIST_NOT_FOUND"


@pytest.mark.anyio("asyncio")
async def test_list_filters_by_search_and_payment(client, officer_headers, admin_headers):
    first = (await _add_entry(client, officer_headers)).json()["id"]
    await _add_entry(client, officer_headers, name="Malee Srisuk", charge="Unpaid parking", reason=None)
    await client.put(f"/blacklist/{first}/payment", json={"paymentStatus": "paid"}, headers=admin_headers)

    by_reason = await client.get("/blacklist", params={"search": "parking"}, headers=officer_headers)
    paid = await client.get("/blacklist", params={"paymentStatus": "paid"}, headers=officer_headers)
    everything = await client.get("/blacklist", headers=officer_headers)

    assert [row["name"] for row in by_reason.json()["data"]] == ["Malee Srisuk"]
    assert [row["id"] for row in paid.json()["data"]] == [first]
    assert everything.json()["pagination"]["total"] == 2
    assert everything.json()["data"][0]["name"] == "Malee Srisuk"


@pytest.mark.anyio("asyncio")
async def test_blacklist_requires_credentials(client):
    resp = await client.get("/blacklist")

    assert resp.status_code == 401
