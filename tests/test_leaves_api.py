import pytest
from sqlalchemy import select

from app.models import ActivityAction, ActivityLog


async def _file_leave(client, headers, **overrides):
    payload = {
        "leaveType": "sick",
        "reason": "Flu",
        "startDate": "2026-06-01",
        "endDate": "2026-06-03",
    }
    payload.update(overrides)
    return await client.post("/leaves", json=payload, headers=headers)


@pytest.mark.anyio("asyncio")
async def test_filing_computes_inclusive_duration(client, officer_headers, officer_user):
    resp = await _file_leave(client, officer_headers)

    assert resp.status_code == 201
    body = resp.json()
    assert body["duration"] == 3
    assert body["status"] == "pending"
    assert body["requestedBy"] == officer_user.id


@pytest.mark.anyio("asyncio")
async def test_end_before_start_is_rejected(client, officer_headers):
    resp = await _file_leave(client, officer_headers, startDate="2026-06-05", endDate="2026-06-01")

    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.anyio("asyncio")
async def test_officers_only_see_their_own_requests(client, officer_headers, admin_headers, make_user, make_api_key):
    other_headers = {"X-API-Key": make_api_key(make_user(name="Other"))}
    await _file_leave(client, officer_headers)
    await _file_leave(client, other_headers, leaveType="personal")

    mine = await client.get("/leaves", headers=officer_headers)
    everything = await client.get("/leaves", headers=admin_headers)

    assert mine.json()["pagination"]["total"] == 1
    assert everything.json()["pagination"]["total"] == 2


@pytest.mark.anyio("asyncio")
async def test_review_logs_approval_with_status_change(client, officer_headers, admin_headers, admin_user, db_session):
    leave_id = (await _file_leave(client, officer_headers)).json()["id"]

    resp = await client.put(
        f"/leaves/{leave_id}/review",
        json={"status": "approved", "reviewNotes": "Get well"},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "approved"
    assert body["reviewedBy"] == admin_user.id
    assert body["reviewedAt"] is not None

    entry = db_session.scalars(select(ActivityLog).order_by(ActivityLog.id.desc())).first()
    assert entry.action == ActivityAction.approve
    assert entry.changes == [{"field": "status", "oldValue": "pending", "newValue": "approved"}]


@pytest.mark.anyio("asyncio")
async def test_second_review_conflicts(client, officer_headers, admin_headers):
    leave_id = (await _file_leave(client, officer_headers)).json()["id"]
    await client.put(f"/leaves/{leave_id}/review", json={"status": "rejected"}, headers=admin_headers)

    resp = await client.put(f"/leaves/{leave_id}/review", json={"status": "approved"}, headers=admin_headers)

    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "LEAVE_ALREADY_REVIEWED"


@pytest.mark.anyio("asyncio")
async def test_officer_cannot_review(client, officer_headers):
    leave_id = (await _file_leave(client, officer_headers)).json()["id"]

    resp = await client.put(f"/leaves/{leave_id}/review", json={"status": "approved"}, headers=officer_headers)

    assert resp.status_code == 403


@pytest.mark.anyio("asyncio")
async def test_review_leaves_an_inbox_message_for_the_requester(client, officer_headers, admin_headers):
    leave_id = (await _file_leave(client, officer_headers)).json()["id"]
    await client.put(
        f"/leaves/{leave_id}/review",
        json={"status": "rejected", "reviewNotes": "Short staffed"},
        headers=admin_headers,
    )

    inbox = (await client.get("/notifications", headers=officer_headers)).json()
    reviewer_inbox = (await client.get("/notifications", headers=admin_headers)).json()

    assert inbox["unreadCount"] == 1
    message = inbox["data"][0]
    assert message["title"] == "Leave request rejected"
    assert message["type"] == "warning"
    assert message["relatedTo"] == "leave"
    assert message["relatedId"] == leave_id
    assert "Short staffed" in message["message"]
    assert reviewer_inbox["pagination"]["total"] == 0
