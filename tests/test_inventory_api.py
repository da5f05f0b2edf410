import pytest
from sqlalchemy import select

from app.models import ActivityAction, ActivityLog, InventoryItem


@pytest.mark.anyio("asyncio")
async def test_create_and_duplicate_item(client, admin_headers):
    resp = await client.post(
        "/inventory",
        json={"itemName": "Radio battery", "currentStock": 12, "minStock": 4, "category": "comms"},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["unit"] == "piece"
    assert data["currentStock"] == 12

    dup = await client.post("/inventory", json={"itemName": "Radio battery"}, headers=admin_headers)
    assert dup.status_code == 400
    assert dup.json()["error"]["code"] == "INVENTORY_EXISTS"


@pytest.mark.anyio("asyncio")
async def test_stock_adjustment_is_change_tracked(client, admin_headers, db_session):
    created = await client.post("/inventory", json={"itemName": "Flares", "currentStock": 10}, headers=admin_headers)
    item_id = created.json()["id"]

    resp = await client.put(f"/inventory/{item_id}", json={"currentStock": 3}, headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json()["currentStock"] == 3
    entry = db_session.scalars(
        select(ActivityLog).where(ActivityLog.entity_type == "Inventory", ActivityLog.action == ActivityAction.update)
    ).one()
    assert entry.changes == [{"field": "current_stock", "oldValue": 10, "newValue": 3}]


@pytest.mark.anyio("asyncio")
async def test_null_stock_in_update_is_ignored(client, admin_headers):
    created = await client.post("/inventory", json={"itemName": "Gloves", "currentStock": 5}, headers=admin_headers)
    item_id = created.json()["id"]

    resp = await client.put(f"/inventory/{item_id}", json={"currentStock": None, "notes": "box 2"}, headers=admin_headers)

    assert resp.json()["currentStock"] == 5
    assert resp.json()["notes"] == "box 2"


@pytest.mark.anyio("asyncio")
async def test_list_search_and_pagination(client, officer_headers, db_session):
    db_session.add_all(
        [
            InventoryItem(item_name="Tea", category="pantry", current_stock=3),
            InventoryItem(item_name="Coffee", category="pantry", current_stock=7),
            InventoryItem(item_name="Torch", category="field", current_stock=2),
        ]
    )
    db_session.commit()

    resp = await client.get("/inventory", params={"category": "pantry", "limit": 1}, headers=officer_headers)

    body = resp.json()
    assert [row["itemName"] for row in body["data"]] == ["Coffee"]
    assert body["pagination"] == {"page": 1, "limit": 1, "total": 2, "pages": 2}

    found = await client.get("/inventory", params={"search": "torc"}, headers=officer_headers)
    assert [row["itemName"] for row in found.json()["data"]] == ["Torch"]


@pytest.mark.anyio("asyncio")
async def test_officer_cannot_modify_inventory(client, officer_headers):
    resp = await client.post("/inventory", json={"itemName": "Nope"}, headers=officer_headers)

    assert resp.status_code == 403


@pytest.mark.anyio("asyncio")
async def test_delete_then_404(client, admin_headers):
    created = await client.post("/inventory", json={"itemName": "Spare"}, headers=admin_headers)
    item_id = created.json()["id"]

    assert (await client.delete(f"/inventory/{item_id}", headers=admin_headers)).status_code == 200
    missing = await client.get(f"/inventory/{item_id}", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "INVENTORY_NOT_FOUND"
