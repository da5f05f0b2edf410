import pytest
from fastapi import HTTPException
from sqlalchemy import func, select

from app.models import ActivityLog, InventoryItem, WithdrawItem
from app.services.inventory import apply_withdrawal


def _stock_item(db_session, *, name: str = "Battery", stock: int = 10, min_stock: int | None = None) -> InventoryItem:
    item = InventoryItem(item_name=name, current_stock=stock, min_stock=min_stock)
    db_session.add(item)
    db_session.commit()
    return item


@pytest.mark.anyio("asyncio")
async def test_withdrawal_over_stock_is_rejected_without_mutation(client, officer_headers, db_session):
    item = _stock_item(db_session, stock=3)

    resp = await client.post(
        "/withdraw-items",
        json={"itemName": "Battery", "quantity": 4},
        headers=officer_headers,
    )

    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "INSUFFICIENT_STOCK"
    assert error["details"] == {"availableStock": 3, "requestedQuantity": 4}
    db_session.refresh(item)
    assert item.current_stock == 3
    assert db_session.scalar(select(func.count()).select_from(WithdrawItem)) == 0


@pytest.mark.anyio("asyncio")
async def test_withdrawal_decrements_stock_by_quantity(client, officer_headers, officer_user, db_session):
    item = _stock_item(db_session, stock=10, min_stock=2)

    resp = await client.post(
        "/withdraw-items",
        json={"itemName": "Battery", "quantity": 4, "notes": "night patrol"},
        headers=officer_headers,
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["data"]["withdrawnBy"] == officer_user.id
    assert body["data"]["withdrawnByName"] == "Officer Somchai"
    assert body["stock"] == {"stockUpdated": True, "oldStock": 10, "newStock": 6, "lowStock": False}
    db_session.refresh(item)
    assert item.current_stock == 6

    entry = db_session.scalars(select(ActivityLog).order_by(ActivityLog.id.desc())).first()
    assert entry.entity_type == "WithdrawItem"
    assert entry.metadata_json["newStock"] == 6


@pytest.mark.anyio("asyncio")
async def test_withdrawing_entire_stock_reaches_zero_and_flags_low(client, officer_headers, db_session):
    item = _stock_item(db_session, stock=5, min_stock=1)

    resp = await client.post("/withdraw-items", json={"itemName": "Battery", "quantity": 5}, headers=officer_headers)

    assert resp.status_code == 201
    assert resp.json()["stock"]["newStock"] == 0
    assert resp.json()["stock"]["lowStock"] is True
    db_session.refresh(item)
    assert item.current_stock == 0


@pytest.mark.anyio("asyncio")
async def test_withdrawal_of_untracked_item_records_without_stock(client, officer_headers):
    resp = await client.post("/withdraw-items", json={"itemName": "Tea", "quantity": 2}, headers=officer_headers)

    assert resp.status_code == 201
    assert resp.json()["stock"]["stockUpdated"] is False


@pytest.mark.anyio("asyncio")
async def test_zero_quantity_is_a_validation_error(client, officer_headers):
    resp = await client.post("/withdraw-items", json={"itemName": "Tea", "quantity": 0}, headers=officer_headers)

    assert resp.status_code == 422


@pytest.mark.parametrize("stock,quantity", [(1, 1), (7, 3), (100, 99), (4, 4)])
def test_apply_withdrawal_never_goes_negative(stock, quantity):
    item = InventoryItem(item_name="x", current_stock=stock)

    movement = apply_withdrawal(item, quantity)

    assert item.current_stock == stock - quantity
    assert movement.new_stock >= 0
    assert movement.old_stock == stock


def test_apply_withdrawal_rejects_overdraw():
    item = InventoryItem(item_name="x", current_stock=2)

    with pytest.raises(HTTPException) as excinfo:
        apply_withdrawal(item, 3)

    assert excinfo.value.status_code == 400
    assert item.current_stock == 2


@pytest.mark.anyio("asyncio")
async def test_officer_cannot_touch_someone_elses_withdrawal(client, officer_headers, admin_headers, make_user, make_api_key):
    other = make_user(name="Other Officer")
    other_headers = {"Authorization": f"Bearer {make_api_key(other)}"}
    created = await client.post("/withdraw-items", json={"itemName": "Tea", "quantity": 1}, headers=other_headers)
    withdrawal_id = created.json()["data"]["id"]

    forbidden = await client.put(f"/withdraw-items/{withdrawal_id}", json={"notes": "mine"}, headers=officer_headers)
    assert forbidden.status_code == 404

    own = await client.put(f"/withdraw-items/{withdrawal_id}", json={"notes": "green tea"}, headers=other_headers)
    assert own.status_code == 200
    assert own.json()["notes"] == "green tea"

    removed = await client.delete(f"/withdraw-items/{withdrawal_id}", headers=admin_headers)
    assert removed.status_code == 200
    missing = await client.get(f"/withdraw-items/{withdrawal_id}", headers=officer_headers)
    assert missing.status_code == 404
