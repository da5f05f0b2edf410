"""Inventory stock and withdrawals against it."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.activity_log import ActivityAction
from app.models.inventory import InventoryItem, WithdrawItem
from app.schemas.inventory import (
    InventoryCreate,
    InventoryUpdate,
    StockMovement,
    WithdrawCreate,
    WithdrawUpdate,
)
from app.security import Actor
from app.services.observers import DomainEvent, publish
from app.utils.changes import detect_changes, snapshot_row
from app.utils.errors import error_response
from app.utils.request_context import RequestContext

logger = logging.getLogger(__name__)

_NON_NULLABLE_ITEM_FIELDS = {"current_stock", "unit"}


def is_low_stock(item: InventoryItem) -> bool:
    return item.min_stock is not None and item.current_stock < item.min_stock


def _warn_if_low(item: InventoryItem) -> bool:
    low = is_low_stock(item)
    if low:
        logger.warning(
            "Inventory below minimum stock",
            extra={"item_name": item.item_name, "current_stock": item.current_stock, "min_stock": item.min_stock},
        )
    return low


def _inventory_exists() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error_response("INVENTORY_EXISTS", "An inventory item with this name already exists."),
    )


# --- Inventory -------------------------------------------------------------


def get_item_or_404(db: Session, item_id: int) -> InventoryItem:
    item = db.get(InventoryItem, item_id)
    if item is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_response("INVENTORY_NOT_FOUND", "Inventory item not found."),
        )
    return item


def list_items(
    db: Session,
    *,
    offset: int,
    limit: int,
    search: str | None = None,
    category: str | None = None,
) -> tuple[list[InventoryItem], int]:
    conditions = []
    if search:
        pattern = f"%{search}%"
        conditions.append(
            or_(
                InventoryItem.item_name.ilike(pattern),
                InventoryItem.description.ilike(pattern),
                InventoryItem.category.ilike(pattern),
            )
        )
    if category:
        conditions.append(InventoryItem.category == category)

    stmt = (
        select(InventoryItem)
        .where(*conditions)
        .order_by(InventoryItem.item_name, InventoryItem.id)
        .offset(offset)
        .limit(limit)
    )
    total = db.scalar(select(func.count()).select_from(InventoryItem).where(*conditions)) or 0
    return list(db.scalars(stmt).all()), total


def create_item(
    db: Session,
    payload: InventoryCreate,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> InventoryItem:
    if db.scalar(select(InventoryItem.id).where(InventoryItem.item_name == payload.item_name)) is not None:
        raise _inventory_exists()

    item = InventoryItem(**payload.model_dump())
    db.add(item)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise _inventory_exists() from exc
    db.refresh(item)
    _warn_if_low(item)

    publish(
        db,
        DomainEvent(
            action=ActivityAction.create,
            entity_type="Inventory",
            entity_id=item.id,
            entity_name=item.item_name,
            actor=actor,
            metadata={"currentStock": item.current_stock, "unit": item.unit},
            context=context,
        ),
    )
    return item


def update_item(
    db: Session,
    item_id: int,
    payload: InventoryUpdate,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> InventoryItem:
    item = get_item_or_404(db, item_id)
    before = snapshot_row(item)

    for field_name, value in payload.model_dump(exclude_unset=True).items():
        if field_name in _NON_NULLABLE_ITEM_FIELDS and value is None:
            continue
        setattr(item, field_name, value)
    db.commit()
    db.refresh(item)

    if item.current_stock != before["current_stock"]:
        logger.info(
            "Inventory stock adjusted",
            extra={"item_name": item.item_name, "old_stock": before["current_stock"], "new_stock": item.current_stock},
        )
    _warn_if_low(item)

    publish(
        db,
        DomainEvent(
            action=ActivityAction.update,
            entity_type="Inventory",
            entity_id=item.id,
            entity_name=item.item_name,
            actor=actor,
            changes=detect_changes(before, snapshot_row(item)),
            context=context,
        ),
    )
    return item


def delete_item(
    db: Session,
    item_id: int,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> None:
    item = get_item_or_404(db, item_id)
    name = item.item_name
    db.delete(item)
    db.commit()

    publish(
        db,
        DomainEvent(
            action=ActivityAction.delete,
            entity_type="Inventory",
            entity_id=item_id,
            entity_name=name,
            actor=actor,
            context=context,
        ),
    )


# --- Withdrawals -----------------------------------------------------------


def apply_withdrawal(item: InventoryItem, quantity: int) -> StockMovement:
    """Take ``quantity`` out of ``item``'s stock, refusing to overdraw it."""

    if quantity > item.current_stock:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_response(
                "INSUFFICIENT_STOCK",
                f"Not enough '{item.item_name}' in stock.",
                {"availableStock": item.current_stock, "requestedQuantity": quantity},
            ),
        )
    old_stock = item.current_stock
    item.current_stock = max(0, old_stock - quantity)
    return StockMovement(
        stock_updated=True,
        old_stock=old_stock,
        new_stock=item.current_stock,
        low_stock=is_low_stock(item),
    )


def create_withdrawal(
    db: Session,
    payload: WithdrawCreate,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> tuple[WithdrawItem, StockMovement]:
    """Record a withdrawal and decrement the matching inventory item, if any."""

    item = db.scalar(
        select(InventoryItem).where(InventoryItem.item_name == payload.item_name).with_for_update()
    )
    movement = apply_withdrawal(item, payload.quantity) if item is not None else StockMovement()

    withdrawal = WithdrawItem(
        item_name=payload.item_name,
        quantity=payload.quantity,
        unit=payload.unit,
        notes=payload.notes,
        withdrawn_by=actor.user_id,
        withdrawn_by_name=actor.name,
    )
    db.add(withdrawal)
    db.commit()
    db.refresh(withdrawal)

    if movement.stock_updated:
        logger.info(
            "Inventory stock withdrawn",
            extra={
                "item_name": payload.item_name,
                "quantity": payload.quantity,
                "old_stock": movement.old_stock,
                "new_stock": movement.new_stock,
            },
        )
        _warn_if_low(item)

    publish(
        db,
        DomainEvent(
            action=ActivityAction.create,
            entity_type="WithdrawItem",
            entity_id=withdrawal.id,
            entity_name=withdrawal.item_name,
            actor=actor,
            metadata={"quantity": withdrawal.quantity, "unit": withdrawal.unit, **movement.as_metadata()},
            context=context,
        ),
    )
    return withdrawal, movement


def get_withdrawal_or_404(db: Session, withdrawal_id: int, actor: Actor | None = None) -> WithdrawItem:
    """Load a withdrawal; when ``actor`` is given, non-admins only see their own."""

    withdrawal = db.get(WithdrawItem, withdrawal_id)
    hidden = actor is not None and not actor.is_admin and withdrawal is not None and withdrawal.withdrawn_by != actor.user_id
    if withdrawal is None or hidden:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_response("WITHDRAW_ITEM_NOT_FOUND", "Withdrawal not found."),
        )
    return withdrawal


def list_withdrawals(
    db: Session,
    *,
    offset: int,
    limit: int,
    search: str | None = None,
    withdrawn_by: int | None = None,
) -> tuple[list[WithdrawItem], int]:
    conditions = []
    if search:
        conditions.append(WithdrawItem.item_name.ilike(f"%{search}%"))
    if withdrawn_by is not None:
        conditions.append(WithdrawItem.withdrawn_by == withdrawn_by)

    stmt = (
        select(WithdrawItem)
        .where(*conditions)
        .order_by(WithdrawItem.created_at.desc(), WithdrawItem.id.desc())
        .offset(offset)
        .limit(limit)
    )
    total = db.scalar(select(func.count()).select_from(WithdrawItem).where(*conditions)) or 0
    return list(db.scalars(stmt).all()), total


def update_withdrawal(
    db: Session,
    withdrawal_id: int,
    payload: WithdrawUpdate,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> WithdrawItem:
    withdrawal = get_withdrawal_or_404(db, withdrawal_id, actor)
    before = snapshot_row(withdrawal)

    for field_name, value in payload.model_dump(exclude_unset=True).items():
        if field_name == "unit" and value is None:
            continue
        setattr(withdrawal, field_name, value)
    db.commit()
    db.refresh(withdrawal)

    publish(
        db,
        DomainEvent(
            action=ActivityAction.update,
            entity_type="WithdrawItem",
            entity_id=withdrawal.id,
            entity_name=withdrawal.item_name,
            actor=actor,
            changes=detect_changes(before, snapshot_row(withdrawal)),
            metadata={"itemName": withdrawal.item_name, "quantity": withdrawal.quantity},
            context=context,
        ),
    )
    return withdrawal


def delete_withdrawal(
    db: Session,
    withdrawal_id: int,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> None:
    withdrawal = get_withdrawal_or_404(db, withdrawal_id, actor)
    item_name, quantity = withdrawal.item_name, withdrawal.quantity
    db.delete(withdrawal)
    db.commit()

    publish(
        db,
        DomainEvent(
            action=ActivityAction.delete,
            entity_type="WithdrawItem",
            entity_id=withdrawal_id,
            entity_name=item_name,
            actor=actor,
            metadata={"itemName": item_name, "quantity": quantity},
            context=context,
        ),
    )


__all__ = [
    "apply_withdrawal",
    "create_item",
    "create_withdrawal",
    "delete_item",
    "delete_withdrawal",
    "get_item_or_404",
    "get_withdrawal_or_404",
    "is_low_stock",
    "list_items",
    "list_withdrawals",
    "update_item",
    "update_withdrawal",
]
