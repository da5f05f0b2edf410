"""Blacklist entries and their fine payments."""
from __future__ import annotations

import logging
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.models.activity_log import ActivityAction
from app.models.blacklist import BlacklistEntry, PaymentStatus
from app.schemas.blacklist import BlacklistCreate, BlacklistUpdate, PaymentUpdate
from app.security import Actor
from app.services.observers import DomainEvent, publish
from app.utils.changes import detect_changes, snapshot_row
from app.utils.errors import error_response
from app.utils.request_context import RequestContext
from app.utils.time import ensure_utc, utcnow

logger = logging.getLogger(__name__)

_NON_NULLABLE_FIELDS = {"reason", "category", "severity", "is_active"}


def _money(value: float | None) -> Decimal | None:
    return None if value is None else Decimal(str(value)).quantize(Decimal("0.01"))


def _entry_name(entry: BlacklistEntry) -> str:
    return f"Blacklist: {entry.name}"


def get_entry_or_404(db: Session, entry_id: int) -> BlacklistEntry:
    entry = db.get(BlacklistEntry, entry_id)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_response("BLACKLIST_NOT_FOUND", "Blacklist entry not found."),
        )
    return entry


def _require_owner_or_admin(entry: BlacklistEntry, actor: Actor) -> None:
    if not actor.is_admin and entry.added_by != actor.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=error_response("FORBIDDEN", "Only an admin or the person who added this entry may change it."),
        )


def list_entries(
    db: Session,
    *,
    offset: int,
    limit: int,
    search: str | None = None,
    is_active: bool | None = None,
    payment_status: PaymentStatus | None = None,
) -> tuple[list[BlacklistEntry], int]:
    """Every user sees every entry; newest first."""

    conditions = []
    if search:
        pattern = f"%{search}%"
        conditions.append(
            or_(
                BlacklistEntry.name.ilike(pattern),
                BlacklistEntry.reason.ilike(pattern),
                BlacklistEntry.notes.ilike(pattern),
            )
        )
    if is_active is not None:
        conditions.append(BlacklistEntry.is_active.is_(is_active))
    if payment_status is not None:
        conditions.append(BlacklistEntry.payment_status == payment_status)

    stmt = (
        select(BlacklistEntry)
        .where(*conditions)
        .order_by(BlacklistEntry.created_at.desc(), BlacklistEntry.id.desc())
        .offset(offset)
        .limit(limit)
    )
    total = db.scalar(select(func.count()).select_from(BlacklistEntry).where(*conditions)) or 0
    return list(db.scalars(stmt).all()), total


def create_entry(
    db: Session,
    payload: BlacklistCreate,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> BlacklistEntry:
    """Add an entry; the charge leads the stored reason, extra detail follows it."""

    reason = payload.charge.strip()
    if payload.reason and payload.reason.strip():
        reason += f"\n\nDetails: {payload.reason.strip()}"

    entry = BlacklistEntry(
        name=payload.name.strip(),
        reason=reason,
        category=payload.category,
        severity=payload.severity,
        added_by=actor.user_id,
        added_by_name=actor.name,
        is_active=True,
        expires_at=ensure_utc(payload.expires_at),
        notes=payload.notes.strip() if payload.notes else None,
        fine_amount=_money(payload.fine_amount),
        payment_status=PaymentStatus.unpaid,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    publish(
        db,
        DomainEvent(
            action=ActivityAction.create,
            entity_type="Blacklist",
            entity_id=entry.id,
            entity_name=_entry_name(entry),
            actor=actor,
            metadata={
                "name": entry.name,
                "category": entry.category.value,
                "severity": entry.severity.value,
                "fineAmount": entry.fine_amount,
            },
            context=context,
            notify_category="blacklist",
        ),
    )
    return entry


def update_entry(
    db: Session,
    entry_id: int,
    payload: BlacklistUpdate,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> BlacklistEntry:
    entry = get_entry_or_404(db, entry_id)
    _require_owner_or_admin(entry, actor)
    before = snapshot_row(entry)

    for field_name, value in payload.model_dump(exclude_unset=True).items():
        if field_name in _NON_NULLABLE_FIELDS and value is None:
            continue
        if field_name == "fine_amount":
            value = _money(value)
        elif field_name == "expires_at":
            value = ensure_utc(value)
        setattr(entry, field_name, value)
    db.commit()
    db.refresh(entry)

    publish(
        db,
        DomainEvent(
            action=ActivityAction.update,
            entity_type="Blacklist",
            entity_id=entry.id,
            entity_name=_entry_name(entry),
            actor=actor,
            changes=detect_changes(before, snapshot_row(entry)),
            context=context,
            notify_category="blacklist",
        ),
    )
    return entry


def set_payment_status(
    db: Session,
    entry_id: int,
    payload: PaymentUpdate,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> BlacklistEntry:
    """Mark the fine paid (stamping who and when) or back to unpaid.

    Setting the status it already has changes nothing and logs nothing.
    """

    entry = get_entry_or_404(db, entry_id)
    new_status = PaymentStatus(payload.payment_status)
    old_status = entry.payment_status
    if new_status is old_status:
        return entry

    entry.payment_status = new_status
    if new_status is PaymentStatus.paid:
        entry.paid_at = utcnow()
        entry.paid_by = actor.user_id
        entry.paid_by_name = actor.name
    else:
        entry.paid_at = None
        entry.paid_by = None
        entry.paid_by_name = None
    db.commit()
    db.refresh(entry)
    logger.info(
        "Blacklist payment status changed",
        extra={"entry_id": entry.id, "old_status": old_status.value, "new_status": new_status.value},
    )

    publish(
        db,
        DomainEvent(
            action=ActivityAction.update,
            entity_type="Blacklist",
            entity_id=entry.id,
            entity_name=_entry_name(entry),
            actor=actor,
            changes=[{"field": "paymentStatus", "oldValue": old_status.value, "newValue": new_status.value}],
            metadata={"name": entry.name, "paymentStatus": new_status.value},
            context=context,
            notify_category="blacklist",
        ),
    )
    return entry


def delete_entry(
    db: Session,
    entry_id: int,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> None:
    entry = get_entry_or_404(db, entry_id)
    _require_owner_or_admin(entry, actor)
    name = _entry_name(entry)
    deleted_name = entry.name
    db.delete(entry)
    db.commit()

    publish(
        db,
        DomainEvent(
            action=ActivityAction.delete,
            entity_type="Blacklist",
            entity_id=entry_id,
            entity_name=name,
            actor=actor,
            metadata={"deletedName": deleted_name},
            context=context,
            notify_category="blacklist",
        ),
    )


__all__ = [
    "create_entry",
    "delete_entry",
    "get_entry_or_404",
    "list_entries",
    "set_payment_status",
    "update_entry",
]
