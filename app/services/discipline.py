"""Disciplinary records."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.models.activity_log import ActivityAction
from app.models.discipline import DisciplineRecord, DisciplineStatus, PenaltyType
from app.schemas.discipline import DisciplineCreate, DisciplineUpdate
from app.security import Actor
from app.services.observers import DomainEvent, publish
from app.utils.changes import detect_changes, snapshot_row
from app.utils.errors import error_response
from app.utils.request_context import RequestContext
from app.utils.time import end_of_day, ensure_utc, start_of_day, utcnow

_NON_NULLABLE_FIELDS = {"violation", "penalty", "penalty_type", "status", "attachments"}


def _money(value: float | None) -> Decimal | None:
    return None if value is None else Decimal(str(value)).quantize(Decimal("0.01"))


def _record_name(record: DisciplineRecord) -> str:
    return f"Discipline: {record.officer_name}"


def _require_appeal_reason(record_status: DisciplineStatus, appeal_reason: str | None) -> None:
    if record_status is DisciplineStatus.appealed and not (appeal_reason or "").strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_response("VALIDATION_ERROR", "An appealed record needs an appeal reason."),
        )


def get_record_or_404(db: Session, record_id: int) -> DisciplineRecord:
    record = db.get(DisciplineRecord, record_id)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_response("DISCIPLINE_NOT_FOUND", "Discipline record not found."),
        )
    return record


def list_records(
    db: Session,
    *,
    offset: int,
    limit: int,
    search: str | None = None,
    status_filter: DisciplineStatus | None = None,
    penalty_type: PenaltyType | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> tuple[list[DisciplineRecord], int]:
    """Date bounds apply to ``violation_date``; both ends are inclusive days."""

    conditions = []
    if search:
        pattern = f"%{search}%"
        conditions.append(
            or_(
                DisciplineRecord.officer_name.ilike(pattern),
                DisciplineRecord.violation.ilike(pattern),
                DisciplineRecord.issued_by_name.ilike(pattern),
            )
        )
    if status_filter is not None:
        conditions.append(DisciplineRecord.status == status_filter)
    if penalty_type is not None:
        conditions.append(DisciplineRecord.penalty_type == penalty_type)
    if start_date is not None:
        conditions.append(DisciplineRecord.violation_date >= start_of_day(start_date))
    if end_date is not None:
        conditions.append(DisciplineRecord.violation_date <= end_of_day(end_date))

    stmt = (
        select(DisciplineRecord)
        .where(*conditions)
        .order_by(DisciplineRecord.created_at.desc(), DisciplineRecord.id.desc())
        .offset(offset)
        .limit(limit)
    )
    total = db.scalar(select(func.count()).select_from(DisciplineRecord).where(*conditions)) or 0
    return list(db.scalars(stmt).all()), total


def create_record(
    db: Session,
    payload: DisciplineCreate,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> DisciplineRecord:
    _require_appeal_reason(payload.status, payload.appeal_reason)
    record = DisciplineRecord(
        officer_name=payload.officer_name.strip(),
        officer_id=payload.officer_id,
        violation=payload.violation,
        violation_date=ensure_utc(payload.violation_date) or utcnow(),
        penalty=payload.penalty,
        penalty_type=payload.penalty_type,
        penalty_amount=_money(payload.penalty_amount),
        issued_by=actor.user_id,
        issued_by_name=actor.name,
        status=payload.status,
        appeal_reason=payload.appeal_reason,
        notes=payload.notes,
        attachments=list(payload.attachments),
    )
    if record.status is DisciplineStatus.resolved:
        record.resolved_at = utcnow()
    db.add(record)
    db.commit()
    db.refresh(record)

    publish(
        db,
        DomainEvent(
            action=ActivityAction.create,
            entity_type="Discipline",
            entity_id=record.id,
            entity_name=_record_name(record),
            actor=actor,
            metadata={
                "officerName": record.officer_name,
                "penaltyType": record.penalty_type.value,
                "status": record.status.value,
                "penaltyAmount": record.penalty_amount,
            },
            context=context,
            notify_category="admin",
        ),
    )
    return record


def update_record(
    db: Session,
    record_id: int,
    payload: DisciplineUpdate,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> DisciplineRecord:
    """Apply a partial edit; entering ``resolved`` stamps ``resolved_at``, leaving it clears the stamp."""

    record = get_record_or_404(db, record_id)
    before = snapshot_row(record)
    old_status = record.status
    updates = payload.model_dump(exclude_unset=True)
    _require_appeal_reason(
        updates.get("status") or old_status,
        updates["appeal_reason"] if "appeal_reason" in updates else record.appeal_reason,
    )

    for field_name, value in updates.items():
        if field_name in _NON_NULLABLE_FIELDS and value is None:
            continue
        if field_name == "penalty_amount":
            value = _money(value)
        setattr(record, field_name, value)

    if record.status is not old_status:
        record.resolved_at = utcnow() if record.status is DisciplineStatus.resolved else None
    db.commit()
    db.refresh(record)

    publish(
        db,
        DomainEvent(
            action=ActivityAction.update,
            entity_type="Discipline",
            entity_id=record.id,
            entity_name=_record_name(record),
            actor=actor,
            changes=detect_changes(before, snapshot_row(record)),
            context=context,
            notify_category="admin",
        ),
    )
    return record


def delete_record(
    db: Session,
    record_id: int,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> None:
    record = get_record_or_404(db, record_id)
    name = _record_name(record)
    metadata = {"officerName": record.officer_name, "penaltyType": record.penalty_type.value}
    db.delete(record)
    db.commit()

    publish(
        db,
        DomainEvent(
            action=ActivityAction.delete,
            entity_type="Discipline",
            entity_id=record_id,
            entity_name=name,
            actor=actor,
            metadata=metadata,
            context=context,
            notify_category="admin",
        ),
    )


__all__ = ["create_record", "delete_record", "get_record_or_404", "list_records", "update_record"]
