"""Leave requests and their review."""
from __future__ import annotations

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.activity_log import ActivityAction
from app.models.leave import Leave, LeaveStatus
from app.schemas.leave import LeaveCreate, LeaveReview
from app.security import Actor
from app.services.notifications import notify_leave_reviewed
from app.services.observers import DomainEvent, publish
from app.utils.best_effort import best_effort
from app.utils.errors import error_response
from app.utils.request_context import RequestContext
from app.utils.time import utcnow

REVIEW_ACTIONS = {
    LeaveStatus.approved: ActivityAction.approve,
    LeaveStatus.rejected: ActivityAction.reject,
}


def get_leave_or_404(db: Session, leave_id: int, actor: Actor | None = None) -> Leave:
    leave = db.get(Leave, leave_id)
    hidden = actor is not None and not actor.is_admin and leave is not None and leave.requested_by != actor.user_id
    if leave is None or hidden:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_response("LEAVE_NOT_FOUND", "Leave request not found."),
        )
    return leave


def list_leaves(
    db: Session,
    actor: Actor,
    *,
    offset: int,
    limit: int,
    status_filter: LeaveStatus | None = None,
) -> tuple[list[Leave], int]:
    """Admins see every request; officers only their own."""

    conditions = []
    if not actor.is_admin:
        conditions.append(Leave.requested_by == actor.user_id)
    if status_filter is not None:
        conditions.append(Leave.status == status_filter)

    stmt = (
        select(Leave)
        .where(*conditions)
        .order_by(Leave.created_at.desc(), Leave.id.desc())
        .offset(offset)
        .limit(limit)
    )
    total = db.scalar(select(func.count()).select_from(Leave).where(*conditions)) or 0
    return list(db.scalars(stmt).all()), total


def create_leave(
    db: Session,
    payload: LeaveCreate,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> Leave:
    leave = Leave(
        leave_type=payload.leave_type,
        reason=payload.reason,
        start_date=payload.start_date,
        end_date=payload.end_date,
        duration=float((payload.end_date - payload.start_date).days + 1),
        requested_by=actor.user_id,
        requested_by_name=actor.name,
        status=LeaveStatus.pending,
    )
    db.add(leave)
    db.commit()
    db.refresh(leave)

    publish(
        db,
        DomainEvent(
            action=ActivityAction.create,
            entity_type="Leave",
            entity_id=leave.id,
            entity_name=f"{leave.leave_type.value} leave",
            actor=actor,
            metadata={
                "leaveType": leave.leave_type.value,
                "startDate": leave.start_date,
                "endDate": leave.end_date,
                "duration": leave.duration,
            },
            context=context,
            notify_category="leaves",
        ),
    )
    return leave


def review_leave(
    db: Session,
    leave_id: int,
    payload: LeaveReview,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> Leave:
    """Approve or reject a pending request."""

    leave = get_leave_or_404(db, leave_id)
    if leave.status is not LeaveStatus.pending:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=error_response(
                "LEAVE_ALREADY_REVIEWED",
                "Leave request has already been reviewed.",
                {"status": leave.status.value},
            ),
        )

    old_status = leave.status
    new_status = LeaveStatus(payload.status)
    leave.status = new_status
    leave.review_notes = payload.review_notes
    leave.reviewed_by = actor.user_id
    leave.reviewed_by_name = actor.name
    leave.reviewed_at = utcnow()
    db.commit()
    db.refresh(leave)

    publish(
        db,
        DomainEvent(
            action=REVIEW_ACTIONS[new_status],
            entity_type="Leave",
            entity_id=leave.id,
            entity_name=f"{leave.leave_type.value} leave of {leave.requested_by_name}",
            actor=actor,
            changes=[{"field": "status", "oldValue": old_status.value, "newValue": new_status.value}],
            metadata={"requestedBy": leave.requested_by, "reviewNotes": leave.review_notes},
            context=context,
            notify_category="leaves",
        ),
    )
    best_effort("leave_notification", notify_leave_reviewed, db, leave, session=db)
    return leave


__all__ = ["create_leave", "get_leave_or_404", "list_leaves", "review_leave"]
