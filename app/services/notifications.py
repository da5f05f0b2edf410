"""In-app notifications addressed to individual users."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.models.leave import Leave, LeaveStatus
from app.models.notification import Notification, NotificationPriority, NotificationType
from app.schemas.notification import NotificationCreate
from app.security import Actor
from app.services.users import get_user_or_404
from app.utils.errors import error_response
from app.utils.time import ensure_utc, utcnow

logger = logging.getLogger(__name__)


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=error_response("NOTIFICATION_NOT_FOUND", "Notification not found."),
    )


def list_notifications(
    db: Session,
    actor: Actor,
    *,
    offset: int,
    limit: int,
    is_read: bool | None = None,
    type_filter: NotificationType | None = None,
) -> tuple[list[Notification], int, int]:
    """Return one page of the actor's own notifications, the filtered total and the unread count."""

    conditions = [Notification.recipient == actor.user_id]
    if is_read is not None:
        conditions.append(Notification.is_read.is_(is_read))
    if type_filter is not None:
        conditions.append(Notification.type == type_filter)

    stmt = (
        select(Notification)
        .where(*conditions)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset(offset)
        .limit(limit)
    )
    total = db.scalar(select(func.count()).select_from(Notification).where(*conditions)) or 0
    unread = (
        db.scalar(
            select(func.count())
            .select_from(Notification)
            .where(Notification.recipient == actor.user_id, Notification.is_read.is_(False))
        )
        or 0
    )
    return list(db.scalars(stmt).all()), total, unread


def create_notification(db: Session, payload: NotificationCreate, actor: Actor) -> Notification:
    """Addressing anyone but yourself needs the admin role; the recipient must exist."""

    recipient_id = payload.recipient if payload.recipient is not None else actor.user_id
    if recipient_id != actor.user_id and not actor.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=error_response("ADMIN_REQUIRED", "Admin access required to notify other users."),
        )
    recipient = get_user_or_404(db, recipient_id)

    notification = Notification(
        title=payload.title,
        message=payload.message,
        type=payload.type,
        recipient=recipient.id,
        recipient_name=recipient.name,
        related_to=payload.related_to,
        related_id=payload.related_id,
        is_read=False,
        priority=payload.priority,
        action_url=payload.action_url,
        expires_at=ensure_utc(payload.expires_at),
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


def mark_read(db: Session, notification_id: int, actor: Actor) -> Notification:
    notification = db.get(Notification, notification_id)
    # Someone else's notification is indistinguishable from a missing one.
    if notification is None or notification.recipient != actor.user_id:
        raise _not_found()
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = utcnow()
        db.commit()
        db.refresh(notification)
    return notification


def mark_all_read(db: Session, actor: Actor) -> int:
    """Mark every unread notification of the actor as read and return how many changed."""

    now = utcnow()
    result = db.execute(
        update(Notification)
        .where(Notification.recipient == actor.user_id, Notification.is_read.is_(False))
        .values(is_read=True, read_at=now, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.expire_all()
    return result.rowcount or 0


def notify_leave_reviewed(db: Session, leave: Leave) -> Notification:
    """Tell the requester how their leave request was decided."""

    approved = leave.status is LeaveStatus.approved
    message = f"Your {leave.leave_type.value} leave request was {leave.status.value} by {leave.reviewed_by_name}."
    if leave.review_notes:
        message += f" Notes: {leave.review_notes}"

    notification = Notification(
        title="Leave request approved" if approved else "Leave request rejected",
        message=message,
        type=NotificationType.success if approved else NotificationType.warning,
        recipient=leave.requested_by,
        recipient_name=leave.requested_by_name,
        related_to="leave",
        related_id=leave.id,
        is_read=False,
        priority=NotificationPriority.medium,
    )
    db.add(notification)
    db.commit()
    logger.info("Leave review notification stored", extra={"leave_id": leave.id, "recipient": leave.requested_by})
    return notification


__all__ = [
    "create_notification",
    "list_notifications",
    "mark_all_read",
    "mark_read",
    "notify_leave_reviewed",
]
