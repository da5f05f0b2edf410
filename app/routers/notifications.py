"""In-app notification endpoints; every user works on their own inbox."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.notification import Notification, NotificationType
from app.routers.params import page_params
from app.schemas.base import PageParams
from app.schemas.notification import MarkAllReadResult, NotificationCreate, NotificationPage, NotificationRead
from app.security import Actor, current_actor
from app.services import notifications as notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationPage)
def list_notifications(
    params: PageParams = Depends(page_params),
    is_read: bool | None = Query(default=None, alias="isRead"),
    type_filter: NotificationType | None = Query(default=None, alias="type"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> NotificationPage:
    rows, total, unread = notification_service.list_notifications(
        db, actor, offset=params.offset, limit=params.limit, is_read=is_read, type_filter=type_filter
    )
    return NotificationPage(
        data=[NotificationRead.model_validate(row) for row in rows],
        pagination=params.pagination(total),
        unread_count=unread,
    )


@router.post("", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> Notification:
    return notification_service.create_notification(db, payload, actor)


@router.put("/read-all", response_model=MarkAllReadResult)
def mark_all_read(
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> MarkAllReadResult:
    return MarkAllReadResult(modified_count=notification_service.mark_all_read(db, actor))


@router.put("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> Notification:
    return notification_service.mark_read(db, notification_id, actor)
