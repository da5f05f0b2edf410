"""Leave request endpoints."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.leave import Leave, LeaveStatus
from app.routers.params import page_params
from app.schemas.base import PageParams
from app.schemas.leave import LeaveCreate, LeavePage, LeaveRead, LeaveReview
from app.security import Actor, current_actor, require_admin
from app.services import leaves as leave_service
from app.utils.request_context import RequestContext, request_context

router = APIRouter(prefix="/leaves", tags=["leaves"])


@router.post("", response_model=LeaveRead, status_code=status.HTTP_201_CREATED)
def request_leave(
    payload: LeaveCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
    context: RequestContext = Depends(request_context),
) -> Leave:
    return leave_service.create_leave(db, payload, actor, context=context)


@router.get("", response_model=LeavePage)
def list_leaves(
    params: PageParams = Depends(page_params),
    status_filter: LeaveStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> LeavePage:
    rows, total = leave_service.list_leaves(
        db, actor, offset=params.offset, limit=params.limit, status_filter=status_filter
    )
    return LeavePage(data=[LeaveRead.model_validate(row) for row in rows], pagination=params.pagination(total))


@router.get("/{leave_id}", response_model=LeaveRead)
def get_leave(
    leave_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> Leave:
    return leave_service.get_leave_or_404(db, leave_id, actor)


@router.put("/{leave_id}/review", response_model=LeaveRead)
def review_leave(
    leave_id: int,
    payload: LeaveReview,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> Leave:
    """Approve or reject a pending request (admin only)."""

    return leave_service.review_leave(db, leave_id, payload, actor, context=context)
