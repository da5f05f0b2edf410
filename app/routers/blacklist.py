"""Blacklist endpoints."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.blacklist import BlacklistEntry, PaymentStatus
from app.routers.params import page_params
from app.schemas.base import MessageResponse, PageParams
from app.schemas.blacklist import BlacklistCreate, BlacklistPage, BlacklistRead, BlacklistUpdate, PaymentUpdate
from app.security import Actor, current_actor
from app.services import blacklist as blacklist_service
from app.utils.request_context import RequestContext, request_context

router = APIRouter(prefix="/blacklist", tags=["blacklist"])


@router.get("", response_model=BlacklistPage)
def list_blacklist(
    params: PageParams = Depends(page_params),
    search: str | None = Query(default=None),
    is_active: bool | None = Query(default=None, alias="isActive"),
    payment_status: PaymentStatus | None = Query(default=None, alias="paymentStatus"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> BlacklistPage:
    rows, total = blacklist_service.list_entries(
        db,
        offset=params.offset,
        limit=params.limit,
        search=search,
        is_active=is_active,
        payment_status=payment_status,
    )
    return BlacklistPage(data=[BlacklistRead.model_validate(row) for row in rows], pagination=params.pagination(total))


@router.post("", response_model=BlacklistRead, status_code=status.HTTP_201_CREATED)
def add_to_blacklist(
    payload: BlacklistCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
    context: RequestContext = Depends(request_context),
) -> BlacklistEntry:
    return blacklist_service.create_entry(db, payload, actor, context=context)


@router.put("/{entry_id}", response_model=BlacklistRead)
def update_blacklist_entry(
    entry_id: int,
    payload: BlacklistUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
    context: RequestContext = Depends(request_context),
) -> BlacklistEntry:
    """Admins and the officer who added the entry may edit it."""

    return blacklist_service.update_entry(db, entry_id, payload, actor, context=context)


@router.put("/{entry_id}/payment", response_model=BlacklistRead)
def update_payment_status(
    entry_id: int,
    payload: PaymentUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
    context: RequestContext = Depends(request_context),
) -> BlacklistEntry:
    return blacklist_service.set_payment_status(db, entry_id, payload, actor, context=context)


@router.delete("/{entry_id}", response_model=MessageResponse)
def delete_blacklist_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
    context: RequestContext = Depends(request_context),
) -> MessageResponse:
    blacklist_service.delete_entry(db, entry_id, actor, context=context)
    return MessageResponse(message="Blacklist entry deleted")
