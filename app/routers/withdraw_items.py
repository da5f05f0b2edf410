"""Withdrawal endpoints; creating one draws down the matching inventory stock."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.inventory import WithdrawItem
from app.routers.params import page_params
from app.schemas.base import MessageResponse, PageParams
from app.schemas.inventory import (
    WithdrawCreate,
    WithdrawPage,
    WithdrawRead,
    WithdrawResponse,
    WithdrawUpdate,
)
from app.security import Actor, current_actor
from app.services import inventory as inventory_service
from app.utils.request_context import RequestContext, request_context

router = APIRouter(prefix="/withdraw-items", tags=["withdraw-items"])


@router.post("", response_model=WithdrawResponse, status_code=status.HTTP_201_CREATED)
def create_withdrawal(
    payload: WithdrawCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
    context: RequestContext = Depends(request_context),
) -> WithdrawResponse:
    withdrawal, movement = inventory_service.create_withdrawal(db, payload, actor, context=context)
    return WithdrawResponse(data=WithdrawRead.model_validate(withdrawal), stock=movement)


@router.get("", response_model=WithdrawPage)
def list_withdrawals(
    params: PageParams = Depends(page_params),
    search: str | None = Query(default=None),
    withdrawn_by: int | None = Query(default=None, alias="withdrawnBy"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> WithdrawPage:
    rows, total = inventory_service.list_withdrawals(
        db, offset=params.offset, limit=params.limit, search=search, withdrawn_by=withdrawn_by
    )
    return WithdrawPage(
        data=[WithdrawRead.model_validate(row) for row in rows],
        pagination=params.pagination(total),
    )


@router.get("/{withdrawal_id}", response_model=WithdrawRead)
def get_withdrawal(
    withdrawal_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> WithdrawItem:
    return inventory_service.get_withdrawal_or_404(db, withdrawal_id)


@router.put("/{withdrawal_id}", response_model=WithdrawRead)
def update_withdrawal(
    withdrawal_id: int,
    payload: WithdrawUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
    context: RequestContext = Depends(request_context),
) -> WithdrawItem:
    """Edit unit or notes; officers may only touch their own withdrawals."""

    return inventory_service.update_withdrawal(db, withdrawal_id, payload, actor, context=context)


@router.delete("/{withdrawal_id}", response_model=MessageResponse)
def delete_withdrawal(
    withdrawal_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
    context: RequestContext = Depends(request_context),
) -> MessageResponse:
    inventory_service.delete_withdrawal(db, withdrawal_id, actor, context=context)
    return MessageResponse(message="Withdrawal deleted")
