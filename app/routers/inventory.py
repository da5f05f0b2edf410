"""Inventory endpoints."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.inventory import InventoryItem
from app.routers.params import page_params
from app.schemas.base import MessageResponse, PageParams
from app.schemas.inventory import InventoryCreate, InventoryPage, InventoryRead, InventoryUpdate
from app.security import Actor, current_actor, require_admin
from app.services import inventory as inventory_service
from app.utils.request_context import RequestContext, request_context

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get("", response_model=InventoryPage)
def list_inventory(
    params: PageParams = Depends(page_params),
    search: str | None = Query(default=None),
    category: str | None = Query(default=None),
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> InventoryPage:
    rows, total = inventory_service.list_items(
        db, offset=params.offset, limit=params.limit, search=search, category=category
    )
    return InventoryPage(
        data=[InventoryRead.model_validate(row) for row in rows],
        pagination=params.pagination(total),
    )


@router.post("", response_model=InventoryRead, status_code=status.HTTP_201_CREATED)
def create_inventory_item(
    payload: InventoryCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> InventoryItem:
    return inventory_service.create_item(db, payload, actor, context=context)


@router.get("/{item_id}", response_model=InventoryRead)
def get_inventory_item(
    item_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> InventoryItem:
    return inventory_service.get_item_or_404(db, item_id)


@router.put("/{item_id}", response_model=InventoryRead)
def update_inventory_item(
    item_id: int,
    payload: InventoryUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> InventoryItem:
    return inventory_service.update_item(db, item_id, payload, actor, context=context)


@router.delete("/{item_id}", response_model=MessageResponse)
def delete_inventory_item(
    item_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> MessageResponse:
    inventory_service.delete_item(db, item_id, actor, context=context)
    return MessageResponse(message="Inventory item deleted")
