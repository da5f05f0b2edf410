"""User endpoints."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.user import User, UserRole
from app.routers.params import page_params
from app.schemas.base import MessageResponse, PageParams
from app.schemas.user import UserCreate, UserPage, UserRead, UserUpdate
from app.security import Actor, current_actor, require_admin
from app.services import users as users_service
from app.utils.request_context import RequestContext, request_context

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserPage)
def list_users(
    params: PageParams = Depends(page_params),
    search: str | None = Query(default=None),
    role: UserRole | None = Query(default=None),
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> UserPage:
    rows, total = users_service.list_users(
        db, offset=params.offset, limit=params.limit, search=search, role=role
    )
    return UserPage(data=[UserRead.model_validate(row) for row in rows], pagination=params.pagination(total))


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> User:
    """Create a new user (admin only)."""

    return users_service.create_user(db, payload, actor, context=context)


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> User:
    """Retrieve a user by identifier."""

    return users_service.get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> User:
    return users_service.update_user(db, user_id, payload, actor, context=context)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> MessageResponse:
    users_service.delete_user(db, user_id, actor, context=context)
    return MessageResponse(message="User deleted")
