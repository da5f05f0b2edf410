"""Personnel records."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.activity_log import ActivityAction
from app.models.user import User, UserRole
from app.schemas.user import UserCreate, UserUpdate
from app.security import Actor
from app.services.observers import DomainEvent, publish
from app.utils.changes import detect_changes, snapshot_row
from app.utils.errors import error_response
from app.utils.request_context import RequestContext

logger = logging.getLogger(__name__)

_NON_NULLABLE = {"name", "role", "is_active"}


def _user_exists() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error_response("USER_EXISTS", "A user with this username already exists."),
    )


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_response("USER_NOT_FOUND", "User not found."),
        )
    return user


def list_users(
    db: Session,
    *,
    offset: int,
    limit: int,
    search: str | None = None,
    role: UserRole | None = None,
) -> tuple[list[User], int]:
    conditions = []
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(User.name.ilike(pattern), User.username.ilike(pattern), User.rank.ilike(pattern)))
    if role is not None:
        conditions.append(User.role == role)

    stmt = select(User).where(*conditions).order_by(User.name, User.id).offset(offset).limit(limit)
    total = db.scalar(select(func.count()).select_from(User).where(*conditions)) or 0
    return list(db.scalars(stmt).all()), total


def create_user(
    db: Session,
    payload: UserCreate,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> User:
    if db.scalar(select(User.id).where(User.username == payload.username)) is not None:
        raise _user_exists()

    user = User(**payload.model_dump())
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise _user_exists() from exc
    db.refresh(user)

    publish(
        db,
        DomainEvent(
            action=ActivityAction.create,
            entity_type="User",
            entity_id=user.id,
            entity_name=user.name,
            actor=actor,
            metadata={"username": user.username, "role": user.role.value},
            context=context,
            notify_category="admin",
        ),
    )
    return user


def update_user(
    db: Session,
    user_id: int,
    payload: UserUpdate,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> User:
    user = get_user_or_404(db, user_id)
    before = snapshot_row(user)

    for field_name, value in payload.model_dump(exclude_unset=True).items():
        if field_name in _NON_NULLABLE and value is None:
            continue
        setattr(user, field_name, value)
    db.commit()
    db.refresh(user)

    publish(
        db,
        DomainEvent(
            action=ActivityAction.update,
            entity_type="User",
            entity_id=user.id,
            entity_name=user.name,
            actor=actor,
            changes=detect_changes(before, snapshot_row(user)),
            context=context,
            notify_category="admin",
        ),
    )
    return user


def delete_user(
    db: Session,
    user_id: int,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> None:
    user = get_user_or_404(db, user_id)
    name, username = user.name, user.username
    db.delete(user)
    db.commit()
    logger.info("User deleted", extra={"user_id": user_id})

    publish(
        db,
        DomainEvent(
            action=ActivityAction.delete,
            entity_type="User",
            entity_id=user_id,
            entity_name=name,
            actor=actor,
            metadata={"username": username},
            context=context,
            notify_category="admin",
        ),
    )


__all__ = ["create_user", "delete_user", "get_user_or_404", "list_users", "update_user"]
