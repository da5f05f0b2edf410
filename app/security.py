"""Security dependencies resolving the acting principal from an API key."""
from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.api_key import ApiKey
from app.models.user import UserRole
from app.utils.apikey import find_valid_key
from app.utils.errors import error_response
from app.utils.time import utcnow


@dataclass(frozen=True)
class Actor:
    """The ``(user_id, role, name)`` triple every audited operation consumes."""

    user_id: int
    role: UserRole
    name: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin


def _extract_key(
    authorization: str | None = Header(default=None),
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
) -> str | None:
    """Read the credential from ``Authorization: Bearer ...`` or ``X-API-Key``."""
    if x_api_key:
        return x_api_key.strip()
    if authorization and authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1].strip()
    return None


def require_api_key(
    db: Session = Depends(get_db),
    token: str | None = Depends(_extract_key),
) -> ApiKey:
    """Validate API key tokens and return the corresponding row."""
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_response("UNAUTHORIZED", "API key required."),
        )

    key = find_valid_key(db, token)
    if key is None or key.user is None or not key.user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_response("UNAUTHORIZED", "Invalid or expired API key."),
        )

    key.last_used_at = utcnow()
    db.commit()
    return key


def current_actor(key: ApiKey = Depends(require_api_key)) -> Actor:
    user = key.user
    return Actor(user_id=user.id, role=user.role, name=user.name)


def require_admin(actor: Actor = Depends(current_actor)) -> Actor:
    """Allow the request through only for principals holding the admin role."""

    if not actor.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=error_response("ADMIN_REQUIRED", "Admin access required."),
        )
    return actor


__all__ = ["Actor", "current_actor", "require_admin", "require_api_key"]
