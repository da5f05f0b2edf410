"""Append-only activity log model."""
import enum
from typing import Any

from sqlalchemy import Index, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, enum_column


class ActivityAction(str, enum.Enum):
    create = "create"
    update = "update"
    delete = "delete"
    login = "login"
    logout = "logout"
    view = "view"
    approve = "approve"
    reject = "reject"


class ActivityLog(Base):
    """One audit record of an action performed by a user.

    Rows are never updated once written; the only removal path is the admin
    bulk purge, which leaves a single entry describing itself.
    """

    __tablename__ = "activity_logs"
    __table_args__ = (
        Index("ix_activity_logs_created_at", "created_at"),
        Index("ix_activity_logs_performer_created", "performed_by", "created_at"),
        Index("ix_activity_logs_entity", "entity_type", "entity_id"),
        Index("ix_activity_logs_action_created", "action", "created_at"),
    )

    action: Mapped[ActivityAction] = mapped_column(enum_column(ActivityAction, "activityaction"), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    entity_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    entity_name: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    performed_by: Mapped[int] = mapped_column(Integer, nullable=False)
    performed_by_name: Mapped[str] = mapped_column(String(200), nullable=False)
    changes: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    metadata_json: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSON, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(255), nullable=True)
