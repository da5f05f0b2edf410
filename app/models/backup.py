"""Backup snapshot and backup schedule models."""
import enum
from datetime import datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, Index, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, enum_column

SNAPSHOT_VERSION = "1.0"


class BackupStatus(str, enum.Enum):
    completed = "completed"
    failed = "failed"
    in_progress = "in-progress"


class BackupFrequency(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


class Backup(Base):
    """A persisted point-in-time copy of every table."""

    __tablename__ = "backups"
    __table_args__ = (
        Index("ix_backups_timestamp", "timestamp"),
        Index("ix_backups_is_automatic", "is_automatic"),
        Index("ix_backups_status", "status"),
    )

    version: Mapped[str] = mapped_column(String(16), nullable=False, default=SNAPSHOT_VERSION)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_by: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created_by_name: Mapped[str] = mapped_column(String(200), nullable=False)
    collections: Mapped[dict[str, list[dict[str, Any]]]] = mapped_column(JSON, nullable=False, default=dict)
    is_automatic: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    schedule_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    status: Mapped[BackupStatus] = mapped_column(
        enum_column(BackupStatus, "backupstatus"), nullable=False, default=BackupStatus.completed
    )
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    metadata_json: Mapped[dict[str, Any]] = mapped_column("metadata", JSON, nullable=False, default=dict)


class BackupSchedule(Base):
    """When a backup should next run. Holds no executor of its own."""

    __tablename__ = "backup_schedules"
    __table_args__ = (Index("ix_backup_schedules_active_next_run", "is_active", "next_run"),)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    frequency: Mapped[BackupFrequency] = mapped_column(
        enum_column(BackupFrequency, "backupfrequency"), nullable=False
    )
    time: Mapped[str] = mapped_column(String(5), nullable=False)
    day_of_week: Mapped[int | None] = mapped_column(Integer, nullable=True)
    day_of_month: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_run: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    next_run: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created_by_name: Mapped[str] = mapped_column(String(200), nullable=False)
    retention_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    collections: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
