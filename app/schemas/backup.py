"""Backup, restore and schedule schemas."""
from datetime import datetime
from typing import Any

from pydantic import AliasChoices, ConfigDict, Field

from app.models.backup import SNAPSHOT_VERSION, BackupFrequency, BackupStatus
from app.schemas.base import CamelModel, Pagination, UTCDateTime

TIME_PATTERN = r"^([01][0-9]|2[0-3]):[0-5][0-9]$"


class SnapshotMetadata(CamelModel):
    total_collections: int
    total_documents: int


class BackupSnapshot(CamelModel):
    """Full export returned to the caller for download and fed back into restore."""

    version: str = SNAPSHOT_VERSION
    timestamp: UTCDateTime
    created_by: int
    created_by_name: str
    collections: dict[str, list[dict[str, Any]]]
    is_automatic: bool = False
    schedule_id: int | None = None
    status: BackupStatus = BackupStatus.completed
    metadata: SnapshotMetadata


class BackupRequest(CamelModel):
    schedule_id: int | None = None
    is_automatic: bool = False


class BackupResponse(CamelModel):
    success: bool = True
    backup: BackupSnapshot
    message: str


class BackupSummary(CamelModel):
    """History row; the document payload is deliberately absent."""

    id: int
    version: str
    timestamp: UTCDateTime
    created_by: int
    created_by_name: str
    is_automatic: bool
    schedule_id: int | None = None
    status: BackupStatus
    error: str | None = None
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("metadata_json", "metadata"),
    )


class BackupHistoryPage(CamelModel):
    data: list[BackupSummary]
    pagination: Pagination


class RestoreSnapshot(CamelModel):
    """Snapshot shape accepted by restore; unknown keys are tolerated."""

    model_config = ConfigDict(extra="allow")

    version: str | None = None
    timestamp: datetime | str | None = None
    collections: dict[str, list[dict[str, Any]]] | None = None


class RestoreRequest(CamelModel):
    backup: RestoreSnapshot
    clear_existing: bool = False


class RestoreResponse(CamelModel):
    success: bool = True
    message: str
    restored_collections: list[str]
    skipped_collections: list[str] = Field(default_factory=list)


class ScheduleCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    frequency: BackupFrequency
    time: str = Field(pattern=TIME_PATTERN)
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    day_of_month: int | None = Field(default=None, ge=1, le=31)
    retention_days: int | None = Field(default=None, ge=1)
    collections: list[str] | None = None


class ScheduleUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    frequency: BackupFrequency | None = None
    time: str | None = Field(default=None, pattern=TIME_PATTERN)
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    day_of_month: int | None = Field(default=None, ge=1, le=31)
    is_active: bool | None = None
    retention_days: int | None = Field(default=None, ge=1)
    collections: list[str] | None = None


class ScheduleRead(CamelModel):
    id: int
    name: str
    description: str | None = None
    frequency: BackupFrequency
    time: str
    day_of_week: int | None = None
    day_of_month: int | None = None
    is_active: bool
    last_run: UTCDateTime | None = None
    next_run: UTCDateTime | None = None
    created_by: int
    created_by_name: str
    retention_days: int | None = None
    collections: list[str] = Field(default_factory=list)
    created_at: UTCDateTime
    updated_at: UTCDateTime


class ScheduleList(CamelModel):
    data: list[ScheduleRead]


class ScheduleResponse(CamelModel):
    success: bool = True
    data: ScheduleRead
    message: str
