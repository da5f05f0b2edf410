"""Discipline record schemas."""
from datetime import datetime

from pydantic import Field

from app.models.discipline import DisciplineStatus, PenaltyType
from app.schemas.base import CamelModel, Pagination, UTCDateTime


class DisciplineCreate(CamelModel):
    officer_name: str = Field(min_length=1, max_length=200)
    officer_id: int | None = None
    violation: str = Field(min_length=1)
    violation_date: datetime | None = None
    penalty: str = Field(min_length=1)
    penalty_type: PenaltyType
    penalty_amount: float | None = Field(default=None, ge=0)
    status: DisciplineStatus = DisciplineStatus.pending
    appeal_reason: str | None = None
    notes: str | None = None
    attachments: list[str] = Field(default_factory=list)


class DisciplineUpdate(CamelModel):
    violation: str | None = Field(default=None, min_length=1)
    penalty: str | None = Field(default=None, min_length=1)
    penalty_type: PenaltyType | None = None
    penalty_amount: float | None = Field(default=None, ge=0)
    status: DisciplineStatus | None = None
    appeal_reason: str | None = None
    notes: str | None = None
    attachments: list[str] | None = None


class DisciplineRead(CamelModel):
    id: int
    officer_name: str
    officer_id: int | None
    violation: str
    violation_date: UTCDateTime
    penalty: str
    penalty_type: PenaltyType
    penalty_amount: float | None
    issued_by: int
    issued_by_name: str
    status: DisciplineStatus
    appeal_reason: str | None
    resolved_at: UTCDateTime | None
    notes: str | None
    attachments: list[str]
    created_at: UTCDateTime
    updated_at: UTCDateTime


class DisciplinePage(CamelModel):
    data: list[DisciplineRead]
    pagination: Pagination
