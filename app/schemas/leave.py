"""Leave request schemas."""
from datetime import date
from typing import Literal

from pydantic import Field, model_validator

from app.models.leave import LeaveStatus, LeaveType
from app.schemas.base import CamelModel, Pagination, UTCDateTime


class LeaveCreate(CamelModel):
    leave_type: LeaveType
    reason: str = Field(min_length=1)
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _check_range(self) -> "LeaveCreate":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class LeaveReview(CamelModel):
    status: Literal["approved", "rejected"]
    review_notes: str | None = None


class LeaveRead(CamelModel):
    id: int
    leave_type: LeaveType
    reason: str
    start_date: date
    end_date: date
    duration: float
    requested_by: int
    requested_by_name: str
    status: LeaveStatus
    reviewed_by: int | None
    reviewed_by_name: str | None
    review_notes: str | None
    reviewed_at: UTCDateTime | None
    created_at: UTCDateTime


class LeavePage(CamelModel):
    data: list[LeaveRead]
    pagination: Pagination
