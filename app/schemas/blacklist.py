"""Blacklist schemas."""
from datetime import datetime
from typing import Literal

from pydantic import Field

from app.models.blacklist import BlacklistCategory, BlacklistSeverity, PaymentStatus
from app.schemas.base import CamelModel, Pagination, UTCDateTime


class BlacklistCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    charge: str = Field(min_length=1)
    reason: str | None = None
    category: BlacklistCategory = BlacklistCategory.other
    severity: BlacklistSeverity = BlacklistSeverity.medium
    expires_at: datetime | None = None
    notes: str | None = None
    fine_amount: float | None = Field(default=None, ge=0)


class BlacklistUpdate(CamelModel):
    reason: str | None = Field(default=None, min_length=1)
    category: BlacklistCategory | None = None
    severity: BlacklistSeverity | None = None
    is_active: bool | None = None
    expires_at: datetime | None = None
    notes: str | None = None
    fine_amount: float | None = Field(default=None, ge=0)


class PaymentUpdate(CamelModel):
    payment_status: Literal["unpaid", "paid"]


class BlacklistRead(CamelModel):
    id: int
    name: str
    reason: str
    category: BlacklistCategory
    severity: BlacklistSeverity
    added_by: int
    added_by_name: str
    is_active: bool
    expires_at: UTCDateTime | None
    notes: str | None
    fine_amount: float | None
    payment_status: PaymentStatus
    paid_at: UTCDateTime | None
    paid_by: int | None
    paid_by_name: str | None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class BlacklistPage(CamelModel):
    data: list[BlacklistRead]
    pagination: Pagination
