"""Blacklist entries: people barred from the station, with an optional fine."""
import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, enum_column


class BlacklistCategory(str, enum.Enum):
    patient = "patient"
    visitor = "visitor"
    vendor = "vendor"
    other = "other"


class BlacklistSeverity(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


class PaymentStatus(str, enum.Enum):
    unpaid = "unpaid"
    paid = "paid"


class BlacklistEntry(Base):
    __tablename__ = "blacklist_entries"
    __table_args__ = (
        Index("ix_blacklist_entries_active_created", "is_active", "created_at"),
        CheckConstraint("fine_amount IS NULL OR fine_amount >= 0", name="ck_blacklist_fine_non_negative"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[BlacklistCategory] = mapped_column(
        enum_column(BlacklistCategory, "blacklistcategory"), nullable=False, default=BlacklistCategory.other
    )
    severity: Mapped[BlacklistSeverity] = mapped_column(
        enum_column(BlacklistSeverity, "blacklistseverity"), nullable=False, default=BlacklistSeverity.medium
    )
    added_by: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    added_by_name: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    fine_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    payment_status: Mapped[PaymentStatus] = mapped_column(
        enum_column(PaymentStatus, "paymentstatus"), nullable=False, default=PaymentStatus.unpaid
    )
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    paid_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    paid_by_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
