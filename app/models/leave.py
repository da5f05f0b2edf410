"""Leave request model."""
import enum
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, enum_column


class LeaveType(str, enum.Enum):
    sick = "sick"
    personal = "personal"
    vacation = "vacation"
    emergency = "emergency"
    other = "other"


class LeaveStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    cancelled = "cancelled"


class Leave(Base):
    """A leave request filed by an officer and reviewed by an admin."""

    __tablename__ = "leaves"

    leave_type: Mapped[LeaveType] = mapped_column(enum_column(LeaveType, "leavetype"), nullable=False, index=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    duration: Mapped[float] = mapped_column(Float, nullable=False)
    requested_by: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    requested_by_name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[LeaveStatus] = mapped_column(
        enum_column(LeaveStatus, "leavestatus"), nullable=False, default=LeaveStatus.pending
    )
    reviewed_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    reviewed_by_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    review_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
