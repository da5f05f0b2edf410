"""Disciplinary records issued against officers."""
import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, JSON, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, enum_column


class PenaltyType(str, enum.Enum):
    warning = "warning"
    suspension = "suspension"
    fine = "fine"
    termination = "termination"
    other = "other"


class DisciplineStatus(str, enum.Enum):
    pending = "pending"
    issued = "issued"
    appealed = "appealed"
    resolved = "resolved"


class DisciplineRecord(Base):
    """One violation and the penalty handed out for it.

    ``officer_id`` is informational and not a foreign key.
    """

    __tablename__ = "discipline_records"
    __table_args__ = (
        Index("ix_discipline_records_status_created", "status", "created_at"),
        Index("ix_discipline_records_officer_created", "officer_name", "created_at"),
        CheckConstraint("penalty_amount IS NULL OR penalty_amount >= 0", name="ck_discipline_amount_non_negative"),
    )

    officer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    officer_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    violation: Mapped[str] = mapped_column(Text, nullable=False)
    violation_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    penalty: Mapped[str] = mapped_column(Text, nullable=False)
    penalty_type: Mapped[PenaltyType] = mapped_column(
        enum_column(PenaltyType, "penaltytype"), nullable=False, index=True
    )
    penalty_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    issued_by: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    issued_by_name: Mapped[str] = mapped_column(String(200), nullable=False)
    status: Mapped[DisciplineStatus] = mapped_column(
        enum_column(DisciplineStatus, "disciplinestatus"), nullable=False, default=DisciplineStatus.pending
    )
    appeal_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    attachments: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
