"""Inventory and withdrawal models."""
from sqlalchemy import CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

DEFAULT_UNIT = "piece"


class InventoryItem(Base):
    """A stocked item that officers may withdraw."""

    __tablename__ = "inventory_items"
    __table_args__ = (
        CheckConstraint("current_stock >= 0", name="ck_inventory_non_negative_stock"),
        Index("ix_inventory_items_category", "category"),
    )

    item_name: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    current_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unit: Mapped[str] = mapped_column(String(50), nullable=False, default=DEFAULT_UNIT)
    min_stock: Mapped[int | None] = mapped_column(Integer, nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class WithdrawItem(Base):
    """A record of items taken out of stock by an officer."""

    __tablename__ = "withdraw_items"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_withdraw_items_positive_quantity"),
        Index("ix_withdraw_items_withdrawer_created", "withdrawn_by", "created_at"),
    )

    item_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit: Mapped[str] = mapped_column(String(50), nullable=False, default=DEFAULT_UNIT)
    withdrawn_by: Mapped[int] = mapped_column(Integer, nullable=False)
    withdrawn_by_name: Mapped[str] = mapped_column(String(200), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
