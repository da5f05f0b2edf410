"""Inventory and withdrawal schemas."""
from typing import Any

from pydantic import Field

from app.models.inventory import DEFAULT_UNIT
from app.schemas.base import CamelModel, Pagination, UTCDateTime


class InventoryCreate(CamelModel):
    item_name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    current_stock: int = Field(default=0, ge=0)
    unit: str = Field(default=DEFAULT_UNIT, min_length=1, max_length=50)
    min_stock: int | None = Field(default=None, ge=0)
    location: str | None = Field(default=None, max_length=200)
    notes: str | None = None


class InventoryUpdate(CamelModel):
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    current_stock: int | None = Field(default=None, ge=0)
    unit: str | None = Field(default=None, min_length=1, max_length=50)
    min_stock: int | None = Field(default=None, ge=0)
    location: str | None = Field(default=None, max_length=200)
    notes: str | None = None


class InventoryRead(CamelModel):
    id: int
    item_name: str
    description: str | None
    category: str | None
    current_stock: int
    unit: str
    min_stock: int | None
    location: str | None
    notes: str | None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class InventoryPage(CamelModel):
    data: list[InventoryRead]
    pagination: Pagination


class WithdrawCreate(CamelModel):
    item_name: str = Field(min_length=1, max_length=200)
    quantity: int = Field(ge=1)
    unit: str = Field(default=DEFAULT_UNIT, min_length=1, max_length=50)
    notes: str | None = None


class WithdrawUpdate(CamelModel):
    unit: str | None = Field(default=None, min_length=1, max_length=50)
    notes: str | None = None


class WithdrawRead(CamelModel):
    id: int
    item_name: str
    quantity: int
    unit: str
    withdrawn_by: int
    withdrawn_by_name: str
    notes: str | None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class WithdrawPage(CamelModel):
    data: list[WithdrawRead]
    pagination: Pagination


class StockMovement(CamelModel):
    stock_updated: bool = False
    old_stock: int | None = None
    new_stock: int | None = None
    low_stock: bool = False

    def as_metadata(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class WithdrawResponse(CamelModel):
    data: WithdrawRead
    stock: StockMovement
