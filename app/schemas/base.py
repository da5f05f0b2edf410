"""Shared schema building blocks."""
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.utils.time import ensure_utc

# Naive datetimes read back from SQLite are UTC; make that explicit on the wire.
UTCDateTime = Annotated[datetime, AfterValidator(ensure_utc)]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class PageParams(CamelModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def pagination(self, total: int) -> Pagination:
        pages = (total + self.limit - 1) // self.limit
        return Pagination(page=self.page, limit=self.limit, total=total, pages=pages)


class MessageResponse(CamelModel):
    success: bool = True
    message: str
