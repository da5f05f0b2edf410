"""Shared query-parameter dependencies."""
from fastapi import Query

from app.schemas.base import PageParams


def page_params(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> PageParams:
    return PageParams(page=page, limit=limit)


__all__ = ["page_params"]
