"""Activity log endpoints."""
from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.activity_log import ActivityAction
from app.schemas.activity_log import (
    ActivityAnalytics,
    ActivityLogPage,
    ActivityLogPurgeResult,
    ActivityLogRead,
)
from app.schemas.base import PageParams
from app.security import Actor, current_actor, require_admin
from app.services import activity_log as activity_service
from app.services.observers import DomainEvent, publish
from app.routers.params import page_params
from app.utils.request_context import RequestContext, request_context

router = APIRouter(prefix="/activity-log", tags=["activity-log"])

SortField = Literal["createdAt", "action", "entityType", "entityName", "performedByName"]


@router.get("", response_model=ActivityLogPage)
def list_activity_log(
    params: PageParams = Depends(page_params),
    action: ActivityAction | None = Query(default=None),
    entity_type: str | None = Query(default=None, alias="entityType"),
    performed_by: int | None = Query(default=None, alias="performedBy"),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    search: str | None = Query(default=None),
    sort: SortField = Query(default="createdAt"),
    sort_order: Literal["asc", "desc"] = Query(default="desc", alias="sortOrder"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> ActivityLogPage:
    """List activity entries, newest first unless asked otherwise."""

    filters = activity_service.ActivityFilters(
        action=action,
        entity_type=entity_type,
        performed_by=performed_by,
        start_date=start_date,
        end_date=end_date,
        search=search,
    )
    rows, total = activity_service.list_activity(
        db,
        filters,
        offset=params.offset,
        limit=params.limit,
        sort=sort,
        sort_order=sort_order,
    )
    return ActivityLogPage(
        data=[ActivityLogRead.model_validate(row) for row in rows],
        pagination=params.pagination(total),
    )


@router.delete("", response_model=ActivityLogPurgeResult)
def purge_activity_log(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> ActivityLogPurgeResult:
    """Delete every entry, then record the purge itself (admin only)."""

    deleted = activity_service.purge_activity(db)
    publish(
        db,
        DomainEvent(
            action=ActivityAction.delete,
            entity_type="ActivityLog",
            entity_id="all",
            entity_name="All Activity Logs",
            actor=actor,
            metadata={"deletedCount": deleted, "totalBefore": deleted},
            context=context,
            notify_category="admin",
        ),
    )
    return ActivityLogPurgeResult(message="All activity logs deleted", deleted_count=deleted)


@router.get("/analytics", response_model=ActivityAnalytics)
def activity_log_analytics(
    period: Literal["7d", "30d", "90d", "1y", "all"] = Query(default="30d"),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> ActivityAnalytics:
    return activity_service.activity_analytics(db, period=period, start_date=start_date, end_date=end_date)
