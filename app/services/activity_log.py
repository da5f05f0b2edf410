"""Activity log persistence, querying, purge and analytics."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

from fastapi.encoders import jsonable_encoder
from sqlalchemy import String, cast, delete, desc, extract, func, or_, select
from sqlalchemy.orm import Session

from app.models.activity_log import ActivityAction, ActivityLog
from app.schemas.activity_log import (
    ActivityAnalytics,
    AnalyticsBreakdowns,
    AnalyticsSummary,
    AnalyticsTrends,
    CountBucket,
    DailyCount,
    EntityCount,
    PerformerCount,
)
from app.utils.request_context import UNKNOWN, RequestContext
from app.utils.time import end_of_day, ensure_utc, start_of_day, utcnow

logger = logging.getLogger(__name__)

PERIODS: dict[str, timedelta | None] = {
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "90d": timedelta(days=90),
    "1y": timedelta(days=365),
    "all": None,
}
DAILY_TREND_DAYS = 30
TOP_N = 10

SORT_FIELDS = {
    "createdAt": ActivityLog.created_at,
    "action": ActivityLog.action,
    "entityType": ActivityLog.entity_type,
    "entityName": ActivityLog.entity_name,
    "performedByName": ActivityLog.performed_by_name,
}


def log_activity(
    db: Session,
    *,
    action: ActivityAction,
    entity_type: str,
    performed_by: int,
    performed_by_name: str,
    entity_id: str | int | None = None,
    entity_name: str | None = None,
    changes: list[dict[str, Any]] | None = None,
    metadata: dict[str, Any] | None = None,
    context: RequestContext | None = None,
) -> ActivityLog:
    """Append one entry to the activity log and commit it."""

    entry = ActivityLog(
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        entity_name=entity_name,
        performed_by=performed_by,
        performed_by_name=performed_by_name,
        changes=jsonable_encoder(changes) if changes else None,
        metadata_json=jsonable_encoder(metadata) if metadata else None,
        ip_address=context.ip_address if context else UNKNOWN,
        user_agent=context.user_agent if context else UNKNOWN,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@dataclass
class ActivityFilters:
    action: ActivityAction | None = None
    entity_type: str | None = None
    performed_by: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    search: str | None = None


def _filter_conditions(filters: ActivityFilters) -> list[Any]:
    conditions: list[Any] = []
    if filters.action is not None:
        conditions.append(ActivityLog.action == filters.action)
    if filters.entity_type:
        conditions.append(ActivityLog.entity_type == filters.entity_type)
    if filters.performed_by is not None:
        conditions.append(ActivityLog.performed_by == filters.performed_by)
    if filters.start_date is not None:
        conditions.append(ActivityLog.created_at >= start_of_day(filters.start_date))
    if filters.end_date is not None:
        conditions.append(ActivityLog.created_at <= end_of_day(filters.end_date))
    if filters.search:
        pattern = f"%{filters.search}%"
        conditions.append(
            or_(
                ActivityLog.entity_name.ilike(pattern),
                ActivityLog.performed_by_name.ilike(pattern),
                ActivityLog.entity_type.ilike(pattern),
                cast(ActivityLog.action, String).ilike(pattern),
            )
        )
    return conditions


def list_activity(
    db: Session,
    filters: ActivityFilters,
    *,
    offset: int,
    limit: int,
    sort: str = "createdAt",
    sort_order: str = "desc",
) -> tuple[list[ActivityLog], int]:
    """Return one page of matching entries and the total match count."""

    conditions = _filter_conditions(filters)
    column = SORT_FIELDS.get(sort, ActivityLog.created_at)
    if sort_order == "asc":
        ordering = (column.asc(), ActivityLog.id.asc())
    else:
        ordering = (column.desc(), ActivityLog.id.desc())

    stmt = select(ActivityLog).where(*conditions).order_by(*ordering).offset(offset).limit(limit)
    total_stmt = select(func.count()).select_from(ActivityLog).where(*conditions)
    rows = list(db.scalars(stmt).all())
    total = db.scalar(total_stmt) or 0
    return rows, total


def purge_activity(db: Session) -> int:
    """Delete every activity entry and return how many existed beforehand."""

    count_before = db.scalar(select(func.count()).select_from(ActivityLog)) or 0
    db.execute(delete(ActivityLog))
    db.commit()
    logger.info("Activity log purged", extra={"deleted_count": count_before})
    return count_before


def _period_conditions(
    period: str, start_date: date | None, end_date: date | None, now: datetime
) -> list[Any]:
    if start_date is not None and end_date is not None:
        return [
            ActivityLog.created_at >= start_of_day(start_date),
            ActivityLog.created_at <= end_of_day(end_date),
        ]
    window = PERIODS.get(period)
    if window is None:
        return []
    return [ActivityLog.created_at >= now - window]


def _daily_trend(db: Session, conditions: list[Any], today: date) -> list[DailyCount]:
    first_day = today - timedelta(days=DAILY_TREND_DAYS - 1)
    counts = {first_day + timedelta(days=offset): 0 for offset in range(DAILY_TREND_DAYS)}
    stmt = select(ActivityLog.created_at).where(*conditions, ActivityLog.created_at >= start_of_day(first_day))
    for created_at in db.scalars(stmt):
        day = ensure_utc(created_at).date()
        if day in counts:
            counts[day] += 1
    return [DailyCount(date=day.isoformat(), count=count) for day, count in counts.items()]


def activity_analytics(
    db: Session,
    *,
    period: str = "30d",
    start_date: date | None = None,
    end_date: date | None = None,
    now: datetime | None = None,
) -> ActivityAnalytics:
    """Aggregate counts over the selected window."""

    now = now or utcnow()
    conditions = _period_conditions(period, start_date, end_date, now)
    count_col = func.count(ActivityLog.id).label("count")

    total = db.scalar(select(func.count()).select_from(ActivityLog).where(*conditions)) or 0

    by_action = [
        CountBucket(key=action.value if isinstance(action, ActivityAction) else action, count=count)
        for action, count in db.execute(
            select(ActivityLog.action, count_col)
            .where(*conditions)
            .group_by(ActivityLog.action)
            .order_by(desc("count"), ActivityLog.action)
        )
    ]

    by_entity_type = [
        CountBucket(key=entity_type, count=count)
        for entity_type, count in db.execute(
            select(ActivityLog.entity_type, count_col)
            .where(*conditions)
            .group_by(ActivityLog.entity_type)
            .order_by(desc("count"), ActivityLog.entity_type)
            .limit(TOP_N)
        )
    ]

    top_performers = [
        PerformerCount(performed_by=performer, name=name, count=count)
        for performer, name, count in db.execute(
            select(ActivityLog.performed_by, func.max(ActivityLog.performed_by_name), count_col)
            .where(*conditions)
            .group_by(ActivityLog.performed_by)
            .order_by(desc("count"), ActivityLog.performed_by)
            .limit(TOP_N)
        )
    ]

    hour_col = extract("hour", ActivityLog.created_at).label("hour")
    hourly = [
        CountBucket(key=int(hour), count=count)
        for hour, count in db.execute(
            select(hour_col, count_col).where(*conditions).group_by(hour_col).order_by(hour_col)
        )
        if hour is not None
    ]

    most_active_entities = [
        EntityCount(entity_type=entity_type, entity_name=entity_name, count=count)
        for entity_type, entity_name, count in db.execute(
            select(ActivityLog.entity_type, ActivityLog.entity_name, count_col)
            .where(*conditions, ActivityLog.entity_name.is_not(None))
            .group_by(ActivityLog.entity_type, ActivityLog.entity_name)
            .order_by(desc("count"), ActivityLog.entity_type, ActivityLog.entity_name)
            .limit(TOP_N)
        )
    ]

    label = period if start_date is None or end_date is None else "custom"
    return ActivityAnalytics(
        summary=AnalyticsSummary(total_activities=total, period=label),
        breakdowns=AnalyticsBreakdowns(by_action=by_action, by_entity_type=by_entity_type),
        trends=AnalyticsTrends(daily=_daily_trend(db, conditions, now.date()), hourly=hourly),
        top_performers=top_performers,
        most_active_entities=most_active_entities,
    )


__all__ = [
    "ActivityFilters",
    "PERIODS",
    "activity_analytics",
    "list_activity",
    "log_activity",
    "purge_activity",
]
