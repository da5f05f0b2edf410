"""Activity log schemas."""
from typing import Any

from pydantic import AliasChoices, Field

from app.models.activity_log import ActivityAction
from app.schemas.base import CamelModel, Pagination, UTCDateTime


class ActivityLogRead(CamelModel):
    id: int
    action: ActivityAction
    entity_type: str
    entity_id: str | None = None
    entity_name: str | None = None
    performed_by: int
    performed_by_name: str
    changes: list[dict[str, Any]] | None = None
    metadata: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("metadata_json", "metadata"),
    )
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: UTCDateTime


class ActivityLogPage(CamelModel):
    data: list[ActivityLogRead]
    pagination: Pagination


class ActivityLogPurgeResult(CamelModel):
    message: str
    deleted_count: int


class CountBucket(CamelModel):
    key: str | int | None
    count: int


class DailyCount(CamelModel):
    date: str
    count: int


class PerformerCount(CamelModel):
    performed_by: int
    name: str | None
    count: int


class EntityCount(CamelModel):
    entity_type: str
    entity_name: str
    count: int


class AnalyticsSummary(CamelModel):
    total_activities: int
    period: str


class AnalyticsBreakdowns(CamelModel):
    by_action: list[CountBucket]
    by_entity_type: list[CountBucket]


class AnalyticsTrends(CamelModel):
    daily: list[DailyCount]
    hourly: list[CountBucket]


class ActivityAnalytics(CamelModel):
    summary: AnalyticsSummary
    breakdowns: AnalyticsBreakdowns
    trends: AnalyticsTrends
    top_performers: list[PerformerCount]
    most_active_entities: list[EntityCount]
