"""Backup schedule bookkeeping and next-run computation."""
from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.activity_log import ActivityAction
from app.models.backup import BackupFrequency, BackupSchedule
from app.schemas.backup import ScheduleCreate, ScheduleRead, ScheduleUpdate
from app.security import Actor
from app.services.observers import DomainEvent, publish
from app.utils.changes import DEFAULT_EXCLUDED_FIELDS, detect_changes, snapshot_row
from app.utils.errors import error_response
from app.utils.request_context import RequestContext
from app.utils.time import utcnow

logger = logging.getLogger(__name__)

DEFAULT_DAY_OF_WEEK = 0  # Sunday
DEFAULT_DAY_OF_MONTH = 1
TIMING_FIELDS = frozenset({"frequency", "time", "day_of_week", "day_of_month"})


@dataclass(frozen=True)
class ScheduleTiming:
    frequency: BackupFrequency
    time: str
    day_of_week: int | None = None
    day_of_month: int | None = None

    @classmethod
    def of(cls, schedule: BackupSchedule) -> "ScheduleTiming":
        return cls(
            frequency=BackupFrequency(schedule.frequency),
            time=schedule.time,
            day_of_week=schedule.day_of_week,
            day_of_month=schedule.day_of_month,
        )


def _sunday_based_weekday(moment: datetime) -> int:
    return (moment.weekday() + 1) % 7


def _on_day_of_month(moment: datetime, year: int, month: int, day: int) -> datetime:
    last_day = calendar.monthrange(year, month)[1]
    return moment.replace(year=year, month=month, day=min(day, last_day))


def compute_next_run(timing: ScheduleTiming, now: datetime, tz: tzinfo | None = None) -> datetime:
    """Return the first instant strictly after ``now`` matching ``timing``.

    Wall-clock fields are evaluated in ``tz`` (UTC by default). A monthly day
    past the end of a short month falls on that month's last day. The result
    is returned in UTC.
    """

    zone = tz or UTC
    local_now = now.astimezone(zone) if now.tzinfo else now.replace(tzinfo=zone)
    hours, minutes = (int(part) for part in timing.time.split(":"))
    candidate = local_now.replace(hour=hours, minute=minutes, second=0, microsecond=0)
    frequency = BackupFrequency(timing.frequency)

    if frequency is BackupFrequency.daily:
        if candidate <= local_now:
            candidate += timedelta(days=1)

    elif frequency is BackupFrequency.weekly:
        target = DEFAULT_DAY_OF_WEEK if timing.day_of_week is None else timing.day_of_week
        days_ahead = (target - _sunday_based_weekday(candidate)) % 7
        if days_ahead == 0 and candidate <= local_now:
            days_ahead = 7
        candidate += timedelta(days=days_ahead)

    else:
        day = DEFAULT_DAY_OF_MONTH if timing.day_of_month is None else timing.day_of_month
        candidate = _on_day_of_month(candidate, candidate.year, candidate.month, day)
        if candidate <= local_now:
            year, month = (candidate.year + 1, 1) if candidate.month == 12 else (candidate.year, candidate.month + 1)
            candidate = _on_day_of_month(candidate, year, month, day)

    return candidate.astimezone(UTC)


def schedule_timezone() -> tzinfo:
    return ZoneInfo(get_settings().BACKUP_TIMEZONE)


def next_run_for(schedule: BackupSchedule, now: datetime | None = None) -> datetime | None:
    if not schedule.is_active:
        return None
    return compute_next_run(ScheduleTiming.of(schedule), now or utcnow(), schedule_timezone())


def _validation_error(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error_response("VALIDATION_ERROR", message),
    )


def _check_required_days(frequency: BackupFrequency, day_of_week: int | None, day_of_month: int | None) -> None:
    if frequency is BackupFrequency.weekly and day_of_week is None:
        raise _validation_error("Day of week is required for weekly backups.")
    if frequency is BackupFrequency.monthly and day_of_month is None:
        raise _validation_error("Day of month is required for monthly backups.")


def get_schedule_or_404(db: Session, schedule_id: int) -> BackupSchedule:
    schedule = db.get(BackupSchedule, schedule_id)
    if schedule is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=error_response("SCHEDULE_NOT_FOUND", "Backup schedule not found."),
        )
    return schedule


def list_schedules(db: Session, now: datetime | None = None) -> list[ScheduleRead]:
    """Return every schedule, newest first, with ``nextRun`` freshly computed."""

    now = now or utcnow()
    schedules = db.scalars(
        select(BackupSchedule).order_by(BackupSchedule.created_at.desc(), BackupSchedule.id.desc())
    ).all()
    return [
        ScheduleRead.model_validate(schedule).model_copy(update={"next_run": next_run_for(schedule, now)})
        for schedule in schedules
    ]


def create_schedule(
    db: Session,
    payload: ScheduleCreate,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> BackupSchedule:
    _check_required_days(payload.frequency, payload.day_of_week, payload.day_of_month)

    schedule = BackupSchedule(
        name=payload.name,
        description=payload.description,
        frequency=payload.frequency,
        time=payload.time,
        day_of_week=payload.day_of_week,
        day_of_month=payload.day_of_month,
        is_active=True,
        retention_days=payload.retention_days,
        collections=payload.collections or [],
        created_by=actor.user_id,
        created_by_name=actor.name,
    )
    schedule.next_run = next_run_for(schedule)
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    logger.info("Backup schedule created", extra={"schedule_id": schedule.id, "frequency": schedule.frequency})

    publish(
        db,
        DomainEvent(
            action=ActivityAction.create,
            entity_type="BackupSchedule",
            entity_id=schedule.id,
            entity_name=schedule.name,
            actor=actor,
            metadata={"frequency": schedule.frequency.value, "time": schedule.time},
            context=context,
            notify_category="admin",
        ),
    )
    return schedule


def update_schedule(
    db: Session,
    schedule_id: int,
    payload: ScheduleUpdate,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> BackupSchedule:
    """Apply a partial update and keep ``next_run`` consistent with it."""

    schedule = get_schedule_or_404(db, schedule_id)
    before = snapshot_row(schedule)
    was_active = schedule.is_active
    updates = payload.model_dump(exclude_unset=True)

    for field_name, value in updates.items():
        if field_name in {"name", "frequency", "time", "is_active"} and value is None:
            continue
        setattr(schedule, field_name, value)

    if TIMING_FIELDS & updates.keys():
        _check_required_days(BackupFrequency(schedule.frequency), schedule.day_of_week, schedule.day_of_month)

    if not schedule.is_active:
        schedule.next_run = None
    elif (TIMING_FIELDS & updates.keys()) or not was_active:
        schedule.next_run = next_run_for(schedule)

    db.commit()
    db.refresh(schedule)

    changes = detect_changes(before, snapshot_row(schedule), DEFAULT_EXCLUDED_FIELDS | {"next_run", "last_run"})
    publish(
        db,
        DomainEvent(
            action=ActivityAction.update,
            entity_type="BackupSchedule",
            entity_id=schedule.id,
            entity_name=schedule.name,
            actor=actor,
            changes=changes,
            context=context,
            notify_category="admin",
        ),
    )
    return schedule


def delete_schedule(
    db: Session,
    schedule_id: int,
    actor: Actor,
    *,
    context: RequestContext | None = None,
) -> None:
    schedule = get_schedule_or_404(db, schedule_id)
    name = schedule.name
    db.delete(schedule)
    db.commit()
    logger.info("Backup schedule deleted", extra={"schedule_id": schedule_id})

    publish(
        db,
        DomainEvent(
            action=ActivityAction.delete,
            entity_type="BackupSchedule",
            entity_id=schedule_id,
            entity_name=name,
            actor=actor,
            context=context,
            notify_category="admin",
        ),
    )


__all__ = [
    "ScheduleTiming",
    "compute_next_run",
    "create_schedule",
    "delete_schedule",
    "get_schedule_or_404",
    "list_schedules",
    "next_run_for",
    "update_schedule",
]
