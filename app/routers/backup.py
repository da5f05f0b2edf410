"""Backup, restore and backup schedule endpoints (admin only)."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.backup import BackupStatus
from app.routers.params import page_params
from app.schemas.backup import (
    BackupHistoryPage,
    BackupRequest,
    BackupResponse,
    BackupSummary,
    RestoreRequest,
    RestoreResponse,
    ScheduleCreate,
    ScheduleList,
    ScheduleRead,
    ScheduleResponse,
    ScheduleUpdate,
)
from app.schemas.base import MessageResponse, PageParams
from app.security import Actor, require_admin
from app.services import backup as backup_service
from app.services import restore as restore_service
from app.services import schedules as schedule_service
from app.utils.request_context import RequestContext, request_context

router = APIRouter(tags=["backup"])


@router.post("/backup", response_model=BackupResponse)
def create_backup(
    payload: BackupRequest | None = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> BackupResponse:
    """Export every table as one downloadable snapshot."""

    payload = payload or BackupRequest()
    snapshot = backup_service.create_backup(
        db,
        actor,
        schedule_id=payload.schedule_id,
        is_automatic=payload.is_automatic,
        context=context,
    )
    return BackupResponse(backup=snapshot, message="Backup created successfully")


@router.get("/backup/history", response_model=BackupHistoryPage)
def backup_history(
    params: PageParams = Depends(page_params),
    is_automatic: bool | None = Query(default=None, alias="isAutomatic"),
    status_filter: BackupStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> BackupHistoryPage:
    rows, total = backup_service.list_backups(
        db,
        offset=params.offset,
        limit=params.limit,
        is_automatic=is_automatic,
        status_filter=status_filter,
    )
    return BackupHistoryPage(
        data=[BackupSummary.model_validate(row) for row in rows],
        pagination=params.pagination(total),
    )


@router.post("/restore", response_model=RestoreResponse)
def restore_backup(
    payload: RestoreRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> RestoreResponse:
    """Load a snapshot back into the database, optionally wiping targeted tables first."""

    restored, skipped = restore_service.restore_backup(
        db,
        payload.backup,
        actor,
        clear_existing=payload.clear_existing,
        context=context,
    )
    return RestoreResponse(
        message="Backup restored successfully",
        restored_collections=restored,
        skipped_collections=skipped,
    )


@router.get("/backup/schedule", response_model=ScheduleList)
def list_schedules(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
) -> ScheduleList:
    return ScheduleList(data=schedule_service.list_schedules(db))


@router.post("/backup/schedule", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
def create_schedule(
    payload: ScheduleCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> ScheduleResponse:
    schedule = schedule_service.create_schedule(db, payload, actor, context=context)
    return ScheduleResponse(data=ScheduleRead.model_validate(schedule), message="Backup schedule created")


@router.put("/backup/schedule/{schedule_id}", response_model=ScheduleResponse)
def update_schedule(
    schedule_id: int,
    payload: ScheduleUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> ScheduleResponse:
    schedule = schedule_service.update_schedule(db, schedule_id, payload, actor, context=context)
    return ScheduleResponse(data=ScheduleRead.model_validate(schedule), message="Backup schedule updated")


@router.delete("/backup/schedule/{schedule_id}", response_model=MessageResponse)
def delete_schedule(
    schedule_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> MessageResponse:
    schedule_service.delete_schedule(db, schedule_id, actor, context=context)
    return MessageResponse(message="Backup schedule deleted")
