"""Discipline record endpoints."""
from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.discipline import DisciplineRecord, DisciplineStatus, PenaltyType
from app.routers.params import page_params
from app.schemas.base import MessageResponse, PageParams
from app.schemas.discipline import DisciplineCreate, DisciplinePage, DisciplineRead, DisciplineUpdate
from app.security import Actor, current_actor, require_admin
from app.services import discipline as discipline_service
from app.utils.request_context import RequestContext, request_context

router = APIRouter(prefix="/discipline", tags=["discipline"])


@router.get("", response_model=DisciplinePage)
def list_discipline_records(
    params: PageParams = Depends(page_params),
    search: str | None = Query(default=None),
    status_filter: DisciplineStatus | None = Query(default=None, alias="status"),
    penalty_type: PenaltyType | None = Query(default=None, alias="penaltyType"),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> DisciplinePage:
    rows, total = discipline_service.list_records(
        db,
        offset=params.offset,
        limit=params.limit,
        search=search,
        status_filter=status_filter,
        penalty_type=penalty_type,
        start_date=start_date,
        end_date=end_date,
    )
    return DisciplinePage(
        data=[DisciplineRead.model_validate(row) for row in rows], pagination=params.pagination(total)
    )


@router.post("", response_model=DisciplineRead, status_code=status.HTTP_201_CREATED)
def create_discipline_record(
    payload: DisciplineCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
    context: RequestContext = Depends(request_context),
) -> DisciplineRecord:
    return discipline_service.create_record(db, payload, actor, context=context)


@router.get("/{record_id}", response_model=DisciplineRead)
def get_discipline_record(
    record_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(current_actor),
) -> DisciplineRecord:
    return discipline_service.get_record_or_404(db, record_id)


@router.put("/{record_id}", response_model=DisciplineRead)
def update_discipline_record(
    record_id: int,
    payload: DisciplineUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> DisciplineRecord:
    return discipline_service.update_record(db, record_id, payload, actor, context=context)


@router.delete("/{record_id}", response_model=MessageResponse)
def delete_discipline_record(
    record_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_admin),
    context: RequestContext = Depends(request_context),
) -> MessageResponse:
    discipline_service.delete_record(db, record_id, actor, context=context)
    return MessageResponse(message="Discipline record deleted")
