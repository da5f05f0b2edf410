"""Full-database snapshot creation and backup history."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from sqlalchemy import Connection, MetaData, Table, func, inspect, select
from sqlalchemy.orm import Session, defer

from app.config import get_settings
from app.models.activity_log import ActivityAction
from app.models.backup import Backup, BackupSchedule, BackupStatus
from app.schemas.backup import BackupSnapshot, SnapshotMetadata
from app.security import Actor
from app.services.observers import DomainEvent, publish
from app.utils.best_effort import best_effort
from app.utils.errors import error_response
from app.utils.request_context import RequestContext
from app.utils.time import utcnow

logger = logging.getLogger(__name__)


def list_collection_names(conn: Connection, excluded: Iterable[str] = ()) -> list[str]:
    """Return every table currently present in the store, minus ``excluded``."""

    skip = set(excluded)
    return [name for name in inspect(conn).get_table_names() if name not in skip]


def read_collection(conn: Connection, table: Table) -> list[dict[str, Any]]:
    """Read all rows of ``table`` as JSON-ready documents, in primary key order."""

    stmt = select(table)
    if table.primary_key.columns:
        stmt = stmt.order_by(*table.primary_key.columns)
    return [jsonable_encoder(dict(row)) for row in conn.execute(stmt).mappings()]


def collect_collections(conn: Connection, excluded: Iterable[str] = ()) -> dict[str, list[dict[str, Any]]]:
    """Dump every table of the store, discovered by reflection.

    Each table is read on its own; writes to other tables committed while the
    dump is running may or may not be reflected.
    """

    metadata = MetaData()
    collections: dict[str, list[dict[str, Any]]] = {}
    for name in list_collection_names(conn, excluded):
        table = Table(name, metadata, autoload_with=conn)
        collections[name] = read_collection(conn, table)
    return collections


def build_snapshot(
    collections: dict[str, list[dict[str, Any]]],
    actor: Actor,
    *,
    schedule_id: int | None = None,
    is_automatic: bool = False,
) -> BackupSnapshot:
    total_documents = sum(len(documents) for documents in collections.values())
    return BackupSnapshot(
        timestamp=utcnow(),
        created_by=actor.user_id,
        created_by_name=actor.name,
        collections=collections,
        is_automatic=is_automatic,
        schedule_id=schedule_id,
        status=BackupStatus.completed,
        metadata=SnapshotMetadata(
            total_collections=len(collections),
            total_documents=total_documents,
        ),
    )


def _persist_snapshot(db: Session, snapshot: BackupSnapshot, schedule: BackupSchedule | None) -> Backup:
    row = Backup(
        version=snapshot.version,
        timestamp=snapshot.timestamp,
        created_by=snapshot.created_by,
        created_by_name=snapshot.created_by_name,
        collections=snapshot.collections,
        is_automatic=snapshot.is_automatic,
        schedule_id=snapshot.schedule_id,
        status=snapshot.status,
        metadata_json=snapshot.metadata.model_dump(by_alias=True),
    )
    db.add(row)
    if schedule is not None and snapshot.is_automatic:
        schedule.last_run = snapshot.timestamp
    db.commit()
    return row


def create_backup(
    db: Session,
    actor: Actor,
    *,
    schedule_id: int | None = None,
    is_automatic: bool = False,
    context: RequestContext | None = None,
) -> BackupSnapshot:
    """Snapshot every table and return it.

    Saving the snapshot to the backup history is best-effort: the caller gets
    the in-memory snapshot even when that write fails.
    """

    schedule = None
    if schedule_id is not None:
        schedule = db.get(BackupSchedule, schedule_id)
        if schedule is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=error_response("SCHEDULE_NOT_FOUND", "Backup schedule not found."),
            )

    excluded = get_settings().BACKUP_EXCLUDED_TABLES
    collections = collect_collections(db.connection(), excluded)
    snapshot = build_snapshot(collections, actor, schedule_id=schedule_id, is_automatic=is_automatic)
    logger.info(
        "Backup captured",
        extra={
            "total_collections": snapshot.metadata.total_collections,
            "total_documents": snapshot.metadata.total_documents,
            "is_automatic": is_automatic,
        },
    )

    best_effort("backup_history", _persist_snapshot, db, snapshot, schedule, session=db)

    publish(
        db,
        DomainEvent(
            action=ActivityAction.create,
            entity_type="Database",
            entity_name="Database Backup",
            actor=actor,
            metadata={
                "collections": snapshot.metadata.total_collections,
                "documents": snapshot.metadata.total_documents,
                "version": snapshot.version,
                "isAutomatic": is_automatic,
            },
            context=context,
            notify_category="admin",
        ),
    )
    return snapshot


def list_backups(
    db: Session,
    *,
    offset: int,
    limit: int,
    is_automatic: bool | None = None,
    status_filter: BackupStatus | None = None,
) -> tuple[list[Backup], int]:
    """Return one page of backup history without loading the document payloads."""

    conditions = []
    if is_automatic is not None:
        conditions.append(Backup.is_automatic.is_(is_automatic))
    if status_filter is not None:
        conditions.append(Backup.status == status_filter)

    stmt = (
        select(Backup)
        .options(defer(Backup.collections))
        .where(*conditions)
        .order_by(Backup.timestamp.desc(), Backup.id.desc())
        .offset(offset)
        .limit(limit)
    )
    total = db.scalar(select(func.count()).select_from(Backup).where(*conditions)) or 0
    return list(db.scalars(stmt).all()), total


__all__ = [
    "build_snapshot",
    "collect_collections",
    "create_backup",
    "list_backups",
    "list_collection_names",
    "read_collection",
]
