"""Restore a previously exported snapshot into the live tables."""
from __future__ import annotations

import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy import Column, Date, DateTime, Integer, MetaData, Numeric, Table, Time, delete, func, insert, inspect, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.activity_log import ActivityAction
from app.schemas.backup import RestoreSnapshot
from app.security import Actor
from app.services.observers import DomainEvent, publish
from app.utils.errors import error_response
from app.utils.request_context import RequestContext
from app.utils.time import parse_iso_utc

logger = logging.getLogger(__name__)


def _coerce_value(column: Column, value: Any) -> Any:
    if not isinstance(value, str):
        if isinstance(value, (int, float)) and isinstance(column.type, Numeric) and column.type.asdecimal:
            return Decimal(str(value))
        return value
    type_ = column.type
    if isinstance(type_, DateTime):
        if type_.timezone:
            return parse_iso_utc(value)
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(type_, Date):
        return date.fromisoformat(value)
    if isinstance(type_, Time):
        return time.fromisoformat(value)
    if isinstance(type_, Numeric):
        return Decimal(value)
    return value


def coerce_document(table: Table, document: dict[str, Any]) -> dict[str, Any]:
    """Map a JSON document onto ``table``'s columns, decoding encoded values.

    Keys with no matching column are dropped.
    """

    row: dict[str, Any] = {}
    for key, value in document.items():
        column = table.columns.get(key)
        if column is None:
            continue
        row[key] = None if value is None else _coerce_value(column, value)
    return row


def _warn_dropped_columns(table: Table, documents: list[dict[str, Any]]) -> None:
    unknown = sorted({key for document in documents for key in document} - set(table.columns.keys()))
    if unknown:
        logger.warning(
            "Restore dropped unknown columns",
            extra={"collection": table.name, "columns": unknown},
        )


def _resync_sequence(db: Session, table: Table) -> None:
    if db.get_bind().dialect.name != "postgresql":
        return
    pk_columns = list(table.primary_key.columns)
    if len(pk_columns) != 1 or not isinstance(pk_columns[0].type, Integer):
        return
    pk = pk_columns[0]
    db.execute(
        select(
            func.setval(
                func.pg_get_serial_sequence(table.name, pk.name),
                select(func.coalesce(func.max(pk), 1)).scalar_subquery(),
            )
        )
    )


def _restore_failure(exc: SQLAlchemyError, collection: str, restored: list[str]) -> HTTPException:
    details = {"collection": collection, "restoredCollections": list(restored)}
    if isinstance(exc, IntegrityError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=error_response(
                "RESTORE_CONFLICT",
                f"Restoring '{collection}' conflicts with existing data.",
                details,
            ),
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error_response("RESTORE_FAILED", f"Restoring '{collection}' failed.", details),
    )


def dependent_collections(db: Session, targets: set[str]) -> list[str]:
    """Live tables outside ``targets`` holding a foreign key into one of them."""

    inspector = inspect(db.connection())
    dependents = []
    for name in sorted(set(inspector.get_table_names()) - targets):
        if any(fk["referred_table"] in targets for fk in inspector.get_foreign_keys(name)):
            dependents.append(name)
    return dependents


def plan_restore(
    db: Session,
    collections: dict[str, Any],
    *,
    clear_existing: bool = False,
) -> tuple[list[Table], list[str]]:
    """Reflect the snapshot's tables and order them parents first.

    Returns the tables to restore and the snapshot names with no live table.
    Clearing is refused while a live table absent from the snapshot still
    references one of the tables to clear.
    """

    live = set(inspect(db.connection()).get_table_names())
    metadata = MetaData()
    targets: set[str] = set()
    skipped: list[str] = []
    for name in collections:
        if name not in live:
            skipped.append(name)
            continue
        Table(name, metadata, autoload_with=db.connection())
        targets.add(name)

    if clear_existing:
        dependents = dependent_collections(db, targets)
        if dependents:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=error_response(
                    "RESTORE_DEPENDENT_COLLECTIONS",
                    "Clearing would affect collections missing from the backup.",
                    {"collections": dependents},
                ),
            )

    if skipped:
        logger.warning("Restore skipped unknown collections", extra={"collections": skipped})
    ordered = [table for table in metadata.sorted_tables if table.name in targets]
    return ordered, skipped


def restore_collections(
    db: Session,
    collections: dict[str, list[dict[str, Any]]],
    *,
    clear_existing: bool = False,
) -> tuple[list[str], list[str]]:
    """Write the snapshot's documents back, keeping their original ids.

    Every statement commits on its own; a failure leaves the tables handled
    before it in their restored state.
    """

    tables, skipped = plan_restore(db, collections, clear_existing=clear_existing)
    restored: list[str] = []

    if clear_existing:
        for table in reversed(tables):
            try:
                db.execute(delete(table))
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                logger.exception("Restore failed clearing collection", extra={"collection": table.name})
                raise _restore_failure(exc, table.name, restored) from exc

    for table in tables:
        documents = collections[table.name]
        if not documents:
            continue
        _warn_dropped_columns(table, documents)
        try:
            rows = [coerce_document(table, document) for document in documents]
            db.execute(insert(table), rows)
            _resync_sequence(db, table)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Restore failed inserting collection", extra={"collection": table.name})
            raise _restore_failure(exc, table.name, restored) from exc
        except (ValueError, ArithmeticError) as exc:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=error_response(
                    "INVALID_BACKUP",
                    f"Collection '{table.name}' holds values that do not fit its columns.",
                    {"collection": table.name, "restoredCollections": list(restored)},
                ),
            ) from exc
        restored.append(table.name)
        logger.info("Collection restored", extra={"collection": table.name, "documents": len(rows)})

    return restored, skipped


def restore_backup(
    db: Session,
    snapshot: RestoreSnapshot,
    actor: Actor,
    *,
    clear_existing: bool = False,
    context: RequestContext | None = None,
) -> tuple[list[str], list[str]]:
    """Validate ``snapshot`` then restore it; returns ``(restored, skipped)``."""

    if snapshot.collections is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_response("INVALID_BACKUP", "Invalid backup format."),
        )

    restored, skipped = restore_collections(db, snapshot.collections, clear_existing=clear_existing)
    logger.info(
        "Backup restored",
        extra={"restored": restored, "skipped": skipped, "clear_existing": clear_existing},
    )

    publish(
        db,
        DomainEvent(
            action=ActivityAction.update,
            entity_type="Database",
            entity_name="Database Restore",
            actor=actor,
            metadata={
                "restoredCollections": restored,
                "clearExisting": clear_existing,
                "backupVersion": snapshot.version,
                "backupTimestamp": snapshot.timestamp,
            },
            context=context,
            notify_category="admin",
        ),
    )
    return restored, skipped


__all__ = ["coerce_document", "dependent_collections", "plan_restore", "restore_backup", "restore_collections"]
