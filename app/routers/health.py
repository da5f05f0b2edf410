"""Liveness and readiness report."""
from __future__ import annotations

import logging
from typing import Any

from alembic.config import Config
from alembic.script import ScriptDirectory
from fastapi import APIRouter
from sqlalchemy import func, select, text

from app.config import AppInfo, get_settings
from app.db import get_engine
from app.models.backup import Backup, BackupSchedule, BackupStatus
from app.utils.time import ensure_utc

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger(__name__)


def _db_status() -> str:
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return "ok"
    except Exception:  # noqa: BLE001
        logger.exception("DB health check failed")
        return "error"


def _expected_migration_head() -> str | None:
    try:
        script = ScriptDirectory.from_config(Config("alembic.ini"))
        return script.get_current_head()
    except Exception:  # noqa: BLE001
        logger.exception("Failed to load Alembic head revision")
        return None


def _migrations_status() -> tuple[bool, str]:
    expected_head = _expected_migration_head()
    if expected_head is None:
        return False, "unknown"
    try:
        with get_engine().connect() as conn:
            current = conn.execute(text("SELECT version_num FROM alembic_version")).scalar()
    except Exception:  # noqa: BLE001
        logger.exception("Migration check failed")
        return False, "unknown"
    if current == expected_head:
        return True, "up_to_date"
    return False, "out_of_date"


def _backup_summary() -> dict[str, Any]:
    """Most recent successful backup and how many schedules are live."""

    try:
        with get_engine().connect() as conn:
            last = conn.execute(
                select(func.max(Backup.timestamp)).where(Backup.status == BackupStatus.completed)
            ).scalar()
            active = conn.execute(
                select(func.count()).select_from(BackupSchedule).where(BackupSchedule.is_active.is_(True))
            ).scalar()
    except Exception:  # noqa: BLE001
        logger.exception("Backup summary failed")
        return {"last_backup_at": None, "active_schedules": None}
    return {
        "last_backup_at": ensure_utc(last).isoformat() if last is not None else None,
        "active_schedules": active or 0,
    }


@router.get("", summary="Health check")
def healthcheck() -> dict[str, object]:
    """Report database reachability, migration state and backup freshness."""

    settings = get_settings()
    db_status = _db_status()
    db_ok = db_status == "ok"
    if db_ok:
        migration_ok, migration_status = _migrations_status()
        backups = _backup_summary()
    else:
        migration_ok, migration_status = False, "unknown"
        backups = {"last_backup_at": None, "active_schedules": None}
    degraded = not (db_ok and migration_ok)
    return {
        "status": "degraded" if degraded else "ok",
        "version": AppInfo().version,
        "env": settings.app_env,
        "db_ok": db_ok,
        "db_status": db_status,
        "migrations_ok": migration_ok,
        "migrations_status": migration_status,
        "backups": backups,
        "webhook_configured": bool(settings.NOTIFY_WEBHOOK_URL),
    }
