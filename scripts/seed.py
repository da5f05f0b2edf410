"""Seed sample data for local development."""
from __future__ import annotations

from datetime import date, timedelta

from dotenv import load_dotenv

load_dotenv()

from app import models  # noqa: E402
from app.config import get_settings  # noqa: E402
from app.db import create_all, init_engine, session_scope  # noqa: E402


def main() -> None:
    settings = get_settings()
    print(f"Using database: {settings.database_url}")

    init_engine()
    create_all()

    with session_scope() as session:
        chief = models.User(username="chief", name="Chief Inspector", rank="Inspector", role=models.UserRole.admin)
        officer = models.User(username="officer1", name="Officer One", rank="Sergeant", badge_number="B-1001")
        session.add_all([chief, officer])
        session.flush()

        session.add_all(
            [
                models.InventoryItem(item_name="Notebook", category="stationery", current_stock=40, min_stock=10),
                models.InventoryItem(item_name="Flashlight battery", category="equipment", current_stock=12, min_stock=5),
                models.BackupSchedule(
                    name="Nightly",
                    frequency=models.BackupFrequency.daily,
                    time="02:00",
                    is_active=True,
                    created_by=chief.id,
                    created_by_name=chief.name,
                    collections=[],
                ),
            ]
        )
        today = date.today()
        session.add(
            models.Leave(
                leave_type=models.LeaveType.vacation,
                reason="Family visit",
                start_date=today + timedelta(days=7),
                end_date=today + timedelta(days=9),
                duration=3.0,
                requested_by=officer.id,
                requested_by_name=officer.name,
            )
        )
    print("Seed data inserted.")


if __name__ == "__main__":
    main()
