"""initial schema

Revision ID: 20261017_0001
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261017_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(length=100), nullable=False, unique=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("rank", sa.String(length=100), nullable=True),
        sa.Column("badge_number", sa.String(length=50), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "api_keys",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=120), nullable=False, unique=True),
        sa.Column("prefix", sa.String(length=32), nullable=False),
        sa.Column("key_hash", sa.String(length=128), nullable=False),
        sa.Column(
            "user_id",
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("is_active", sa.Boolean, nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_used_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_api_keys_key_hash", "api_keys", ["key_hash"], unique=True)
    op.create_index("ix_api_keys_user_id", "api_keys", ["user_id"])

    op.create_table(
        "activity_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("action", sa.String(length=32), nullable=False),
        sa.Column("entity_type", sa.String(length=100), nullable=False),
        sa.Column("entity_id", sa.String(length=64), nullable=True),
        sa.Column("entity_name", sa.String(length=255), nullable=True),
        sa.Column("performed_by", sa.Integer, nullable=False),
        sa.Column("performed_by_name", sa.String(length=200), nullable=False),
        sa.Column("changes", sa.JSON, nullable=True),
        sa.Column("metadata", sa.JSON, nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_activity_logs_entity_type", "activity_logs", ["entity_type"])
    op.create_index("ix_activity_logs_entity_name", "activity_logs", ["entity_name"])
    op.create_index("ix_activity_logs_created_at", "activity_logs", ["created_at"])
    op.create_index("ix_activity_logs_performer_created", "activity_logs", ["performed_by", "created_at"])
    op.create_index("ix_activity_logs_entity", "activity_logs", ["entity_type", "entity_id"])
    op.create_index("ix_activity_logs_action_created", "activity_logs", ["action", "created_at"])

    op.create_table(
        "backups",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("version", sa.String(length=16), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by", sa.Integer, nullable=False),
        sa.Column("created_by_name", sa.String(length=200), nullable=False),
        sa.Column("collections", sa.JSON, nullable=False),
        sa.Column("is_automatic", sa.Boolean, nullable=False),
        sa.Column("schedule_id", sa.Integer, nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("error", sa.Text, nullable=True),
        sa.Column("metadata", sa.JSON, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_backups_timestamp", "backups", ["timestamp"])
    op.create_index("ix_backups_is_automatic", "backups", ["is_automatic"])
    op.create_index("ix_backups_status", "backups", ["status"])
    op.create_index("ix_backups_created_by", "backups", ["created_by"])
    op.create_index("ix_backups_schedule_id", "backups", ["schedule_id"])

    op.create_table(
        "backup_schedules",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("frequency", sa.String(length=32), nullable=False),
        sa.Column("time", sa.String(length=5), nullable=False),
        sa.Column("day_of_week", sa.Integer, nullable=True),
        sa.Column("day_of_month", sa.Integer, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False),
        sa.Column("last_run", sa.DateTime(timezone=True), nullable=True),
        sa.Column("next_run", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.Integer, nullable=False),
        sa.Column("created_by_name", sa.String(length=200), nullable=False),
        sa.Column("retention_days", sa.Integer, nullable=True),
        sa.Column("collections", sa.JSON, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_backup_schedules_active_next_run", "backup_schedules", ["is_active", "next_run"])
    op.create_index("ix_backup_schedules_created_by", "backup_schedules", ["created_by"])

    op.create_table(
        "inventory_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("item_name", sa.String(length=200), nullable=False, unique=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("current_stock", sa.Integer, nullable=False),
        sa.Column("unit", sa.String(length=50), nullable=False),
        sa.Column("min_stock", sa.Integer, nullable=True),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
        sa.CheckConstraint("current_stock >= 0", name="ck_inventory_non_negative_stock"),
    )
    op.create_index("ix_inventory_items_category", "inventory_items", ["category"])

    op.create_table(
        "withdraw_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("item_name", sa.String(length=200), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("unit", sa.String(length=50), nullable=False),
        sa.Column("withdrawn_by", sa.Integer, nullable=False),
        sa.Column("withdrawn_by_name", sa.String(length=200), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
        sa.CheckConstraint("quantity >= 1", name="ck_withdraw_items_positive_quantity"),
    )
    op.create_index("ix_withdraw_items_item_name", "withdraw_items", ["item_name"])
    op.create_index("ix_withdraw_items_withdrawer_created", "withdraw_items", ["withdrawn_by", "created_at"])

    op.create_table(
        "leaves",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("leave_type", sa.String(length=32), nullable=False),
        sa.Column("reason", sa.Text, nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("duration", sa.Float, nullable=False),
        sa.Column("requested_by", sa.Integer, nullable=False),
        sa.Column("requested_by_name", sa.String(length=200), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("reviewed_by", sa.Integer, nullable=True),
        sa.Column("reviewed_by_name", sa.String(length=200), nullable=True),
        sa.Column("review_notes", sa.Text, nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_leaves_leave_type", "leaves", ["leave_type"])
    op.create_index("ix_leaves_start_date", "leaves", ["start_date"])
    op.create_index("ix_leaves_requested_by", "leaves", ["requested_by"])


def downgrade() -> None:
    op.drop_table("leaves")
    op.drop_table("withdraw_items")
    op.drop_table("inventory_items")
    op.drop_table("backup_schedules")
    op.drop_table("backups")
    op.drop_table("activity_logs")
    op.drop_table("api_keys")
    op.drop_table("users")
