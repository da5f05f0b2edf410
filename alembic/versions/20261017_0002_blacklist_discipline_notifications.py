"""blacklist, discipline and notification records

Revision ID: 20261017_0002
Revises: 20261017_0001
Create Date: 2026-10-17 15:30:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261017_0002"
down_revision = "20261017_0001"
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "blacklist_entries",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("reason", sa.Text, nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("severity", sa.String(length=32), nullable=False),
        sa.Column("added_by", sa.Integer, nullable=False),
        sa.Column("added_by_name", sa.String(length=200), nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("fine_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("payment_status", sa.String(length=32), nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("paid_by", sa.Integer, nullable=True),
        sa.Column("paid_by_name", sa.String(length=200), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("fine_amount IS NULL OR fine_amount >= 0", name="ck_blacklist_fine_non_negative"),
    )
    op.create_index("ix_blacklist_entries_name", "blacklist_entries", ["name"])
    op.create_index("ix_blacklist_entries_added_by", "blacklist_entries", ["added_by"])
    op.create_index("ix_blacklist_entries_active_created", "blacklist_entries", ["is_active", "created_at"])

    op.create_table(
        "discipline_records",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("officer_name", sa.String(length=200), nullable=False),
        sa.Column("officer_id", sa.Integer, nullable=True),
        sa.Column("violation", sa.Text, nullable=False),
        sa.Column("violation_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("penalty", sa.Text, nullable=False),
        sa.Column("penalty_type", sa.String(length=32), nullable=False),
        sa.Column("penalty_amount", sa.Numeric(12, 2), nullable=True),
        sa.Column("issued_by", sa.Integer, nullable=False),
        sa.Column("issued_by_name", sa.String(length=200), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("appeal_reason", sa.Text, nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("attachments", sa.JSON, nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "penalty_amount IS NULL OR penalty_amount >= 0", name="ck_discipline_amount_non_negative"
        ),
    )
    op.create_index("ix_discipline_records_officer_id", "discipline_records", ["officer_id"])
    op.create_index("ix_discipline_records_penalty_type", "discipline_records", ["penalty_type"])
    op.create_index("ix_discipline_records_issued_by", "discipline_records", ["issued_by"])
    op.create_index("ix_discipline_records_status_created", "discipline_records", ["status", "created_at"])
    op.create_index("ix_discipline_records_officer_created", "discipline_records", ["officer_name", "created_at"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("recipient", sa.Integer, nullable=False),
        sa.Column("recipient_name", sa.String(length=200), nullable=True),
        sa.Column("related_to", sa.String(length=50), nullable=True),
        sa.Column("related_id", sa.Integer, nullable=True),
        sa.Column("is_read", sa.Boolean, nullable=False),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("priority", sa.String(length=32), nullable=False),
        sa.Column("action_url", sa.String(length=500), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "ix_notifications_recipient_read_created", "notifications", ["recipient", "is_read", "created_at"]
    )


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("discipline_records")
    op.drop_table("blacklist_entries")
