"""Create alert_types and alert_entries tables.

Revision ID: 001_alert_tables
Revises:
Create Date: 2026-10-18
"""

import sqlalchemy as sa
from alembic import op

revision = "001_alert_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "alert_types",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("vibrate", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sound_name", sa.String(255), nullable=True),
        sa.Column(
            "override_mute", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column(
            "snooze_via_notification",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column(
            "default_snooze_period_minutes",
            sa.Integer(),
            nullable=False,
            server_default="60",
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_table(
        "alert_entries",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("alert_kind", sa.SmallInteger(), nullable=False),
        sa.Column("start_minutes", sa.Integer(), nullable=False),
        sa.Column("value", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "alert_type_id",
            sa.Uuid(),
            sa.ForeignKey("alert_types.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint(
            "alert_kind", "start_minutes", name="uq_alert_entry_kind_start"
        ),
    )
    op.create_index("ix_alert_entries_alert_kind", "alert_entries", ["alert_kind"])
    op.create_index(
        "ix_alert_entries_alert_type_id", "alert_entries", ["alert_type_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_alert_entries_alert_type_id", table_name="alert_entries")
    op.drop_index("ix_alert_entries_alert_kind", table_name="alert_entries")
    op.drop_table("alert_entries")
    op.drop_table("alert_types")
