"""create check_ins table

Revision ID: 0001
Revises:
Create Date: 2024-05-01 00:00:00
"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

MOODS = ("amazing", "happy", "neutral", "down", "stressed")


def upgrade() -> None:
    op.create_table(
        "check_ins",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("mood", sa.Enum(*MOODS, name="checkin_mood"), nullable=True),
        sa.Column("energy_level", sa.Integer(), nullable=True),
        sa.Column("daily_note", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("suggestions", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "energy_level IS NULL OR (energy_level >= 1 AND energy_level <= 10)",
            name="ck_check_ins_energy_level_range",
        ),
    )
    op.create_index("ix_check_ins_day", "check_ins", ["day"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_check_ins_day", table_name="check_ins")
    op.drop_table("check_ins")
    sa.Enum(name="checkin_mood").drop(op.get_bind(), checkfirst=True)
