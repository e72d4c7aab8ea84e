"""create medications and movements

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "medications",
        sa.Column("medication_id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("dose", sa.String(50), nullable=True),
        sa.Column("current_stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("min_stock", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("low_stock_notified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("schedule", sa.JSON(), nullable=False),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("expiry_notified", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_table(
        "movements",
        sa.Column("movement_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("occurred_at", sa.DateTime(), nullable=False),
        sa.Column("medication_name", sa.String(100), nullable=False),
        sa.Column("delta", sa.Integer(), nullable=False),
        sa.Column("kind", sa.String(32), nullable=False),
    )
    op.create_index("ix_movements_occurred_at", "movements", ["occurred_at"])


def downgrade() -> None:
    op.drop_index("ix_movements_occurred_at", table_name="movements")
    op.drop_table("movements")
    op.drop_table("medications")
