"""scan_runs

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19

Records which scheduled scan periods have already been claimed.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "scan_runs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("job", sa.String(50), nullable=False),
        sa.Column("period_key", sa.String(20), nullable=False),
        sa.Column("claimed_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("job", "period_key", name="uq_scan_runs_job_period"),
    )


def downgrade() -> None:
    op.drop_table("scan_runs")
