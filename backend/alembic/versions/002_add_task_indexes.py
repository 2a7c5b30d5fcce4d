"""Add indexes for date-ordered task listing

Revision ID: 002
Revises: 001
Create Date: 2026-01-13

"""
from typing import Sequence, Union

from alembic import op
from sqlalchemy import text

revision: str = '002'
down_revision: Union[str, None] = '001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    conn = op.get_bind()
    conn.execute(text("CREATE INDEX IF NOT EXISTS ix_tasks_date ON tasks (date)"))
    conn.execute(text("CREATE INDEX IF NOT EXISTS ix_tasks_created_at ON tasks (created_at DESC)"))


def downgrade() -> None:
    conn = op.get_bind()
    conn.execute(text("DROP INDEX IF EXISTS ix_tasks_created_at"))
    conn.execute(text("DROP INDEX IF EXISTS ix_tasks_date"))
