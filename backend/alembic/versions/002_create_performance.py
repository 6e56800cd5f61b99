"""Create performance table keyed by ticker

Revision ID: 002_create_performance
Revises: 001_create_stocks
Create Date: 2025-03-02 10:05:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002_create_performance'
down_revision: Union[str, None] = '001_create_stocks'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _has_table(name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(name)


def upgrade() -> None:
    if _has_table('performance'):
        return

    op.create_table(
        'performance',
        sa.Column('ticker', sa.String(), nullable=False),
        sa.Column('perf_1m', sa.Float(), nullable=False),
        sa.Column('perf_3m', sa.Float(), nullable=False),
        sa.Column('perf_6m', sa.Float(), nullable=False),
        sa.Column('perf_1y', sa.Float(), nullable=False),
        sa.Column('extra_info', sa.JSON(), server_default=sa.text("'{}'"), nullable=False),
        sa.Column('last_updated', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('ticker')
    )


def downgrade() -> None:
    op.drop_table('performance')
