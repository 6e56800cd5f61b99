"""Key performance by (ticker, ticker_type) with a surrogate id

Sectors, industries and stocks can share a name, so one ticker may now
carry one performance row per ticker type. Existing rows were all stock
performance.

Revision ID: 004_performance_ticker_type
Revises: 003_create_daily_candles
Create Date: 2025-04-12 21:15:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '004_performance_ticker_type'
down_revision: Union[str, None] = '003_create_daily_candles'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PERF_COLUMNS = "perf_1m, perf_3m, perf_6m, perf_1y, extra_info, last_updated"


def _columns(table: str) -> set[str]:
    return {c["name"] for c in sa.inspect(op.get_bind()).get_columns(table)}


def _perf_columns() -> list[sa.Column]:
    return [
        sa.Column('perf_1m', sa.Float(), nullable=False),
        sa.Column('perf_3m', sa.Float(), nullable=False),
        sa.Column('perf_6m', sa.Float(), nullable=False),
        sa.Column('perf_1y', sa.Float(), nullable=False),
        sa.Column('extra_info', sa.JSON(), server_default=sa.text("'{}'"), nullable=False),
        sa.Column('last_updated', sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    if 'ticker_type' in _columns('performance'):
        return

    op.create_table(
        'performance_new',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('ticker', sa.String(), nullable=False),
        sa.Column('ticker_type', sa.String(), nullable=False),
        *_perf_columns(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('ticker', 'ticker_type', name='uq_performance_ticker_type'),
        sqlite_autoincrement=True,
    )
    op.execute(
        f"INSERT INTO performance_new (ticker, ticker_type, {PERF_COLUMNS}) "
        f"SELECT ticker, 'Stock', {PERF_COLUMNS} FROM performance"
    )
    op.drop_table('performance')
    op.rename_table('performance_new', 'performance')


def downgrade() -> None:
    op.create_table(
        'performance_old',
        sa.Column('ticker', sa.String(), nullable=False),
        *_perf_columns(),
        sa.PrimaryKeyConstraint('ticker')
    )
    # One row per ticker survives: the oldest record
    op.execute(
        f"INSERT INTO performance_old (ticker, {PERF_COLUMNS}) "
        f"SELECT p.ticker, {', '.join('p.' + c.strip() for c in PERF_COLUMNS.split(','))} "
        "FROM performance p "
        "WHERE p.id = (SELECT MIN(p2.id) FROM performance p2 WHERE p2.ticker = p.ticker)"
    )
    op.drop_table('performance')
    op.rename_table('performance_old', 'performance')
