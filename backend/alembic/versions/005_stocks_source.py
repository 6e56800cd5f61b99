"""Scope stocks by data source

Widens the stocks key to (source, ticker) so the same symbol from
TradingView ("tv") and Yahoo Finance ("yf") can coexist. Existing rows
came from TradingView.

Revision ID: 005_stocks_source
Revises: 004_performance_ticker_type
Create Date: 2025-06-21 09:40:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '005_stocks_source'
down_revision: Union[str, None] = '004_performance_ticker_type'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STOCK_COLUMNS = (
    "ticker, exchange, sector_name, sector_url, industry_name, industry_url, last_update"
)


def _inspector():
    return sa.inspect(op.get_bind())


def _stock_columns() -> list[sa.Column]:
    return [
        sa.Column('ticker', sa.String(), nullable=False),
        sa.Column('exchange', sa.String(), nullable=False),
        sa.Column('sector_name', sa.String(), nullable=False),
        sa.Column('sector_url', sa.String(), nullable=False),
        sa.Column('industry_name', sa.String(), nullable=False),
        sa.Column('industry_url', sa.String(), nullable=False),
        sa.Column('last_update', sa.Date(), nullable=False),
    ]


def _create_indexes() -> None:
    existing = {ix["name"] for ix in _inspector().get_indexes('stocks')}
    if 'idx_stocks_source' not in existing:
        op.create_index('idx_stocks_source', 'stocks', ['source'], unique=False)
    if 'idx_stocks_last_update' not in existing:
        op.create_index('idx_stocks_last_update', 'stocks', ['last_update'], unique=False)


def upgrade() -> None:
    columns = {c["name"] for c in _inspector().get_columns('stocks')}
    if 'source' in columns:
        _create_indexes()
        return

    op.create_table(
        'stocks_new',
        sa.Column('source', sa.String(), nullable=False),
        *_stock_columns(),
        sa.PrimaryKeyConstraint('source', 'ticker')
    )
    op.execute(
        f"INSERT INTO stocks_new (source, {STOCK_COLUMNS}) "
        f"SELECT 'tv', {STOCK_COLUMNS} FROM stocks"
    )
    op.drop_table('stocks')
    op.rename_table('stocks_new', 'stocks')
    _create_indexes()


def downgrade() -> None:
    op.drop_index('idx_stocks_last_update', table_name='stocks')
    op.drop_index('idx_stocks_source', table_name='stocks')

    op.create_table(
        'stocks_old',
        *_stock_columns(),
        sa.PrimaryKeyConstraint('ticker')
    )
    # One row per ticker survives: the alphabetically first source ("tv" before "yf")
    op.execute(
        f"INSERT INTO stocks_old ({STOCK_COLUMNS}) "
        f"SELECT {STOCK_COLUMNS} FROM stocks s "
        "WHERE s.source = (SELECT MIN(s2.source) FROM stocks s2 WHERE s2.ticker = s.ticker)"
    )
    op.drop_table('stocks')
    op.rename_table('stocks_old', 'stocks')
