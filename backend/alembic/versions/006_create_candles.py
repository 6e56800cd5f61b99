"""Create intraday candles table

Revision ID: 006_create_candles
Revises: 005_stocks_source
Create Date: 2025-06-21 10:05:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '006_create_candles'
down_revision: Union[str, None] = '005_stocks_source'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    inspector = sa.inspect(op.get_bind())
    if not inspector.has_table('candles'):
        op.create_table(
            'candles',
            sa.Column('ticker', sa.String(), nullable=False),
            sa.Column('timestamp', sa.DateTime(), nullable=False),
            sa.Column('open', sa.Float(), nullable=False),
            sa.Column('high', sa.Float(), nullable=False),
            sa.Column('low', sa.Float(), nullable=False),
            sa.Column('close', sa.Float(), nullable=False),
            sa.Column('volume', sa.BigInteger(), nullable=False),
            sa.PrimaryKeyConstraint('ticker', 'timestamp')
        )
        existing = set()
    else:
        existing = {ix["name"] for ix in inspector.get_indexes('candles')}

    if 'idx_candles_ticker_ts' not in existing:
        op.create_index('idx_candles_ticker_ts', 'candles', ['ticker', 'timestamp'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_candles_ticker_ts', table_name='candles')
    op.drop_table('candles')
