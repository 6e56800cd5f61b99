"""Create stocks table keyed by ticker

Revision ID: 001_create_stocks
Revises:
Create Date: 2025-03-02 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_create_stocks'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _has_table(name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(name)


def upgrade() -> None:
    if _has_table('stocks'):
        return

    op.create_table(
        'stocks',
        sa.Column('ticker', sa.String(), nullable=False),
        sa.Column('exchange', sa.String(), nullable=False),
        sa.Column('sector_name', sa.String(), nullable=False),
        sa.Column('sector_url', sa.String(), nullable=False),
        sa.Column('industry_name', sa.String(), nullable=False),
        sa.Column('industry_url', sa.String(), nullable=False),
        sa.Column('last_update', sa.Date(), nullable=False),
        sa.PrimaryKeyConstraint('ticker')
    )


def downgrade() -> None:
    op.drop_table('stocks')
