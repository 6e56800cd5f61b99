"""Rewrite adopted timestamps in the SQLAlchemy storage format

Databases written by the previous service hold RFC 3339 text such as
'2026-10-16T04:00:00+00:00' or '2026-10-16T17:00:00-04:00'. SQLite
compares DATETIME columns as text, so those rows never match an upsert
key and sort out of order. Each value is converted to UTC and rewritten
as 'YYYY-MM-DD HH:MM:SS.ffffff'. Where the rewritten key already exists,
the legacy row is the older copy and is dropped.

Revision ID: 007_normalize_timestamps
Revises: 006_create_candles
Create Date: 2025-07-05 11:20:00.000000

"""
import re
from datetime import datetime, timedelta
from typing import Optional, Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '007_normalize_timestamps'
down_revision: Union[str, None] = '006_create_candles'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STORAGE_FORMAT = "%Y-%m-%d %H:%M:%S.%f"

_TIMESTAMP = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[T ](\d{2}:\d{2}:\d{2})(?:\.(\d+))?\s*(Z|[+-]\d{2}:?\d{2})?$"
)

# table -> (key columns besides the timestamp, timestamp columns)
KEYED_COLUMNS = {
    'daily_candles': (('ticker',), 'ds'),
    'candles': (('ticker',), 'timestamp'),
}
PLAIN_COLUMNS = {
    'daily_candles': ('last_updated',),
    'performance': ('last_updated',),
}


def to_storage_format(value: str) -> Optional[str]:
    """UTC storage text for an ISO 8601 / RFC 3339 value, None if unparseable."""
    match = _TIMESTAMP.match(value.strip())
    if match is None:
        return None

    day, clock, fraction, offset = match.groups()
    # Nanosecond precision is truncated to microseconds
    fraction = (fraction or "")[:6].ljust(6, "0")
    dt = datetime.strptime(f"{day} {clock}.{fraction}", STORAGE_FORMAT)
    if offset and offset != "Z":
        sign = 1 if offset[0] == "+" else -1
        dt -= sign * timedelta(hours=int(offset[1:3]), minutes=int(offset[-2:]))
    return dt.strftime(STORAGE_FORMAT)


def _rewrites(conn, table: str, column: str):
    rows = conn.execute(
        sa.text(f"SELECT rowid, {column} FROM {table} WHERE typeof({column}) = 'text'")
    )
    for rowid, value in rows.fetchall():
        normalized = to_storage_format(value)
        if normalized is not None and normalized != value:
            yield rowid, normalized


def _normalize_keyed(conn, table: str, keys: Sequence[str], column: str) -> None:
    key_match = " AND ".join(f"t.{k} = s.{k}" for k in keys)
    for rowid, normalized in list(_rewrites(conn, table, column)):
        duplicate = conn.execute(
            sa.text(
                f"SELECT 1 FROM {table} t, {table} s "
                f"WHERE s.rowid = :rowid AND {key_match} AND t.{column} = :value"
            ),
            {"rowid": rowid, "value": normalized},
        ).first()
        if duplicate:
            conn.execute(sa.text(f"DELETE FROM {table} WHERE rowid = :rowid"), {"rowid": rowid})
        else:
            conn.execute(
                sa.text(f"UPDATE {table} SET {column} = :value WHERE rowid = :rowid"),
                {"rowid": rowid, "value": normalized},
            )


def _normalize_plain(conn, table: str, column: str) -> None:
    for rowid, normalized in list(_rewrites(conn, table, column)):
        conn.execute(
            sa.text(f"UPDATE {table} SET {column} = :value WHERE rowid = :rowid"),
            {"rowid": rowid, "value": normalized},
        )


def upgrade() -> None:
    conn = op.get_bind()
    # Other backends store real timestamp types
    if conn.dialect.name != 'sqlite':
        return

    inspector = sa.inspect(conn)
    for table, (keys, column) in KEYED_COLUMNS.items():
        if inspector.has_table(table):
            _normalize_keyed(conn, table, keys, column)
    for table, columns in PLAIN_COLUMNS.items():
        if inspector.has_table(table):
            for column in columns:
                _normalize_plain(conn, table, column)


def downgrade() -> None:
    # The storage format is readable by every earlier revision
    pass
