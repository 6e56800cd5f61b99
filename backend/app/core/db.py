"""
SQLAlchemy engine and session management.

Provides:
- Engine factory with SQLite tuning (create_db_engine)
- Session factory bound to an engine (create_session_factory)
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

# Applied to every new SQLite connection
SQLITE_PRAGMAS = {
    "journal_mode": "WAL",  # concurrent reads + writes
    "synchronous": "NORMAL",
    "cache_size": "-65536",  # 64MB page cache (negative = KiB)
    "temp_store": "MEMORY",
    "mmap_size": "268435456",  # 256MB memory-mapped I/O
    "busy_timeout": "5000",
}


def _apply_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        for name, value in SQLITE_PRAGMAS.items():
            cursor.execute(f"PRAGMA {name}={value}")
    finally:
        cursor.close()


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    SQLite connections get the pragmas above; other backends keep
    SQLAlchemy defaults with pre-ping enabled.
    """
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
        event.listen(engine, "connect", _apply_sqlite_pragmas)
        return engine

    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using
        echo=echo,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to the engine."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )
