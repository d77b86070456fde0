"""
Database engine, session management, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. Every request gets a session
from get_db().
"""

from datetime import datetime, timezone

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from station_ledger.config import get_settings

settings = get_settings()


def enable_sqlite_savepoints(async_engine: AsyncEngine) -> None:
    """
    Let SQLAlchemy emit BEGIN itself on SQLite.

    The sqlite3 driver otherwise starts transactions lazily on its
    own, which breaks SAVEPOINT (begin_nested) used when posting.
    """
    @event.listens_for(async_engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(async_engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


# --- Engine ---
# pool_pre_ping=True tests connections before using them,
# which handles cases where the database restarted or a
# connection went stale.
engine = create_async_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
)

if engine.dialect.name == "sqlite":
    enable_sqlite_savepoints(engine)

# --- Session Factory ---
# autoflush=False means SQL is only sent when we flush or commit,
# so a voucher and its entries reach the database together.
# expire_on_commit=False keeps loaded attributes readable after
# commit; an async session cannot lazily reload them.
SessionLocal = async_sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    """Naive UTC timestamp for DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


# --- Dependency for FastAPI ---
async def get_db():
    """
    Provide a database session for a single request.

    The session is closed when the request finishes, even if
    an error occurs. Uncommitted work is rolled back on close.
    """
    async with SessionLocal() as db:
        yield db
