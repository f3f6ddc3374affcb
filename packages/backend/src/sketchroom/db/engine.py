"""Async SQLAlchemy engine and session factory.

Learn: SQLAlchemy 2.0 async mode — create_async_engine for connection pooling,
AsyncSession for per-request database access, dependency injection via FastAPI.
The engine and its pool are the only process-wide database state; every
request gets its own session.
"""

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from sketchroom.config import settings


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Turn on FK enforcement for SQLite connections.

    SQLite ignores ON DELETE CASCADE unless the pragma is set per
    connection. Room deletion relies on the cascade.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def driver_connect_args(url: str, command_timeout: float | None) -> dict:
    """Driver-level connect args for `url`.

    asyncpg cancels any statement running longer than command_timeout
    seconds; other drivers get no extra arguments.
    """
    if command_timeout is None or make_url(url).drivername != "postgresql+asyncpg":
        return {}
    return {"command_timeout": command_timeout}


def build_engine(url: str, command_timeout: float | None = None, **kwargs) -> AsyncEngine:
    """Create an engine for `url` with the pragmas the schema relies on."""
    connect_args = driver_connect_args(url, command_timeout)
    if connect_args:
        kwargs["connect_args"] = {**connect_args, **kwargs.get("connect_args", {})}
    engine = create_async_engine(url, **kwargs)
    enable_sqlite_foreign_keys(engine)
    return engine


# Connection pool: min 5, max 20 connections.
# pool_timeout bounds how long a request waits for a free connection,
# command_timeout how long a single statement may run.
engine = build_engine(
    settings.database_url,
    command_timeout=settings.database_command_timeout,
    echo=settings.debug,
    pool_size=5,
    max_overflow=15,
    pool_timeout=settings.database_pool_timeout,
)

# Session factory: each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
