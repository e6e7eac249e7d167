"""
Snippetbox - Database Engine and Connection Pool
=================================================

What:  Async SQLAlchemy engine construction, session factory and health ping.
Why:   Centralizes all connection logic in one place; the snippet store only
       ever receives a session factory.
How:   `open_engine()` builds an async engine with connection pooling,
       `ping()` proves the database answers, `dispose_engine()` closes
       the pool on shutdown.
Who:   Called by the app factory (create_app) and its lifespan handler.

Connection Pooling Strategy:
    pool_size / max_overflow come from settings (defaults 10 + 5).
    pool_pre_ping validates a connection before each checkout.
    pool_recycle=3600 recycles connections every hour.

    The pool is the one shared mutable resource of the process. Every
    request checks out its own connection through its own session, so
    concurrent requests never need an external lock.
"""

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from snippetbox.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers every table on one shared metadata object (used by Alembic
    for migrations and by the test suite for `create_all`).
    """
    pass


# ── Engine Configuration ──────────────────────────────────────────────────
def open_engine(config: Settings) -> AsyncEngine:
    """
    Create the async engine for `config.database_url`.

    Creating the engine does not connect; the first checkout does.
    Call `ping()` to fail fast when the database is unreachable.
    """
    options = {
        "pool_pre_ping": config.db_pool_pre_ping,
        # Echo SQL only when debugging; it is noisy otherwise
        "echo": config.log_level == "DEBUG",
    }
    # SQLite picks its own pool class and rejects the queue-pool sizing args
    if make_url(config.database_url).get_backend_name() != "sqlite":
        options.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_recycle=3600,
        )
    return create_async_engine(config.database_url, **options)


# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: rows stay readable after commit, outside the session
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def ping(engine: AsyncEngine) -> None:
    """
    What:  Round-trips `SELECT 1` through a pooled connection.
    When:  At startup (fatal on failure) and from the /health endpoint.
    Raises whatever the driver raises; callers decide how fatal that is.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
