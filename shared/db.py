# shared/db.py
from typing import AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from shared.config import settings

Base = declarative_base()

# Engine is created on first use so importing models never opens a connection
_engine: Optional[AsyncEngine] = None
_async_session_local: Optional[async_sessionmaker] = None


def get_database_url() -> str:
    db_url = settings.DATABASE_URL
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return db_url


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection"""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine_for_url(db_url: str, echo: bool = False) -> AsyncEngine:
    if db_url.startswith("sqlite"):
        engine = create_async_engine(
            db_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )
        enable_sqlite_foreign_keys(engine)
        return engine

    return create_async_engine(db_url, echo=echo, pool_pre_ping=True)


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        _engine = create_engine_for_url(get_database_url(), echo=settings.DB_ECHO)
    return _engine


def get_session_local() -> async_sessionmaker:
    global _async_session_local
    if _async_session_local is None:
        _async_session_local = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _async_session_local


# Dependency to get DB session
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request; commits leftover pending changes, rolls back on error"""
    session_factory = get_session_local()
    async with session_factory() as session:
        try:
            yield session
            if session.new or session.dirty or session.deleted:
                await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    # models must be imported so their tables are registered on Base.metadata
    import services.university_directory.models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    global _engine, _async_session_local
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session_local = None
