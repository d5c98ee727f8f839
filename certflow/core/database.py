"""
Database engine and session wiring.

The application runs on one engine built from settings. Tests build their
own engine over a temporary file with the same helpers, so both get sessions
with expire_on_commit disabled: the engines read committed instances back
into response models after each step.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlmodel import SQLModel

import certflow.models  # noqa: F401  (registers tables on SQLModel.metadata)
from certflow.core.config import get_settings
from certflow.core.logging import get_logger

settings = get_settings()
logger = get_logger(__name__)


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for a database URL."""
    return create_async_engine(database_url, echo=echo)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Create missing tables; existing ones are left as they are."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


engine = build_engine(settings.database_url, echo=settings.debug)
AsyncSessionLocal = build_session_factory(engine)


async def init_db() -> None:
    await create_tables(engine)
    logger.debug("Tables ensured", extra={"tables": sorted(SQLModel.metadata.tables)})


async def close_db() -> None:
    await engine.dispose()
    logger.info("Database connections closed")


async def ping(session: AsyncSession) -> bool:
    """Return True when the database answers a trivial query."""
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database ping failed")
        return False
    return True


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Session for scripts running outside a request; rolls back on error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with AsyncSessionLocal() as session:
        yield session
