"""
Database Session Management
Async engine and per-request session handling
"""

from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from braincache.core.config import settings
from braincache.core.logging import get_logger
from braincache.db.base import Base

logger = get_logger(__name__)

# Engine
engine = None
async_session_maker = None


async def init_db(database_url: Optional[str] = None) -> None:
    """Initialize database engine and create tables"""
    global engine, async_session_maker

    url = database_url or settings.DATABASE_URL
    logger.info(f"Connecting to database at {url.split('@')[-1]}")

    engine_kwargs = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if url.startswith("postgresql"):
        engine_kwargs.update(pool_size=10, max_overflow=20)

    engine = create_async_engine(url, **engine_kwargs)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Import all SQLAlchemy models to ensure they're registered with Base
    from braincache.db import models  # noqa: F401

    # Create tables (use Alembic for production migrations)
    if settings.ENVIRONMENT == "development":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")


async def close_db() -> None:
    """Close database connections"""
    global engine

    if engine:
        await engine.dispose()
        engine = None
        logger.info("Database connection closed")


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session (dependency injection)"""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def check_database() -> bool:
    """Check the database answers a trivial query"""
    try:
        async with async_session_maker() as session:
            await session.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.warning(f"Database check failed: {e}")
        return False
