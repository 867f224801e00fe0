"""
Database engine configuration for the signal publishing bot

Async SQLAlchemy 2.0 setup with connection pooling
"""

from loguru import logger
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)

from config.config import DATABASE_URL, IS_PRODUCTION, ENVIRONMENT


# Global engine and session maker
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def _engine_options(url: str) -> dict:
    """Pool and driver options; asyncpg tuning only applies to PostgreSQL."""
    if not url.startswith("postgresql"):
        return {"echo": False}

    return {
        "pool_size": 5 if IS_PRODUCTION else 2,
        "max_overflow": 10 if IS_PRODUCTION else 5,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "echo": False,
        "connect_args": {
            "statement_cache_size": 0,  # pgbouncer transaction pooling
            "server_settings": {"application_name": "signal_bot"},
        },
    }


def get_engine() -> AsyncEngine:
    """
    Create and configure async database engine

    Returns:
        Configured AsyncEngine instance
    """
    global engine

    if engine is None:
        engine = create_async_engine(DATABASE_URL, **_engine_options(DATABASE_URL))
        logger.info(f"Database engine created - Environment: {ENVIRONMENT}")

    return engine


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """
    Create async session maker

    Returns:
        Configured async_sessionmaker instance
    """
    global AsyncSessionLocal

    if AsyncSessionLocal is None:
        AsyncSessionLocal = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info("Session maker created")

    return AsyncSessionLocal


async def dispose_engine() -> None:
    """
    Dispose database engine and close all connections

    Call this on application shutdown
    """
    global engine, AsyncSessionLocal

    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
        engine = None
        AsyncSessionLocal = None


async def check_connection() -> bool:
    """
    Check database connection

    Returns:
        True if connection successful, False otherwise
    """
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection check: OK")
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
