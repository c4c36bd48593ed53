"""
Database configuration and connection management.

The engine and session factory are built by the application lifespan and
kept on ``app.state``; nothing here holds a process-wide connection.
"""

from typing import AsyncGenerator
from fastapi import HTTPException, Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base
from loguru import logger

# Create declarative base
Base = declarative_base()


def to_async_url(database_url: str) -> str:
    """Convert a sync PostgreSQL URL to its asyncpg form."""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    return database_url


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create the async engine for the given database URL."""
    url = to_async_url(database_url)
    options = {"echo": echo}
    if url.startswith("postgresql"):
        options.update(pool_pre_ping=True, pool_recycle=300)
    return create_async_engine(url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create an async session factory bound to the engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session.

    Yields:
        AsyncSession: Database session from the application's session factory
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception as e:
            if not isinstance(e, HTTPException):
                logger.error("Database session error: {}", str(e))
            await session.rollback()
            raise


async def create_tables(engine: AsyncEngine):
    """Create database tables."""
    try:
        async with engine.begin() as conn:
            # Import all models to ensure they're registered
            from recipebox.models import collection, ingredient, recipe, user  # noqa: F401

            await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        raise


async def drop_tables(engine: AsyncEngine):
    """Drop all database tables."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            logger.info("Database tables dropped successfully")
    except Exception as e:
        logger.error(f"Error dropping database tables: {e}")
        raise
