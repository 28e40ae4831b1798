# ==== DATABASE CONNECTION AND SESSION MANAGEMENT ==== #

"""
Database connection and session management for the procurement API.

This module provides async SQLAlchemy connectivity to PostgreSQL with a
pooled engine, a FastAPI session dependency and a context manager for
code running outside requests.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
    AsyncEngine
)
from sqlalchemy.orm import declarative_base

from procurement.settings import settings
from procurement.observability.metrics import db_connections_active


# ==== SQLALCHEMY CONFIGURATION ==== #

# SQLAlchemy base for model definitions
Base = declarative_base()

# Global engine and session factory instances
engine: AsyncEngine | None = None
SessionLocal: async_sessionmaker[AsyncSession] | None = None


def normalize_database_url(db_url: str) -> str:
    """Force the asyncpg driver on PostgreSQL URLs.

    Args:
        db_url: Database URL as configured

    Returns:
        str: URL using the ``postgresql+asyncpg`` scheme
    """
    if not db_url.startswith("postgresql+asyncpg://"):
        db_url = db_url.replace("postgresql+psycopg://", "postgresql+asyncpg://")
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://")
        db_url = db_url.replace("postgres://", "postgresql+asyncpg://")

    # asyncpg spells the SSL query parameter differently
    if "sslmode=require" in db_url:
        db_url = db_url.replace("sslmode=require", "ssl=require")

    return db_url


# ==== DATABASE INITIALIZATION ==== #

def init_database() -> AsyncEngine:
    """
    Initialize database engine and session factory.

    Returns:
        AsyncEngine: The process-wide engine
    """
    global engine, SessionLocal

    if engine is not None:
        return engine

    engine = create_async_engine(
        normalize_database_url(settings.DATABASE_URL),
        echo=settings.DB_ECHO,
        pool_pre_ping=True,
        connect_args={
            "server_settings": {
                "application_name": settings.SERVICE_NAME,
                "timezone": "UTC"
            }
        },
    )

    SessionLocal = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False
    )

    return engine


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session with automatic commit and cleanup.

    Yields:
        AsyncSession: Database session
    """
    if SessionLocal is None:
        init_database()

    async with SessionLocal() as session:
        try:
            db_connections_active.inc()
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            db_connections_active.dec()


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    The whole request runs as one unit of work: committed when the handler
    returns, rolled back when it raises.

    Yields:
        AsyncSession: Database session for request handling
    """
    async with get_session() as session:
        yield session


async def close_database() -> None:
    """Close database connections on shutdown."""
    global engine, SessionLocal
    if engine is not None:
        await engine.dispose()
        engine = None
        SessionLocal = None
