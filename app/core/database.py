from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import BigInteger, Integer
from sqlalchemy.exc import SQLAlchemyError
from fastapi import Request
from typing import AsyncGenerator
import structlog

from app.core.config import Settings
from app.core.exceptions import PersistenceError


logger = structlog.get_logger("database")


class Base(DeclarativeBase):
    """Base model class with an implicit sequential identifier"""

    # BIGINT on Postgres, plain INTEGER on SQLite so ROWID autoincrement applies
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
        sort_order=-1,
    )


def normalize_database_url(url: str) -> str:
    """Point plain Postgres URLs at the asyncpg driver"""
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url[len(prefix):]
    return url


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine shared by all request handlers"""
    url = normalize_database_url(settings.DATABASE_URL)

    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.DEBUG)

    return create_async_engine(
        url,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        echo=settings.DEBUG,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Database session dependency"""
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def ensure_schema(engine: AsyncEngine) -> None:
    """Create the transactions table if it does not exist yet"""
    # Import all models here to ensure they are registered with SQLAlchemy
    from app.db import models  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    except SQLAlchemyError as e:
        logger.error("Error creating database table", error=str(e))
        raise PersistenceError(f"Error creating database table: {e}") from e
