"""
Async SQLAlchemy engine and session factory.

PostgreSQL goes through ``asyncpg``; tests and local demos may point
``DATABASE_URL`` at ``sqlite+aiosqlite`` instead, which takes no pool
sizing arguments.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from ridematch.config import settings


def build_engine(url: str) -> AsyncEngine:
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=False)
    return create_async_engine(url, echo=False, pool_size=20, max_overflow=10)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.database_url)
async_session_factory = build_session_factory(engine)


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""
