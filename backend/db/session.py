"""
Ops Dashboard Database Session Management

Async SQLAlchemy engine and session factory. This module is the persistence
gateway for every router: handlers receive an ``AsyncSession`` through
``api.deps.get_db`` and issue parameterized statements against it.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from core.config import get_settings

settings = get_settings()


def _engine_options(database_url: str) -> dict:
    # SQLite (local runs) uses its own single-connection pool; sizing only applies to servers.
    if make_url(database_url).get_backend_name() == "sqlite":
        return {}
    return {"pool_size": 20, "max_overflow": 10, "pool_pre_ping": True}


engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    **_engine_options(settings.database_url),
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base for all SQLAlchemy models."""
    pass
