from datetime import datetime, UTC

from sqlalchemy.ext.asyncio import AsyncAttrs, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=settings.db_echo,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_timeout=settings.db_pool_timeout,
)
async_session = async_sessionmaker(engine, expire_on_commit=False)


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(UTC)


class Base(AsyncAttrs, DeclarativeBase):
    pass


async def get_db():
    """Request-scoped session. Routes commit explicitly."""
    async with async_session() as session:
        yield session
