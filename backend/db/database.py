from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from core.config import Settings


class Base(DeclarativeBase):
    pass


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Build the async engine with a bounded connection pool.

    ``max_overflow=0`` keeps the pool at exactly ``db_pool_size`` connections;
    requests beyond that wait for a free connection.
    """
    url = make_url(settings.sqlalchemy_url)
    kwargs = {"echo": settings.database_echo}
    if url.get_backend_name() != "sqlite":
        kwargs.update(pool_size=settings.db_pool_size, max_overflow=0, pool_pre_ping=True)
    return create_async_engine(url, **kwargs)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_db_and_tables(engine: AsyncEngine):
    # Import models so they are registered on Base.metadata
    from db.inventory import item  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


