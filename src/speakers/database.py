from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from speakers.models.base import Base


async def init_db(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create and return an async SQLAlchemy engine."""
    engine_kwargs: dict = {"pool_pre_ping": True, "echo": echo}
    # SQLite pools do not accept sizing arguments.
    if not database_url.startswith("sqlite"):
        engine_kwargs.update(pool_size=10, max_overflow=20)
    engine = create_async_engine(database_url, **engine_kwargs)
    return engine


def get_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create and return an async session factory bound to the given engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create any missing tables for the declared models."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    """Dispose of the async engine and release all connections."""
    await engine.dispose()
