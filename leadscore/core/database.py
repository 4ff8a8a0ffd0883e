from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from leadscore.core.config import settings

# Request handlers and the decay sweep share this pool; the sweep opens one
# short-lived session per lead, so size it for DECAY_CONCURRENCY plus traffic.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request."""
    async with AsyncSessionLocal() as session:
        yield session
