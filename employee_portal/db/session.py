import logging

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy import text
from employee_portal.core.config import settings

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> dict:
    """
    Keyword arguments for create_async_engine.

    Pool sizing is left to SQLAlchemy's defaults for SQLite; the pool knobs
    from settings only mean something for PostgreSQL and friends.
    """
    options = {"echo": settings.SQLALCHEMY_ECHO}
    if database_url.startswith("sqlite"):
        return options
    options.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,   # drop connections the server closed
        pool_recycle=3600,
        pool_timeout=30,
    )
    return options


engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables() -> None:
    """Create missing tables from the models (DB_AUTO_CREATE only)."""
    from employee_portal.db.base import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_db_connection() -> bool:
    """Run a trivial query; False if the database can't be reached."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Database check failed: {e}")
        return False
    return True
