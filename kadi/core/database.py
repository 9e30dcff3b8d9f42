"""
Database configuration and session management
"""

from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker
import structlog

from kadi.core.config import get_settings

logger = structlog.get_logger(__name__)
settings = get_settings()


def build_engine(url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """Create an async engine, enforcing foreign keys on SQLite"""
    engine = create_async_engine(
        url.replace("postgresql://", "postgresql+asyncpg://"),
        echo=echo,
        future=True,
        **kwargs,
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _set_sqlite_pragma)
    return engine


def _set_sqlite_pragma(dbapi_connection, connection_record):  # pragma: no cover - engine hook
    """SQLite leaves foreign keys off unless asked per connection"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON;")
    cursor.close()


# Create async engine
async_engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# Create async session factory
async_session_maker = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db(engine: AsyncEngine = async_engine):
    """Initialize database tables"""
    import kadi.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("database_tables_created")


async def get_session():
    """Dependency to get database session"""
    async with async_session_maker() as session:
        yield session
