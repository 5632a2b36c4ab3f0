from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from app.config import get_settings
from app.db.base import Base

settings = get_settings()

engine = create_async_engine(
    settings.DATABASE_URL,
    pool_size=settings.DATABASE_POOL_SIZE,
    max_overflow=settings.DATABASE_MAX_OVERFLOW,
    pool_pre_ping=True,  # Detect stale connections before using them
    echo=False,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db():
    """Register models and optionally create tables.

    The wrapped service only reads; the schema is owned by the main
    platform. AUTO_CREATE_TABLES=True runs create_all() for local databases.
    """
    import logging
    logger = logging.getLogger(__name__)

    # Import all models to ensure they're registered with SQLAlchemy
    from app.models import profile, purchase, gift_list, list_item  # noqa

    if settings.AUTO_CREATE_TABLES:
        logger.info("Running create_all() for database initialization (AUTO_CREATE_TABLES=True).")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    else:
        logger.info("Database models registered (AUTO_CREATE_TABLES=False).")
