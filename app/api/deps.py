from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import async_session_maker
from app.db.store import SqlWrappedStore, WrappedStore


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Database session dependency."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_wrapped_store() -> WrappedStore:
    """Store capability handed to the wrapped engine."""
    return SqlWrappedStore(async_session_maker)
