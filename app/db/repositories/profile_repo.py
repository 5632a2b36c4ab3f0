from typing import Optional, List, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.profile import Profile


class ProfileRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, profile_id: int) -> Optional[Profile]:
        """Get profile by ID."""
        result = await self.db.execute(
            select(Profile).where(Profile.id == profile_id)
        )
        return result.scalar_one_or_none()

    async def get_by_ids(self, profile_ids: Iterable[int]) -> List[Profile]:
        """Get all profiles whose ID is in the given set, ordered by ID."""
        ids = list(profile_ids)
        if not ids:
            return []

        result = await self.db.execute(
            select(Profile).where(Profile.id.in_(ids)).order_by(Profile.id)
        )
        return list(result.scalars().all())
