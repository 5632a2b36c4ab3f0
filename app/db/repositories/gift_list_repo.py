from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.gift_list import GiftList


class GiftListRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_owner(
        self,
        owner_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        end_inclusive: bool = True,
    ) -> List[GiftList]:
        """Get lists owned by a profile, optionally limited by creation time."""
        conditions = [GiftList.owner_user_id == owner_id]

        if start:
            conditions.append(GiftList.created_at >= start)
        if end:
            if end_inclusive:
                conditions.append(GiftList.created_at <= end)
            else:
                conditions.append(GiftList.created_at < end)

        result = await self.db.execute(
            select(GiftList).where(and_(*conditions)).order_by(GiftList.id)
        )
        return list(result.scalars().all())
