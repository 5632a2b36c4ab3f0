from datetime import datetime
from typing import List

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.purchase import Purchase


class PurchaseRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_user(
        self,
        profile_id: int,
        start: datetime,
        end: datetime,
        end_inclusive: bool = True,
    ) -> List[Purchase]:
        """Get purchases made by a profile within [start, end] (or [start, end)).

        Ordered by ID so downstream reductions see a stable order.
        """
        conditions = [
            Purchase.purchase_user == profile_id,
            Purchase.created_at >= start,
        ]
        if end_inclusive:
            conditions.append(Purchase.created_at <= end)
        else:
            conditions.append(Purchase.created_at < end)

        result = await self.db.execute(
            select(Purchase).where(and_(*conditions)).order_by(Purchase.id)
        )
        return list(result.scalars().all())
