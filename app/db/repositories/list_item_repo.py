from datetime import datetime
from typing import List, Optional, Iterable

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.list_item import ListItem


class ListItemRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_purchases(self, purchase_ids: Iterable[int]) -> List[ListItem]:
        """Get the line items belonging to any of the given purchases."""
        ids = list(purchase_ids)
        if not ids:
            return []

        result = await self.db.execute(
            select(ListItem)
            .where(ListItem.purchase_id.in_(ids))
            .order_by(ListItem.id)
        )
        return list(result.scalars().all())

    async def get_by_lists(
        self,
        list_ids: Iterable[int],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        end_inclusive: bool = True,
        exclude_suggested: bool = False,
        only_suggested: bool = False,
        order_by_created: bool = False,
    ) -> List[ListItem]:
        """Get items on any of the given lists.

        Args:
            list_ids: Lists to read items from
            start: Optional lower bound on created_at (inclusive)
            end: Optional upper bound on created_at
            end_inclusive: Whether `end` itself is inside the range
            exclude_suggested: Only items the list owner added
            only_suggested: Only items suggested by another profile
            order_by_created: Order by created_at instead of ID
        """
        ids = list(list_ids)
        if not ids:
            return []

        conditions = [ListItem.list_id.in_(ids)]

        if start:
            conditions.append(ListItem.created_at >= start)
        if end:
            if end_inclusive:
                conditions.append(ListItem.created_at <= end)
            else:
                conditions.append(ListItem.created_at < end)
        if exclude_suggested:
            conditions.append(ListItem.suggested_by.is_(None))
        if only_suggested:
            conditions.append(ListItem.suggested_by.is_not(None))

        query = select(ListItem).where(and_(*conditions))
        if order_by_created:
            query = query.order_by(ListItem.created_at.asc(), ListItem.id)
        else:
            query = query.order_by(ListItem.id)

        result = await self.db.execute(query)
        return list(result.scalars().all())
