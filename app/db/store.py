"""Store capability consumed by the wrapped engine.

The engine only ever talks to a `WrappedStore`. `SqlWrappedStore` binds it
to the SQLAlchemy repositories and opens one session per call, so callers
may run several reads concurrently.
"""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Iterable, List, Optional, Protocol

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import FetchFailureError
from app.db.repositories.gift_list_repo import GiftListRepository
from app.db.repositories.list_item_repo import ListItemRepository
from app.db.repositories.profile_repo import ProfileRepository
from app.db.repositories.purchase_repo import PurchaseRepository
from app.schemas.records import (
    LineItemRecord,
    ListItemRecord,
    ListRecord,
    ProfileRecord,
    PurchaseRecord,
)
from app.services.wrapped_window import TimeWindow

logger = logging.getLogger(__name__)


class WrappedStore(Protocol):
    async def get_profile(self, profile_id: int) -> Optional[ProfileRecord]:
        ...

    async def get_purchases(
        self, profile_id: int, window: TimeWindow
    ) -> List[PurchaseRecord]:
        ...

    async def get_line_items_by_purchase(
        self, purchase_ids: Iterable[int]
    ) -> List[LineItemRecord]:
        ...

    async def get_lists(
        self, owner_profile_id: int, window: Optional[TimeWindow] = None
    ) -> List[ListRecord]:
        ...

    async def get_list_items_by_list(
        self,
        list_ids: Iterable[int],
        window: Optional[TimeWindow] = None,
        exclude_suggested: bool = False,
        only_suggested: bool = False,
        on_date: Optional[date] = None,
    ) -> List[ListItemRecord]:
        ...

    async def get_profiles_by_ids(self, ids: Iterable[int]) -> List[ProfileRecord]:
        ...


class SqlWrappedStore:
    """WrappedStore backed by the relational database."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self.session_maker() as session:
                yield session
        except (SQLAlchemyError, ValidationError) as e:
            logger.error(f"Store read '{operation}' failed: {e}")
            raise FetchFailureError(
                f"Failed to fetch {operation}: {e}",
                {"operation": operation},
            ) from e

    async def get_profile(self, profile_id: int) -> Optional[ProfileRecord]:
        async with self._session("profile") as session:
            profile = await ProfileRepository(session).get_by_id(profile_id)
            return ProfileRecord.model_validate(profile) if profile else None

    async def get_purchases(
        self, profile_id: int, window: TimeWindow
    ) -> List[PurchaseRecord]:
        async with self._session("purchases") as session:
            purchases = await PurchaseRepository(session).get_by_user(
                profile_id, window.start, window.end, window.end_inclusive
            )
            return [PurchaseRecord.model_validate(p) for p in purchases]

    async def get_line_items_by_purchase(
        self, purchase_ids: Iterable[int]
    ) -> List[LineItemRecord]:
        ids = list(purchase_ids)
        if not ids:
            return []
        async with self._session("line items") as session:
            items = await ListItemRepository(session).get_by_purchases(ids)
            return [LineItemRecord.model_validate(i) for i in items]

    async def get_lists(
        self, owner_profile_id: int, window: Optional[TimeWindow] = None
    ) -> List[ListRecord]:
        async with self._session("lists") as session:
            repo = GiftListRepository(session)
            if window is None:
                lists = await repo.get_by_owner(owner_profile_id)
            else:
                lists = await repo.get_by_owner(
                    owner_profile_id, window.start, window.end, window.end_inclusive
                )
            return [ListRecord.model_validate(gl) for gl in lists]

    async def get_list_items_by_list(
        self,
        list_ids: Iterable[int],
        window: Optional[TimeWindow] = None,
        exclude_suggested: bool = False,
        only_suggested: bool = False,
        on_date: Optional[date] = None,
    ) -> List[ListItemRecord]:
        ids = list(list_ids)
        if not ids:
            return []

        # A single-day read narrows (and orders) by that day's bounds
        if on_date is not None:
            window = TimeWindow.for_day(on_date)

        async with self._session("list items") as session:
            items = await ListItemRepository(session).get_by_lists(
                ids,
                start=window.start if window else None,
                end=window.end if window else None,
                end_inclusive=window.end_inclusive if window else True,
                exclude_suggested=exclude_suggested,
                only_suggested=only_suggested,
                order_by_created=on_date is not None,
            )
            return [ListItemRecord.model_validate(i) for i in items]

    async def get_profiles_by_ids(self, ids: Iterable[int]) -> List[ProfileRecord]:
        ids = list(ids)
        if not ids:
            return []
        async with self._session("profiles") as session:
            profiles = await ProfileRepository(session).get_by_ids(ids)
            return [ProfileRecord.model_validate(p) for p in profiles]
