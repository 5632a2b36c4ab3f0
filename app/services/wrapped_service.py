import asyncio
import logging
from typing import Any, List, Optional

from app.core.exceptions import (
    FetchFailureError,
    InvalidInputError,
    ResourceNotFoundError,
    WrappedComputationError,
    WrappedException,
)
from app.db.store import WrappedStore
from app.schemas.wrapped import (
    ActiveDayItem,
    ListStats,
    ListWithMostItems,
    MostActiveDay,
    MostExpensiveGift,
    PurchaseTiming,
    SuggestedGiftCount,
    WrappedData,
    WrappedStats,
)
from app.services.wrapped_reducers import (
    ActiveDay,
    ListStatsSummary,
    SpendSummary,
    SuggestionTally,
    count_last_minute_items,
    find_most_active_day,
    name_suggesters,
    reduce_list_stats,
    reduce_spend,
    tally_suggestions,
)
from app.services.wrapped_window import TimeWindow, WrappedWindows, resolve_windows

logger = logging.getLogger(__name__)


def parse_profile_id(profile_id: Any) -> int:
    """Validate a profile id given as an int or a numeric string."""
    if profile_id is None or isinstance(profile_id, bool):
        raise InvalidInputError("Profile ID is required", {"profile_id": profile_id})
    if isinstance(profile_id, int):
        return profile_id
    if isinstance(profile_id, str) and profile_id.strip().isdecimal():
        try:
            return int(profile_id.strip())
        except ValueError as e:
            raise InvalidInputError(
                "Profile ID must be numeric", {"profile_id": profile_id}
            ) from e
    raise InvalidInputError("Profile ID must be numeric", {"profile_id": profile_id})


def assemble_wrapped(
    profile_id: int,
    year: int,
    spend: SpendSummary,
    last_minute_purchases: int,
    list_stats: ListStatsSummary,
    most_active_day: Optional[ActiveDay],
    suggestions: List[SuggestionTally],
) -> WrappedData:
    """Merge reducer outputs into the report.

    Statistics without a reducer yet keep their schema defaults (0 or "").
    """
    most_expensive = spend.most_expensive
    if most_expensive is not None:
        gift = MostExpensiveGift(
            title=most_expensive.title,
            price=most_expensive.price,
            thumbnail_url=most_expensive.thumbnail_url,
        )
    else:
        gift = MostExpensiveGift()

    stats = WrappedStats(
        total_gifts_given=spend.items_bought,
        most_expensive_gift=gift,
        total_spending=spend.total_spent,
        last_minute_purchases=last_minute_purchases,
        purchase_timing=PurchaseTiming(last_minute=last_minute_purchases),
    )

    biggest_list = list_stats.list_with_most_items
    active_day = None
    if most_active_day is not None:
        active_day = MostActiveDay(
            date=most_active_day.date,
            datetime=most_active_day.first_seen_at,
            item_count=most_active_day.item_count,
            items=[
                ActiveDayItem.model_validate(item.model_dump())
                for item in most_active_day.items
            ],
        )

    return WrappedData(
        profile_id=profile_id,
        year=year,
        stats=stats,
        list_stats=ListStats(
            total_lists_created=list_stats.total_lists_created,
            list_with_most_items=(
                ListWithMostItems(name=biggest_list.name, item_count=biggest_list.item_count)
                if biggest_list
                else None
            ),
            most_active_day=active_day,
            suggested_gift_counts=[
                SuggestedGiftCount(suggested_by=s.suggested_by, count=s.count, name=s.name)
                for s in suggestions
            ],
        ),
    )


class WrappedService:
    """Computes the annual wrapped report for one profile.

    Only the profile lookup and the purchase fetch are fatal. Every other
    step degrades to its empty value when the store fails.
    """

    def __init__(self, store: WrappedStore):
        self.store = store

    async def compute_wrapped(self, profile_id: Any, year: Any = None) -> WrappedData:
        """Compute the wrapped report for a profile and year.

        Args:
            profile_id: Profile to report on (int or numeric string)
            year: Calendar year, defaults to the current year

        Raises:
            InvalidInputError: profile_id or year is not numeric
            ResourceNotFoundError: the profile does not exist
            WrappedComputationError: a fatal fetch failed
        """
        profile_id = parse_profile_id(profile_id)
        windows = resolve_windows(year)

        try:
            return await self._compute(profile_id, windows)
        except WrappedException:
            raise
        except Exception as e:
            logger.exception(
                f"Unexpected error computing wrapped data for profile {profile_id}"
            )
            raise WrappedComputationError(
                str(e) or e.__class__.__name__,
                {"profile_id": profile_id, "year": windows.year},
            ) from e

    async def _compute(self, profile_id: int, windows: WrappedWindows) -> WrappedData:
        logger.info(
            f"Calculating wrapped data for profile {profile_id}, year {windows.year} "
            f"({windows.full_year.start.isoformat()} to {windows.full_year.end.isoformat()})"
        )

        profile = await self.store.get_profile(profile_id)
        if profile is None:
            raise ResourceNotFoundError(
                f"Profile {profile_id} not found", {"profile_id": profile_id}
            )

        spend = await self._spend_summary(profile_id, windows.full_year)

        last_minute, list_stats, owned_list_ids = await asyncio.gather(
            self._last_minute_purchases(profile_id, windows.last_minute),
            self._list_statistics(profile_id, windows.full_year),
            self._owned_list_ids(profile_id),
        )

        if owned_list_ids:
            most_active_day, suggestions = await asyncio.gather(
                self._most_active_day(owned_list_ids, windows.full_year),
                self._suggested_gift_counts(owned_list_ids, windows.full_year),
            )
        else:
            logger.info(f"No lists owned by profile {profile_id}, skipping list item stats")
            most_active_day, suggestions = None, []

        result = assemble_wrapped(
            profile_id=profile_id,
            year=windows.year,
            spend=spend,
            last_minute_purchases=last_minute,
            list_stats=list_stats,
            most_active_day=most_active_day,
            suggestions=suggestions,
        )
        logger.info(f"Wrapped data complete for profile {profile_id}, year {windows.year}")
        logger.debug(result.model_dump_json(by_alias=True, indent=2))
        return result

    async def _spend_summary(self, profile_id: int, window: TimeWindow) -> SpendSummary:
        """Primary purchase fetch; failures propagate."""
        purchases = await self.store.get_purchases(profile_id, window)
        logger.info(f"Found {len(purchases)} purchases for profile {profile_id}")
        if not purchases:
            return SpendSummary()

        items = await self.store.get_line_items_by_purchase([p.id for p in purchases])
        spend = reduce_spend(items)
        logger.info(
            f"Items bought: {spend.items_bought}, total spent: {spend.total_spent}"
        )
        return spend

    async def _last_minute_purchases(self, profile_id: int, window: TimeWindow) -> int:
        try:
            purchases = await self.store.get_purchases(profile_id, window)
            if not purchases:
                logger.debug("No purchases found in last minute range")
                return 0

            purchase_ids = [p.id for p in purchases]
            items = await self.store.get_line_items_by_purchase(purchase_ids)
            count = count_last_minute_items(purchase_ids, items)
            logger.info(f"Last minute items count: {count}")
            return count
        except FetchFailureError as e:
            logger.warning(f"Error calculating last minute purchases: {e.message}")
            return 0

    async def _list_statistics(
        self, profile_id: int, window: TimeWindow
    ) -> ListStatsSummary:
        try:
            lists = await self.store.get_lists(profile_id, window)
        except FetchFailureError as e:
            logger.warning(f"Error fetching lists created this year: {e.message}")
            return ListStatsSummary()

        if not lists:
            return ListStatsSummary()

        try:
            # Items are counted regardless of when they were added
            items = await self.store.get_list_items_by_list([gl.id for gl in lists])
        except FetchFailureError as e:
            logger.warning(f"Error counting items per list: {e.message}")
            return ListStatsSummary(total_lists_created=len(lists))

        summary = reduce_list_stats(lists, items)
        logger.info(
            f"Lists created: {summary.total_lists_created}, "
            f"list with most items: {summary.list_with_most_items}"
        )
        return summary

    async def _owned_list_ids(self, profile_id: int) -> List[int]:
        """Every list the profile owns, whatever the year it was created."""
        try:
            lists = await self.store.get_lists(profile_id)
            return [gl.id for gl in lists]
        except FetchFailureError as e:
            logger.warning(f"Error fetching user lists: {e.message}")
            return []

    async def _most_active_day(
        self, list_ids: List[int], window: TimeWindow
    ) -> Optional[ActiveDay]:
        try:
            items = await self.store.get_list_items_by_list(
                list_ids, window=window, exclude_suggested=True
            )
        except FetchFailureError as e:
            logger.warning(f"Error fetching user list items: {e.message}")
            return None

        day = find_most_active_day(items)
        if day is None:
            logger.info("No active day found")
            return None

        try:
            day.items = await self.store.get_list_items_by_list(
                list_ids, exclude_suggested=True, on_date=day.date
            )
        except FetchFailureError as e:
            logger.warning(f"Error fetching items on most active day: {e.message}")
            day.items = []

        logger.info(f"Most active day: {day.date} with {day.item_count} items")
        return day

    async def _suggested_gift_counts(
        self, list_ids: List[int], window: TimeWindow
    ) -> List[SuggestionTally]:
        try:
            items = await self.store.get_list_items_by_list(
                list_ids, window=window, only_suggested=True
            )
        except FetchFailureError as e:
            logger.warning(f"Error fetching suggested gifts: {e.message}")
            return []

        tallies = tally_suggestions(items)
        if not tallies:
            return []

        try:
            profiles = await self.store.get_profiles_by_ids(
                [t.suggested_by for t in tallies]
            )
        except FetchFailureError as e:
            logger.warning(f"Error fetching suggester profiles: {e.message}")
            profiles = []

        named = name_suggesters(tallies, profiles)
        logger.info(f"Suggested gift counts: {[(t.suggested_by, t.count) for t in named]}")
        return named
