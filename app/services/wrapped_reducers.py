"""Pure reductions behind the wrapped report.

Every function here works on records that were already fetched and never
touches the store. Ties are resolved by input order, so callers rely on the
store returning rows in a stable order (ascending id).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence

from app.core.parsing import as_utc
from app.schemas.records import (
    LineItemRecord,
    ListItemRecord,
    ListRecord,
    ProfileRecord,
)

UNNAMED_LIST = "Unnamed List"
UNKNOWN_SUGGESTER = "Unknown"


@dataclass
class SpendSummary:
    items_bought: int = 0
    total_spent: float = 0.0
    most_expensive: Optional[LineItemRecord] = None


@dataclass
class ListSummary:
    id: int
    name: str
    item_count: int


@dataclass
class ListStatsSummary:
    total_lists_created: int = 0
    list_with_most_items: Optional[ListSummary] = None


@dataclass
class ActiveDay:
    date: date
    first_seen_at: datetime
    item_count: int
    items: List[ListItemRecord] = field(default_factory=list)


@dataclass
class SuggestionTally:
    suggested_by: int
    count: int
    name: str = UNKNOWN_SUGGESTER


def reduce_spend(items: Sequence[LineItemRecord]) -> SpendSummary:
    """Total items, total spend and the most expensive line item.

    The running max is seeded with the first item and only replaced by a
    strictly more expensive one, so an all-zero set yields the first item.
    """
    if not items:
        return SpendSummary()

    total = 0.0
    most_expensive = items[0]
    for item in items:
        total += item.price
        if item.price > most_expensive.price:
            most_expensive = item

    return SpendSummary(
        items_bought=len(items),
        total_spent=total,
        most_expensive=most_expensive,
    )


def count_last_minute_items(
    purchase_ids: Iterable[int], items: Iterable[LineItemRecord]
) -> int:
    """Count line items whose parent purchase is one of `purchase_ids`."""
    ids = set(purchase_ids)
    if not ids:
        return 0
    return sum(1 for item in items if item.purchase_id in ids)


def reduce_list_stats(
    lists: Sequence[ListRecord], items: Iterable[ListItemRecord]
) -> ListStatsSummary:
    """Count lists and find the one holding the most items.

    Items are grouped by list id in input order; the first list to reach
    the highest count wins. Items on lists outside `lists` are ignored and
    a list with no items never wins.
    """
    if not lists:
        return ListStatsSummary()

    lists_by_id = {gl.id: gl for gl in lists}
    counts: Dict[int, int] = {}
    for item in items:
        if item.list_id in lists_by_id:
            counts[item.list_id] = counts.get(item.list_id, 0) + 1

    max_count = 0
    max_list_id = None
    for list_id, count in counts.items():
        if count > max_count:
            max_count = count
            max_list_id = list_id

    winner = None
    if max_list_id is not None:
        winning_list = lists_by_id[max_list_id]
        winner = ListSummary(
            id=winning_list.id,
            name=winning_list.name or UNNAMED_LIST,
            item_count=max_count,
        )

    return ListStatsSummary(
        total_lists_created=len(lists),
        list_with_most_items=winner,
    )


def find_most_active_day(items: Iterable[ListItemRecord]) -> Optional[ActiveDay]:
    """Find the UTC calendar day on which the owner added the most items.

    Suggested items and items without a timestamp are skipped. Days are
    compared in first-seen order, so ties go to the day seen first. The
    returned day carries the timestamp of its first counted item and no
    item details; those are fetched separately.
    """
    days: Dict[date, ActiveDay] = {}
    for item in items:
        if item.created_at is None or item.is_suggested:
            continue
        created_at = as_utc(item.created_at)
        day_key = created_at.date()
        if day_key not in days:
            days[day_key] = ActiveDay(date=day_key, first_seen_at=created_at, item_count=0)
        days[day_key].item_count += 1

    best = None
    for day in days.values():
        if best is None or day.item_count > best.item_count:
            best = day
    return best


def tally_suggestions(items: Iterable[ListItemRecord]) -> List[SuggestionTally]:
    """Count suggested items per suggester, most suggestions first.

    The sort is stable: suggesters with equal counts keep first-seen order.
    """
    counts: Dict[int, int] = {}
    for item in items:
        if item.suggested_by is None:
            continue
        counts[item.suggested_by] = counts.get(item.suggested_by, 0) + 1

    tallies = [
        SuggestionTally(suggested_by=suggester, count=count)
        for suggester, count in counts.items()
    ]
    tallies.sort(key=lambda t: t.count, reverse=True)
    return tallies


def name_suggesters(
    tallies: Sequence[SuggestionTally], profiles: Iterable[ProfileRecord]
) -> List[SuggestionTally]:
    """Attach display names to tallies; unresolved suggesters become 'Unknown'."""
    names = {p.id: p.display_name for p in profiles}
    return [
        SuggestionTally(
            suggested_by=t.suggested_by,
            count=t.count,
            name=names.get(t.suggested_by) or UNKNOWN_SUGGESTER,
        )
        for t in tallies
    ]
