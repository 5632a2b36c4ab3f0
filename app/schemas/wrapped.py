"""Wrapped report schemas.

These shapes are the external JSON contract consumed by the front end. Field
names are camelCase on the wire except where the contract keeps the raw
column name (thumbnail_url, suggested_by, list item fields).
"""

from datetime import date as date_type
from datetime import datetime as datetime_type
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MostExpensiveGift(CamelModel):
    title: str = ""
    price: float = 0.0
    thumbnail_url: Optional[str] = Field(None, alias="thumbnail_url")


class PurchaseTiming(CamelModel):
    early_bird: int = 0  # not computed yet
    on_time: int = 0  # not computed yet
    last_minute: int = 0


class WrappedStats(CamelModel):
    total_gifts_given: int = 0
    total_gifts_received: int = 0  # not computed yet
    most_expensive_gift: MostExpensiveGift = Field(default_factory=MostExpensiveGift)
    total_spending: float = 0.0
    people_exchanged_with: int = 0  # not computed yet
    most_popular_category: str = ""  # not computed yet
    gift_giving_streak: int = 0  # not computed yet
    santa_score: int = 0  # not computed yet
    last_minute_purchases: int = 0
    most_used_retailer: str = ""  # not computed yet
    homemade_gifts: int = 0  # not computed yet
    purchase_timing: PurchaseTiming = Field(default_factory=PurchaseTiming)


class ListWithMostItems(CamelModel):
    name: str
    item_count: int


class ActiveDayItem(BaseModel):
    """A list item added on the most active day, in column naming."""
    id: int
    title: str = ""
    price: float = 0.0
    link: Optional[str] = None
    thumbnail_url: Optional[str] = None
    created_at: Optional[datetime_type] = None
    suggested_by: Optional[int] = None


class MostActiveDay(CamelModel):
    date: date_type
    datetime: Optional[datetime_type] = None  # first item counted on that day
    item_count: int
    items: List[ActiveDayItem] = Field(default_factory=list)


class SuggestedGiftCount(CamelModel):
    suggested_by: int = Field(alias="suggested_by")
    count: int
    name: str


class ListStats(CamelModel):
    total_lists_created: int = 0
    list_with_most_items: Optional[ListWithMostItems] = None
    most_active_day: Optional[MostActiveDay] = None
    suggested_gift_counts: List[SuggestedGiftCount] = Field(default_factory=list)


class WrappedData(CamelModel):
    profile_id: int
    year: int
    stats: WrappedStats = Field(default_factory=WrappedStats)
    personality_type: str = ""  # not computed yet
    personality_reason: str = ""  # not computed yet
    list_stats: ListStats = Field(default_factory=ListStats)
