"""Typed snapshots of store rows, validated at the fetch boundary."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from app.core.parsing import as_utc, parse_price


class StoreRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)


class ProfileRecord(StoreRecord):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        parts = [p.strip() for p in (self.first_name, self.last_name) if p and p.strip()]
        return " ".join(parts)


class PurchaseRecord(StoreRecord):
    id: int
    purchase_user: int
    created_at: datetime

    @field_validator("created_at", mode="after")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        return as_utc(v)


class LineItemRecord(StoreRecord):
    id: int
    purchase_id: Optional[int] = None
    title: str = ""
    price: float = 0.0
    link: Optional[str] = None
    thumbnail_url: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def parse_stored_price(cls, v):
        return parse_price(v)

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v):
        return v or ""


class ListRecord(StoreRecord):
    id: int
    owner_user_id: int
    name: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("created_at", mode="after")
    @classmethod
    def normalize_created_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class ListItemRecord(StoreRecord):
    id: int
    list_id: Optional[int] = None
    title: str = ""
    price: float = 0.0
    link: Optional[str] = None
    thumbnail_url: Optional[str] = None
    created_at: Optional[datetime] = None
    suggested_by: Optional[int] = None

    @field_validator("price", mode="before")
    @classmethod
    def parse_stored_price(cls, v):
        return parse_price(v)

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v):
        return v or ""

    @field_validator("created_at", mode="after")
    @classmethod
    def normalize_created_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @property
    def is_suggested(self) -> bool:
        return self.suggested_by is not None
