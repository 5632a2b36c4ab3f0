from datetime import datetime
from typing import Optional

from sqlalchemy import Integer, String, DateTime, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class ListItem(Base):
    """Gift entry. Rows on a list carry list_id, bought rows carry purchase_id."""

    __tablename__ = "list_item"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    list_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("list.id"), nullable=True, index=True
    )
    purchase_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("purchase.id"), nullable=True, index=True
    )

    title: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    # Stored as entered by the retailer scraper; parsed with parse_price
    price: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Null when the list owner added the item themselves
    suggested_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("profiles.id"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_list_item_list_created", "list_id", "created_at"),
    )
