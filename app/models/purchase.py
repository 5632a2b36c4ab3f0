from datetime import datetime

from sqlalchemy import Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class Purchase(Base):
    """A checkout event. Its line items live in `list_item` rows with a purchase_id."""

    __tablename__ = "purchase"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    purchase_user: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        Index("ix_purchase_user_created", "purchase_user", "created_at"),
    )
