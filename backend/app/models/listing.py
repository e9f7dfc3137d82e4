import uuid
from datetime import datetime
from sqlalchemy import String, Integer, BigInteger, DateTime, Text, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, utc_now

LISTING_STATUSES = ("pending", "approved", "rejected")
LISTING_INTENTS = ("buy", "sell", "rent", "lease")


def new_listing_id() -> str:
    return str(uuid.uuid4())


class Listing(Base):
    __tablename__ = "listings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_listing_id)
    owner_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(300))
    property_type: Mapped[str] = mapped_column(String(100), index=True)
    intent: Mapped[str] = mapped_column(String(20), index=True)
    price_inr: Mapped[int | None] = mapped_column(BigInteger, nullable=True, index=True)
    country: Mapped[str] = mapped_column(String(100), default="India")
    state: Mapped[str] = mapped_column(String(100))
    city: Mapped[str] = mapped_column(String(100), index=True)
    locality: Mapped[str | None] = mapped_column(String(200), nullable=True)
    bedrooms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    media: Mapped[list[str]] = mapped_column(JSON, default=list)
    badges: Mapped[list[str]] = mapped_column(JSON, default=list)
    details: Mapped[dict] = mapped_column(JSON, default=dict)
    status: Mapped[str] = mapped_column(String(20), default="pending", index=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    owner: Mapped["User"] = relationship(back_populates="listings")
    favorites: Mapped[list["FavoriteMark"]] = relationship(
        back_populates="listing", cascade="all, delete-orphan"
    )


# Forward references
from app.models.user import User  # noqa: E402, F401
from app.models.favorite import FavoriteMark  # noqa: E402, F401
