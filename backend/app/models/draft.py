import uuid
from datetime import datetime
from sqlalchemy import String, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, utc_now


class Draft(Base):
    """A partially completed listing built through the submission wizard."""

    __tablename__ = "property_drafts"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    form_type: Mapped[str] = mapped_column(String(30))
    property_type: Mapped[str] = mapped_column(String(100))
    listing_type: Mapped[str] = mapped_column(String(50))
    current_step: Mapped[int] = mapped_column(Integer, default=1)
    data: Mapped[dict] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, index=True
    )

    user: Mapped["User"] = relationship(back_populates="drafts")


from app.models.user import User  # noqa: E402, F401
