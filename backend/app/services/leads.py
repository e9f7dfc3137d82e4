"""Lead intake: input clean-up and creation."""

import re

from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Lead, User

_TAG = re.compile(r"<[^>]*>")
_NOT_PHONE = re.compile(r"[^\d+]")

MAX_PHONE_LENGTH = 20
MAX_NAME_LENGTH = 100
MAX_MESSAGE_LENGTH = 2000


def sanitize_text(value: str | None, max_length: int = 1000) -> str:
    """Trim, drop markup and cap the length. ``None`` becomes ``""``."""
    if not value:
        return ""
    cleaned = _TAG.sub("", value.strip()).strip()
    return cleaned[:max_length]


def sanitize_phone(phone: str | None) -> str:
    """Keep digits, with a single ``+`` in front if the input had one."""
    if not phone:
        return ""
    cleaned = _NOT_PHONE.sub("", phone)
    if "+" in cleaned:
        cleaned = "+" + cleaned.replace("+", "")
    return cleaned[:MAX_PHONE_LENGTH]


async def create_lead(
    db: AsyncSession,
    name: str,
    phone: str,
    email: str | None = None,
    message: str | None = None,
    listing_id: str | None = None,
    service_id: str | None = None,
    user: User | None = None,
    catalog_listing_id: str | None = None,
    catalog_service_id: str | None = None,
) -> Lead:
    lead = Lead(
        name=sanitize_text(name, MAX_NAME_LENGTH),
        phone=sanitize_phone(phone),
        email=email.lower() if email else None,
        message=sanitize_text(message, MAX_MESSAGE_LENGTH) or None,
        listing_id=listing_id,
        service_id=service_id,
        user_id=user.id if user else None,
        catalog_listing_id=catalog_listing_id,
        catalog_service_id=catalog_service_id,
    )
    db.add(lead)
    await db.commit()
    await db.refresh(lead)
    return lead
