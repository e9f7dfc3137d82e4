from app.models.base import Base, engine, async_session, get_db, utc_now
from app.models.user import User
from app.models.listing import Listing, LISTING_STATUSES, LISTING_INTENTS
from app.models.service_provider import ServiceProvider
from app.models.draft import Draft
from app.models.favorite import FavoriteMark
from app.models.lead import Lead

__all__ = [
    "Base",
    "engine",
    "async_session",
    "get_db",
    "utc_now",
    "User",
    "Listing",
    "LISTING_STATUSES",
    "LISTING_INTENTS",
    "ServiceProvider",
    "Draft",
    "FavoriteMark",
    "Lead",
]
