import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models import get_db, Listing, ServiceProvider, User
from app.api.deps import get_optional_user
from app.api.listings import favorite_ids
from app.schemas.search import ListingCard, ServiceCard, SearchPage
from app.services.catalog import DEMO_LISTINGS, DEMO_SERVICES
from app.services.formatting import format_price_display
from app.services.search import (
    SearchCriteria,
    ServiceCriteria,
    search_listings,
    search_services,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])

PLACEHOLDER_IMAGE = "/placeholder.svg"


def listing_to_card(listing: Listing) -> ListingCard:
    return ListingCard(
        id=listing.id,
        title=listing.title,
        type=listing.property_type,
        intent=listing.intent,
        price_inr=listing.price_inr,
        city=listing.city,
        state=listing.state,
        country=listing.country,
        locality=listing.locality,
        bedrooms=listing.bedrooms,
        image=listing.media[0] if listing.media else PLACEHOLDER_IMAGE,
        badges=listing.badges or [],
        url=f"/property/{listing.id}",
    )


def provider_to_card(provider: ServiceProvider) -> ServiceCard:
    return ServiceCard(
        id=provider.id,
        name=provider.name,
        category=provider.category,
        city=provider.city,
        state=provider.state,
        country=provider.country,
        phone=provider.phone,
        whatsapp=provider.whatsapp or provider.phone,
        image=provider.image or PLACEHOLDER_IMAGE,
        url=f"/service/{provider.id}",
        rating=provider.rating,
        experience=provider.experience,
    )


async def load_listing_candidates(db: AsyncSession) -> list[ListingCard]:
    """Approved listings, falling back to the demo catalog."""
    try:
        result = await db.execute(
            select(Listing)
            .where(Listing.status == "approved")
            .order_by(Listing.created_at.desc(), Listing.id)
        )
        listings = result.scalars().all()
    except SQLAlchemyError as e:
        logger.warning(f"Listing search query failed, using demo catalog: {e}")
        await db.rollback()
        return list(DEMO_LISTINGS)

    if not listings and settings.search_fallback_enabled:
        return list(DEMO_LISTINGS)
    return [listing_to_card(l) for l in listings]


async def load_service_candidates(db: AsyncSession) -> list[ServiceCard]:
    try:
        result = await db.execute(
            select(ServiceProvider).order_by(ServiceProvider.created_at, ServiceProvider.id)
        )
        providers = result.scalars().all()
    except SQLAlchemyError as e:
        logger.warning(f"Service search query failed, using demo catalog: {e}")
        await db.rollback()
        return list(DEMO_SERVICES)

    if not providers and settings.search_fallback_enabled:
        return list(DEMO_SERVICES)
    return [provider_to_card(p) for p in providers]


@router.get("/listings", response_model=SearchPage[ListingCard])
async def search_listing_cards(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User | None, Depends(get_optional_user)],
    intent: str | None = None,
    property_type: str | None = Query(None, alias="propertyType"),
    country: str | None = None,
    state: str | None = None,
    city: str | None = None,
    budget_min: str | None = Query(None, alias="budgetMin"),
    budget_max: str | None = Query(None, alias="budgetMax"),
    min_bedrooms: str | None = Query(None, alias="minBedrooms"),
    page: str | None = None,
    page_size: str | None = Query(None, alias="pageSize"),
):
    """Search approved listings. Numeric parameters are parsed leniently."""
    criteria = SearchCriteria.from_params(
        {
            "intent": intent,
            "propertyType": property_type,
            "country": country,
            "state": state,
            "city": city,
            "budgetMin": budget_min,
            "budgetMax": budget_max,
            "minBedrooms": min_bedrooms,
            "page": page,
            "pageSize": page_size,
        },
        default_page_size=settings.search_default_page_size,
        max_page_size=settings.search_max_page_size,
    )

    candidates = await load_listing_candidates(db)
    result = search_listings(criteria, candidates)
    favorites = await favorite_ids(db, user)

    # Catalog cards are shared, so decorate copies
    result.items = [
        card.model_copy(
            update={
                "price_display": format_price_display(card.price_inr),
                "is_favorite": card.id in favorites,
            }
        )
        for card in result.items
    ]
    return result


@router.get("/services", response_model=SearchPage[ServiceCard])
async def search_service_cards(
    db: Annotated[AsyncSession, Depends(get_db)],
    category: str | None = None,
    country: str | None = None,
    state: str | None = None,
    city: str | None = None,
    page: str | None = None,
    page_size: str | None = Query(None, alias="pageSize"),
):
    criteria = ServiceCriteria.from_params(
        {
            "category": category,
            "country": country,
            "state": state,
            "city": city,
            "page": page,
            "pageSize": page_size,
        },
        default_page_size=settings.search_default_page_size,
        max_page_size=settings.search_max_page_size,
    )
    return search_services(criteria, await load_service_candidates(db))
