#!/usr/bin/env python
"""
Seed the demo catalog into the database.

Inserts the demo properties as approved listings and the demo service
providers, skipping anything already present (matched on title/name and
city). Seeded rows get UUIDs; the short demo ids only exist in the static
fallback catalog.

Run with:
    cd backend && uv run python scripts/seed_catalog.py
    cd backend && uv run python scripts/seed_catalog.py --dry-run
"""
import argparse
import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.config import settings
from app.models import Listing, ServiceProvider
from app.services.catalog import DEMO_LISTINGS, DEMO_SERVICES


async def seed_catalog(db: AsyncSession, dry_run: bool = False) -> tuple[int, int]:
    """Insert missing demo rows. Returns (listings added, providers added)."""
    result = await db.execute(select(Listing.title, Listing.city))
    existing_listings = set(result.all())
    result = await db.execute(select(ServiceProvider.name, ServiceProvider.city))
    existing_providers = set(result.all())

    listings_added = 0
    for card in DEMO_LISTINGS:
        if (card.title, card.city) in existing_listings:
            continue
        print(f"  + listing: {card.title} ({card.city})")
        db.add(
            Listing(
                title=card.title,
                property_type=card.type,
                intent=card.intent,
                price_inr=card.price_inr,
                country=card.country,
                state=card.state,
                city=card.city,
                bedrooms=card.bedrooms,
                media=[card.image] if card.image else [],
                badges=list(card.badges),
                details={},
                status="approved",
            )
        )
        listings_added += 1

    providers_added = 0
    for card in DEMO_SERVICES:
        if (card.name, card.city) in existing_providers:
            continue
        print(f"  + provider: {card.name} ({card.city})")
        db.add(
            ServiceProvider(
                name=card.name,
                category=card.category,
                city=card.city,
                state=card.state,
                country=card.country,
                phone=card.phone,
                whatsapp=card.whatsapp,
                image=card.image,
                rating=card.rating,
                experience=card.experience,
            )
        )
        providers_added += 1

    if dry_run:
        await db.rollback()
    else:
        await db.commit()
    return listings_added, providers_added


async def main(dry_run: bool):
    engine = create_async_engine(settings.database_url)
    async_session = async_sessionmaker(engine, expire_on_commit=False)

    async with async_session() as db:
        listings, providers = await seed_catalog(db, dry_run=dry_run)

    verb = "Would add" if dry_run else "Added"
    print(f"\n{verb} {listings} listings and {providers} service providers")
    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the demo catalog")
    parser.add_argument("--dry-run", action="store_true", help="Report without writing")
    args = parser.parse_args()
    asyncio.run(main(args.dry_run))
