import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import get_db, Listing, FavoriteMark, User
from app.api.deps import get_current_user, get_optional_user
from app.schemas.listing import ListingCreate, ListingResponse, ListingUpdate
from app.services.formatting import format_price_display

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/listings", tags=["listings"])

EDITABLE_STATUSES = ("pending", "rejected")


async def favorite_ids(db: AsyncSession, user: User | None) -> set[str]:
    if user is None:
        return set()
    result = await db.execute(
        select(FavoriteMark.listing_id).where(FavoriteMark.user_id == user.id)
    )
    return set(result.scalars().all())


def listing_to_response(listing: Listing, favorites: set[str]) -> ListingResponse:
    response = ListingResponse.model_validate(listing)
    response.price_display = format_price_display(listing.price_inr)
    response.is_favorite = listing.id in favorites
    return response


def can_view(listing: Listing, user: User | None) -> bool:
    if listing.status == "approved":
        return True
    if user is None:
        return False
    return user.is_admin or listing.owner_id == user.id


async def get_owned_listing(db: AsyncSession, listing_id: str, user: User) -> Listing:
    listing = await db.get(Listing, listing_id)
    if not listing or not can_view(listing, user):
        raise HTTPException(status_code=404, detail="Listing not found")
    if listing.owner_id != user.id and not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Not the listing owner"
        )
    return listing


@router.get("/mine", response_model=list[ListingResponse])
async def get_my_listings(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    result = await db.execute(
        select(Listing)
        .where(Listing.owner_id == user.id)
        .order_by(Listing.created_at.desc())
    )
    favorites = await favorite_ids(db, user)
    return [listing_to_response(l, favorites) for l in result.scalars().all()]


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(
    listing_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User | None, Depends(get_optional_user)],
):
    listing = await db.get(Listing, listing_id)
    if not listing or not can_view(listing, user):
        raise HTTPException(status_code=404, detail="Listing not found")

    return listing_to_response(listing, await favorite_ids(db, user))


@router.post("", response_model=ListingResponse, status_code=201)
async def create_listing(
    req: ListingCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    listing = Listing(owner_id=user.id, status="pending", **req.model_dump())
    db.add(listing)
    await db.commit()
    await db.refresh(listing)

    logger.info(f"User {user.id} created listing {listing.id}")
    return listing_to_response(listing, set())


@router.patch("/{listing_id}", response_model=ListingResponse)
async def update_listing(
    listing_id: str,
    req: ListingUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    listing = await get_owned_listing(db, listing_id, user)
    if listing.status not in EDITABLE_STATUSES:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot edit a listing that is {listing.status}",
        )

    for field, value in req.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(listing, field, value)

    # An edited rejection goes back into the review queue
    if listing.status == "rejected":
        listing.status = "pending"
        listing.rejection_reason = None

    await db.commit()
    await db.refresh(listing)
    return listing_to_response(listing, await favorite_ids(db, user))


@router.delete("/{listing_id}", status_code=204)
async def delete_listing(
    listing_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    listing = await get_owned_listing(db, listing_id, user)
    await db.delete(listing)
    await db.commit()
    logger.info(f"User {user.id} deleted listing {listing_id}")
