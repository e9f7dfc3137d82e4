import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import get_db, Lead, Listing, User
from app.api.deps import require_admin
from app.api.listings import listing_to_response
from app.schemas.lead import LeadResponse
from app.schemas.listing import ListingResponse, RejectRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

# target status -> statuses it can be reached from
TRANSITIONS = {
    "approved": ("pending", "rejected"),
    "rejected": ("pending", "approved"),
}


async def transition_listing(
    db: AsyncSession, listing_id: str, target: str, reason: str | None = None
) -> Listing:
    listing = await db.get(Listing, listing_id)
    if not listing:
        raise HTTPException(status_code=404, detail="Listing not found")

    if listing.status not in TRANSITIONS[target]:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot move listing from {listing.status} to {target}",
        )

    listing.status = target
    listing.rejection_reason = reason
    await db.commit()
    await db.refresh(listing)

    logger.info(f"Listing {listing_id} is now {target}")
    return listing


@router.get("/listings", response_model=list[ListingResponse])
async def get_listings_for_review(
    db: Annotated[AsyncSession, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
    listing_status: str = Query("pending", alias="status", pattern="^(pending|approved|rejected)$"),
):
    result = await db.execute(
        select(Listing)
        .where(Listing.status == listing_status)
        .order_by(Listing.created_at.desc())
    )
    return [listing_to_response(l, set()) for l in result.scalars().all()]


@router.post("/listings/{listing_id}/approve", response_model=ListingResponse)
async def approve_listing(
    listing_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
):
    listing = await transition_listing(db, listing_id, "approved")
    return listing_to_response(listing, set())


@router.post("/listings/{listing_id}/reject", response_model=ListingResponse)
async def reject_listing(
    listing_id: str,
    req: RejectRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
):
    listing = await transition_listing(db, listing_id, "rejected", reason=req.reason)
    return listing_to_response(listing, set())


@router.get("/leads", response_model=list[LeadResponse])
async def get_leads(
    db: Annotated[AsyncSession, Depends(get_db)],
    admin: Annotated[User, Depends(require_admin)],
    limit: int = Query(100, ge=1, le=500),
):
    result = await db.execute(
        select(Lead).order_by(Lead.created_at.desc(), Lead.id.desc()).limit(limit)
    )
    return [LeadResponse.model_validate(l) for l in result.scalars().all()]
