import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import get_db, Listing, ServiceProvider, User
from app.api.deps import get_optional_user
from app.schemas.lead import LeadCreate, LeadResponse
from app.services.catalog import DEMO_LISTINGS_BY_ID, DEMO_SERVICES_BY_ID
from app.services.leads import create_lead
from app.services.notifier import notify_owner_of_lead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leads", tags=["leads"])


@router.post("", response_model=LeadResponse, status_code=201)
async def submit_lead(
    req: LeadCreate,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User | None, Depends(get_optional_user)],
):
    """Record an inquiry and let the listing owner know about it.

    Inquiries about demo catalog cards are kept with a catalog reference
    instead of a foreign key; nobody is emailed for them.
    """
    listing = None
    listing_id, catalog_listing_id = req.listing_id, None
    if req.listing_id:
        listing = await db.get(Listing, req.listing_id)
        if not listing:
            if req.listing_id not in DEMO_LISTINGS_BY_ID:
                raise HTTPException(status_code=404, detail="Listing not found")
            listing_id, catalog_listing_id = None, req.listing_id

    service_id, catalog_service_id = req.service_id, None
    if req.service_id:
        provider = await db.get(ServiceProvider, req.service_id)
        if not provider:
            if req.service_id not in DEMO_SERVICES_BY_ID:
                raise HTTPException(status_code=404, detail="Service provider not found")
            service_id, catalog_service_id = None, req.service_id

    owner = await listing.awaitable_attrs.owner if listing else None

    lead = await create_lead(
        db,
        name=req.name,
        phone=req.phone,
        email=req.email,
        message=req.message,
        listing_id=listing_id,
        service_id=service_id,
        user=user,
        catalog_listing_id=catalog_listing_id,
        catalog_service_id=catalog_service_id,
    )
    logger.info(
        f"Lead {lead.id} recorded for listing={req.listing_id} service={req.service_id}"
    )

    if owner and owner.email:
        background_tasks.add_task(
            notify_owner_of_lead,
            owner_email=owner.email,
            owner_name=owner.name,
            property_title=listing.title,
            listing_id=listing.id,
            lead={
                "name": lead.name,
                "email": lead.email,
                "phone": lead.phone,
                "message": lead.message,
            },
        )

    return LeadResponse.model_validate(lead)
