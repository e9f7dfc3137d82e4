import logging
from typing import Annotated

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import get_db, Draft, Listing, User
from app.api.deps import get_current_user
from app.api.listings import listing_to_response
from app.schemas.draft import DraftCreate, DraftResponse, DraftUpdate
from app.schemas.listing import ListingResponse
from app.services.drafts import (
    TOTAL_STEPS,
    default_listing_type,
    default_property_type,
    draft_to_listing_fields,
    map_step_data,
    merge_draft_data,
    progress_percent,
    validate_submission,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/drafts", tags=["drafts"])


def draft_to_response(draft: Draft) -> DraftResponse:
    response = DraftResponse.model_validate(draft)
    response.progress = progress_percent(draft.current_step)
    return response


async def get_user_draft(db: AsyncSession, draft_id: str, user: User) -> Draft:
    draft = await db.get(Draft, draft_id)
    if not draft or draft.user_id != user.id:
        raise HTTPException(status_code=404, detail="Draft not found")
    return draft


def apply_update(draft: Draft, data: dict, current_step: int | None) -> bool:
    """Merge ``data`` into the draft. Returns whether anything changed."""
    merged = merge_draft_data(draft.data, data)
    changed = merged != (draft.data or {})
    if changed:
        # Reassign so the JSON column is flagged dirty
        draft.data = merged
    if current_step is not None and current_step != draft.current_step:
        draft.current_step = current_step
        changed = True
    return changed


@router.get("/latest", response_model=DraftResponse)
async def get_latest_draft(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    """The user's most recently updated draft."""
    result = await db.execute(
        select(Draft)
        .where(Draft.user_id == user.id)
        .order_by(Draft.updated_at.desc())
        .limit(1)
    )
    draft = result.scalar_one_or_none()
    if not draft:
        raise HTTPException(status_code=404, detail="Draft not found")
    return draft_to_response(draft)


@router.get("", response_model=list[DraftResponse])
async def get_drafts(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    result = await db.execute(
        select(Draft).where(Draft.user_id == user.id).order_by(Draft.updated_at.desc())
    )
    return [draft_to_response(d) for d in result.scalars().all()]


@router.post("", response_model=DraftResponse, status_code=201)
async def create_draft(
    req: DraftCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    draft = Draft(
        user_id=user.id,
        form_type=req.form_type,
        property_type=req.property_type or default_property_type(req.form_type),
        listing_type=req.listing_type or default_listing_type(req.form_type),
        current_step=req.current_step,
        data=merge_draft_data({}, req.data),
    )
    db.add(draft)
    await db.commit()
    await db.refresh(draft)

    logger.info(f"Created {draft.form_type} draft {draft.id} for user {user.id}")
    return draft_to_response(draft)


@router.patch("/{draft_id}", response_model=DraftResponse)
async def update_draft(
    draft_id: str,
    req: DraftUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    """Merge a partial update. Sending the same update twice is a no-op."""
    draft = await get_user_draft(db, draft_id, user)

    if apply_update(draft, req.data, req.current_step):
        await db.commit()
        await db.refresh(draft)

    return draft_to_response(draft)


@router.put("/{draft_id}/steps/{step}", response_model=DraftResponse)
async def save_draft_step(
    draft_id: str,
    step: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
    step_data: Annotated[dict, Body()],
):
    """Store a raw wizard form payload for one step."""
    if not 1 <= step <= TOTAL_STEPS:
        raise HTTPException(status_code=404, detail="Step not found")

    draft = await get_user_draft(db, draft_id, user)
    mapped = map_step_data(step, step_data, draft.form_type)

    if apply_update(draft, mapped, step):
        await db.commit()
        await db.refresh(draft)

    return draft_to_response(draft)


@router.delete("/{draft_id}", status_code=204)
async def delete_draft(
    draft_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    draft = await get_user_draft(db, draft_id, user)
    await db.delete(draft)
    await db.commit()


@router.post("/{draft_id}/submit", response_model=ListingResponse, status_code=201)
async def submit_draft(
    draft_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    """Turn a complete draft into a listing awaiting review."""
    draft = await get_user_draft(db, draft_id, user)

    errors = validate_submission(draft.data or {}, draft.form_type)
    if errors:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": errors},
        )

    fields = draft_to_listing_fields(draft.form_type, draft.property_type, draft.data)
    listing = Listing(owner_id=user.id, **fields)
    db.add(listing)
    await db.delete(draft)
    await db.commit()
    await db.refresh(listing)

    logger.info(f"Draft {draft_id} submitted as listing {listing.id}")
    return listing_to_response(listing, set())
