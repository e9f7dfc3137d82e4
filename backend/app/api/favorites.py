import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import get_db, FavoriteMark, Listing, User
from app.api.deps import get_current_user
from app.schemas.favorite import FavoriteList, FavoriteState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.get("", response_model=FavoriteList)
async def get_favorites(
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    result = await db.execute(
        select(FavoriteMark.listing_id)
        .where(FavoriteMark.user_id == user.id)
        .order_by(FavoriteMark.created_at.desc())
    )
    return FavoriteList(listing_ids=list(result.scalars().all()))


@router.post("/{listing_id}/toggle", response_model=FavoriteState)
async def toggle_favorite(
    listing_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    user: Annotated[User, Depends(get_current_user)],
):
    """Flip the favorite mark and return the resulting state."""
    listing = await db.get(Listing, listing_id)
    if not listing:
        raise HTTPException(status_code=404, detail="Listing not found")

    mark = await db.get(FavoriteMark, (user.id, listing_id))
    if mark:
        await db.delete(mark)
        is_favorite = False
    else:
        db.add(FavoriteMark(user_id=user.id, listing_id=listing_id))
        is_favorite = True

    await db.commit()
    logger.debug(f"User {user.id} favorite {listing_id} -> {is_favorite}")
    return FavoriteState(listing_id=listing_id, is_favorite=is_favorite)
