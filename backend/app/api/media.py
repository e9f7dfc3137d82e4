import logging
from pathlib import Path
from typing import Annotated
from uuid import uuid4

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel

from app.config import settings
from app.models import User
from app.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/media", tags=["media"])

IMAGE_TYPES = {"image/jpeg": "jpg", "image/jpg": "jpg", "image/png": "png", "image/webp": "webp"}
VIDEO_TYPES = {"video/mp4": "mp4", "video/webm": "webm", "video/ogg": "ogg"}

MAX_IMAGE_BYTES = 5 * 1024 * 1024
MAX_VIDEO_BYTES = 50 * 1024 * 1024


class MediaResponse(BaseModel):
    url: str
    filename: str
    content_type: str


@router.post("", response_model=MediaResponse, status_code=201)
async def upload_media(
    user: Annotated[User, Depends(get_current_user)],
    file: UploadFile = File(...),
):
    """Store one listing image or video and return its public URL."""
    content_type = (file.content_type or "").lower()
    if content_type in IMAGE_TYPES:
        ext, limit = IMAGE_TYPES[content_type], MAX_IMAGE_BYTES
    elif content_type in VIDEO_TYPES:
        ext, limit = VIDEO_TYPES[content_type], MAX_VIDEO_BYTES
    else:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported file type: {content_type or 'unknown'}",
        )

    content = await file.read()
    if len(content) > limit:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum: {limit // (1024 * 1024)}MB",
        )

    file_name = f"{uuid4()}.{ext}"
    target_dir = Path(settings.media_root)
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / file_name).write_bytes(content)

    logger.info(f"User {user.id} uploaded {file_name} ({len(content)} bytes)")
    return MediaResponse(
        url=f"{settings.media_base_url.rstrip('/')}/{file_name}",
        filename=file_name,
        content_type=content_type,
    )
