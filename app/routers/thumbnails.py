"""
Thumbnail API endpoints.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import RedirectResponse

from app.auth import get_current_user_id
from app.config import get_settings
from app.dependencies import get_s3_client, get_thumbnail_service
from app.errors import ValidationError
from app.schemas.responses import UPLOAD_ERROR_RESPONSES, VideoResponse
from app.services.s3_client import S3Client
from app.services.thumbnail_service import ThumbnailService
from app.services.video_url import db_video_to_signed_video

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/thumbnails/{video_id}")
async def get_thumbnail(
    video_id: str,
    thumbnails: ThumbnailService = Depends(get_thumbnail_service),
) -> RedirectResponse:
    """Redirect to a presigned URL for the video's thumbnail."""
    url = thumbnails.get_thumbnail_url(video_id)
    return RedirectResponse(
        url,
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        headers={"Cache-Control": "no-store"},
    )


@router.post(
    "/thumbnail_upload/{video_id}",
    response_model=VideoResponse,
    responses=UPLOAD_ERROR_RESPONSES,
)
async def upload_thumbnail(
    video_id: str,
    thumbnail: Optional[UploadFile] = File(None),
    user_id: str = Depends(get_current_user_id),
    thumbnails: ThumbnailService = Depends(get_thumbnail_service),
    s3_client: S3Client = Depends(get_s3_client),
) -> VideoResponse:
    """Upload a JPEG or PNG thumbnail (max 10 MB) for one of the caller's videos."""
    if thumbnail is None:
        raise ValidationError("Thumbnail file missing")

    content_type = thumbnail.content_type or ""
    declared_size = thumbnail.size or 0

    loop = asyncio.get_event_loop()
    record = await loop.run_in_executor(
        None,
        lambda: thumbnails.upload_thumbnail(
            user_id, video_id, thumbnail.file, content_type, declared_size
        ),
    )

    settings = get_settings()
    signed = db_video_to_signed_video(s3_client, record, settings.presigned_url_ttl_seconds)
    return VideoResponse.from_record(signed)
