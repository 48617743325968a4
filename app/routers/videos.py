"""
Video API endpoints: record CRUD and video upload.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status

from app.auth import get_current_user_id
from app.config import get_settings
from app.dependencies import (
    get_ingestion_service,
    get_s3_client,
    get_video_store,
)
from app.errors import ForbiddenError, NotFoundError, StoreError, ValidationError
from app.schemas.requests import CreateVideoRequest
from app.schemas.responses import UPLOAD_ERROR_RESPONSES, VideoResponse
from app.services.s3_client import S3Client
from app.services.video_ingestion import VideoIngestionService
from app.services.video_store import VideoRecord, VideoStore
from app.services.video_url import db_video_to_signed_video

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _signed_response(s3_client: S3Client, record: VideoRecord) -> VideoResponse:
    settings = get_settings()
    signed = db_video_to_signed_video(s3_client, record, settings.presigned_url_ttl_seconds)
    return VideoResponse.from_record(signed)


def _get_owned_video(store: VideoStore, video_id: str, user_id: str) -> VideoRecord:
    record = store.get_video(video_id)
    if record is None:
        raise NotFoundError("Couldn't find video")
    if record.user_id != user_id:
        raise ForbiddenError(f"User {user_id} does not own video {video_id}")
    return record


@router.post("/videos", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
async def create_video(
    body: CreateVideoRequest,
    user_id: str = Depends(get_current_user_id),
    store: VideoStore = Depends(get_video_store),
) -> VideoResponse:
    """Create a draft video record owned by the caller."""
    record = store.create_video(user_id, body.title, body.description)
    return VideoResponse.from_record(record)


@router.get("/videos", response_model=list[VideoResponse])
async def list_videos(
    user_id: str = Depends(get_current_user_id),
    store: VideoStore = Depends(get_video_store),
    s3_client: S3Client = Depends(get_s3_client),
) -> list[VideoResponse]:
    """List the caller's videos with presigned media URLs."""
    return [_signed_response(s3_client, record) for record in store.get_videos_for_user(user_id)]


@router.get("/videos/{video_id}", response_model=VideoResponse)
async def get_video(
    video_id: str,
    user_id: str = Depends(get_current_user_id),
    store: VideoStore = Depends(get_video_store),
    s3_client: S3Client = Depends(get_s3_client),
) -> VideoResponse:
    """Get one of the caller's videos with presigned media URLs."""
    record = _get_owned_video(store, video_id, user_id)
    return _signed_response(s3_client, record)


@router.delete("/videos/{video_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_video(
    video_id: str,
    user_id: str = Depends(get_current_user_id),
    store: VideoStore = Depends(get_video_store),
    s3_client: S3Client = Depends(get_s3_client),
) -> None:
    """Delete one of the caller's video records and its stored objects."""
    record = _get_owned_video(store, video_id, user_id)
    store.delete_video(video_id)

    for key in (record.video_url, record.thumbnail_url):
        if not key:
            continue
        try:
            s3_client.delete_object(key)
        except StoreError as e:
            logger.warning(f"Failed to delete object {key} for video {video_id}: {e}")


@router.post(
    "/video_upload/{video_id}",
    response_model=VideoResponse,
    responses=UPLOAD_ERROR_RESPONSES,
)
async def upload_video(
    video_id: str,
    video: Optional[UploadFile] = File(None),
    user_id: str = Depends(get_current_user_id),
    ingestion: VideoIngestionService = Depends(get_ingestion_service),
    s3_client: S3Client = Depends(get_s3_client),
) -> VideoResponse:
    """
    Upload the video file for a record.

    The file is remuxed for fast start, classified by orientation and stored
    under ``{orientation}/{video_id}.mp4``. Processing runs in a worker
    thread; the response carries a presigned URL for the stored video.
    """
    if video is None:
        raise ValidationError("Video file missing")

    content_type = video.content_type or ""
    declared_size = video.size or 0

    # ffmpeg/ffprobe and boto3 block, so run off the event loop
    loop = asyncio.get_event_loop()
    record = await loop.run_in_executor(
        None,
        lambda: ingestion.ingest(user_id, video_id, video.file, content_type, declared_size),
    )
    return _signed_response(s3_client, record)
