"""
Thumbnail Service - stores thumbnail images in S3 and links them to videos.
"""

import logging
from typing import BinaryIO, Optional

from app.config import Settings, get_settings
from app.errors import ForbiddenError, NotFoundError, StoreError
from app.services.assets import random_asset_name, validate_upload
from app.services.s3_client import S3Client
from app.services.video_store import VideoRecord, VideoStore
from app.services.video_url import generate_presigned_url

logger = logging.getLogger(__name__)

THUMBNAIL_PREFIX = "thumbnails"


class ThumbnailService:
    """Upload thumbnails and resolve them to presigned URLs."""

    def __init__(
        self,
        store: VideoStore,
        s3_client: S3Client,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.s3_client = s3_client
        self.settings = settings or get_settings()

    def upload_thumbnail(
        self,
        user_id: str,
        video_id: str,
        image_stream: BinaryIO,
        content_type: str,
        declared_size: int,
    ) -> VideoRecord:
        """
        Store a JPEG/PNG thumbnail and point the video record at it.

        Raises:
            ValidationError: Bad content type or oversized image
            NotFoundError: Unknown video id
            ForbiddenError: Caller does not own the video
            StoreError: Upload to S3 failed
        """
        validate_upload(
            content_type,
            declared_size,
            self.settings.allowed_thumbnail_types,
            self.settings.max_thumbnail_upload_bytes,
        )

        record = self.store.get_video(video_id)
        if record is None:
            raise NotFoundError(f"Couldn't find video {video_id}")
        if record.user_id != user_id:
            raise ForbiddenError(f"User {user_id} does not own video {video_id}")

        logger.info(f"Uploading thumbnail for video {video_id} by user {user_id}")

        key = f"{THUMBNAIL_PREFIX}/{random_asset_name(content_type)}"
        self.s3_client.upload_fileobj(image_stream, key, content_type)

        try:
            previous_key, updated = self.store.set_thumbnail_url(video_id, key)
            if updated is None:
                raise NotFoundError(f"Video {video_id} was deleted during thumbnail upload")
        except Exception:
            self._delete_quietly(key)
            raise

        if previous_key and previous_key != key:
            self._delete_quietly(previous_key)

        return updated

    def get_thumbnail_url(self, video_id: str) -> str:
        """
        Presigned URL for a video's thumbnail.

        Raises:
            NotFoundError: If the video or its thumbnail is missing
        """
        record = self.store.get_video(video_id)
        if record is None:
            raise NotFoundError("Couldn't find video")
        if not record.thumbnail_url:
            raise NotFoundError("Thumbnail not found")

        return generate_presigned_url(
            self.s3_client, record.thumbnail_url, self.settings.presigned_url_ttl_seconds
        )

    def _delete_quietly(self, key: str) -> None:
        try:
            self.s3_client.delete_object(key)
        except StoreError as e:
            logger.warning(f"Failed to delete thumbnail object {key}: {e}")
