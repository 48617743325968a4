"""
Presigned views of stored video records.

Records persist bare store keys. Before a record is returned to a client its
keys are swapped for short-lived presigned URLs on a copy; the signed copy
must never be written back to the store.
"""

import logging
from typing import Optional

from app.errors import StoreError
from app.services.s3_client import S3Client
from app.services.video_store import VideoRecord

logger = logging.getLogger(__name__)


def is_store_key(reference: Optional[str]) -> bool:
    """True when ``reference`` is a bare object key rather than a URL."""
    if not reference:
        return False
    return "://" not in reference and "?" not in reference


def generate_presigned_url(s3_client: S3Client, key: str, expires_in: int) -> str:
    """
    Sign a store key for retrieval.

    Raises:
        StoreError: If ``key`` is already a URL or signing fails
    """
    if not is_store_key(key):
        raise StoreError(f"Refusing to sign a reference that is not a store key: {key[:80]}")
    return s3_client.get_presigned_url(key, expires_in=expires_in)


def db_video_to_signed_video(s3_client: S3Client, video: VideoRecord, expires_in: int) -> VideoRecord:
    """Return a copy of ``video`` with its store keys replaced by presigned URLs."""
    signed = video.copy()

    if video.video_url:
        signed.video_url = generate_presigned_url(s3_client, video.video_url, expires_in)
    if video.thumbnail_url:
        signed.thumbnail_url = generate_presigned_url(s3_client, video.thumbnail_url, expires_in)

    logger.debug(f"Signed references for video {video.id}")
    return signed
