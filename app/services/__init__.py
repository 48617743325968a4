"""
Services for the media service.

Includes:
- Media tools (ffprobe dimensions, ffmpeg fast-start remux)
- Orientation classification
- S3 storage and presigned URLs
- Video metadata store
- Video ingestion and thumbnail upload
"""

from app.services.media_tools import (
    VideoDimensions,
    probe_video_dimensions,
    process_video_for_fast_start,
)
from app.services.orientation import OrientationTag, classify_orientation
from app.services.s3_client import S3Client
from app.services.thumbnail_service import ThumbnailService
from app.services.video_ingestion import VideoIngestionService
from app.services.video_store import VideoRecord, VideoStore

__all__ = [
    # Media tools
    "VideoDimensions",
    "probe_video_dimensions",
    "process_video_for_fast_start",
    "OrientationTag",
    "classify_orientation",
    # Storage
    "S3Client",
    "VideoRecord",
    "VideoStore",
    # Pipelines
    "VideoIngestionService",
    "ThumbnailService",
]
