"""
Video Ingestion Service - validates, normalizes, classifies and stores uploads.

Pipeline for one upload:
1. Validate content type and declared size, check ownership
2. Write the upload to {temp_directory}/{video_id}{ext}
3. Remux to fast-start layout ({temp}.processed)
4. Probe the remuxed file for width/height
5. Classify orientation and build the key {orientation}/{video_id}{ext}
6. Upload the remuxed file to S3
7. Persist the key as the record's video reference

Both temp files are removed on every exit path.
"""

import logging
import os
import threading
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional

from app.config import Settings, get_settings
from app.errors import ForbiddenError, NotFoundError, StoreError
from app.services.assets import (
    ensure_directory,
    file_type_to_ext,
    remove_file,
    validate_upload,
    write_stream,
)
from app.services.media_tools import (
    PROCESSED_SUFFIX,
    probe_video_dimensions,
    process_video_for_fast_start,
)
from app.services.orientation import OrientationTag, classify_orientation
from app.services.s3_client import S3Client
from app.services.video_store import VideoRecord, VideoStore

logger = logging.getLogger(__name__)


def build_storage_key(orientation: OrientationTag, video_id: str, extension: str) -> str:
    return f"{orientation.value}/{video_id}{extension}"


class VideoIngestionService:
    """
    Orchestrates a single video upload end to end.

    Steps run sequentially in the calling thread. Ingestions of the same
    video id are serialised by a per-record lock; different records proceed
    concurrently on disjoint temp paths.
    """

    def __init__(
        self,
        store: VideoStore,
        s3_client: S3Client,
        settings: Optional[Settings] = None,
        temp_directory: Optional[str] = None,
    ):
        self.store = store
        self.s3_client = s3_client
        self.settings = settings or get_settings()
        self.temp_directory = temp_directory or self.settings.temp_directory

        self._locks: dict[str, list] = {}
        self._locks_guard = threading.Lock()

    def temp_paths(self, video_id: str, content_type: str) -> tuple[str, str]:
        """Return the (upload, processed) temp paths for a video id."""
        upload_path = os.path.join(
            self.temp_directory, f"{video_id}{file_type_to_ext(content_type)}"
        )
        return upload_path, f"{upload_path}{PROCESSED_SUFFIX}"

    @contextmanager
    def _record_lock(self, video_id: str) -> Iterator[None]:
        with self._locks_guard:
            entry = self._locks.setdefault(video_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    self._locks.pop(video_id, None)

    def ingest(
        self,
        user_id: str,
        video_id: str,
        upload_stream: BinaryIO,
        content_type: str,
        declared_size: int,
    ) -> VideoRecord:
        """
        Ingest an uploaded video for ``video_id`` on behalf of ``user_id``.

        Args:
            user_id: Identity resolved from the caller's token
            video_id: Record the video belongs to
            upload_stream: Binary stream of the uploaded file
            content_type: Declared media type of the upload
            declared_size: Declared size of the upload in bytes

        Returns:
            The updated record (``video_url`` holds the store key)

        Raises:
            ValidationError: Bad content type or oversized upload
            NotFoundError: Unknown video id
            ForbiddenError: Caller does not own the video
            ToolExecutionError: ffmpeg/ffprobe failed
            NoStreamError: The upload has no video stream
            StoreError: Upload to S3 failed
        """
        validate_upload(
            content_type,
            declared_size,
            self.settings.allowed_video_types,
            self.settings.max_video_upload_bytes,
        )

        with self._record_lock(video_id):
            record = self.store.get_video(video_id)
            if record is None:
                raise NotFoundError(f"Couldn't find video {video_id}")
            if record.user_id != user_id:
                raise ForbiddenError(f"User {user_id} does not own video {video_id}")

            logger.info(f"[{video_id}] Uploading video by user {user_id}")

            ensure_directory(self.temp_directory)
            upload_path, processed_path = self.temp_paths(video_id, content_type)
            try:
                return self._process(record, upload_stream, content_type, upload_path)
            finally:
                remove_file(upload_path)
                remove_file(processed_path)
                logger.debug(f"[{video_id}] Temp files removed")

    def _process(
        self,
        record: VideoRecord,
        upload_stream: BinaryIO,
        content_type: str,
        upload_path: str,
    ) -> VideoRecord:
        video_id = record.id

        written = write_stream(upload_stream, upload_path, self.settings.max_video_upload_bytes)
        logger.info(f"[{video_id}] Wrote {written / 1024 / 1024:.2f} MB to {upload_path}")

        processed_path = process_video_for_fast_start(upload_path, self.settings.ffmpeg_path)

        dimensions = probe_video_dimensions(processed_path, self.settings.ffprobe_path)
        orientation = classify_orientation(dimensions.width, dimensions.height)
        logger.info(
            f"[{video_id}] {dimensions.width}x{dimensions.height} classified as {orientation.value}"
        )

        key = build_storage_key(orientation, video_id, file_type_to_ext(content_type))
        self.s3_client.upload_file(processed_path, key, content_type)

        try:
            _, updated = self.store.set_video_url(video_id, key)
            if updated is None:
                raise NotFoundError(f"Video {video_id} was deleted during ingestion")
        except Exception:
            # The previous reference may already point at this key.
            if record.video_url != key:
                logger.error(f"[{video_id}] Metadata write failed, removing uploaded object {key}")
                self._delete_orphan(key)
            raise

        logger.info(f"[{video_id}] Video stored at {key}")
        return updated

    def _delete_orphan(self, key: str) -> None:
        try:
            self.s3_client.delete_object(key)
        except StoreError as e:
            logger.warning(f"Compensating delete of {key} failed: {e}")
