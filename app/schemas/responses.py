"""
Response schemas for the video API.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.services.video_store import VideoRecord


class VideoResponse(BaseModel):
    """
    A video record as returned to clients.

    ``video_url`` and ``thumbnail_url`` are presigned URLs valid for a
    limited time, or null when nothing has been uploaded yet.
    """

    id: str = Field(..., description="Video identifier")
    user_id: str = Field(..., description="Owner of the video")
    title: str = Field(..., description="Video title")
    description: str = Field(default="", description="Video description")
    thumbnail_url: Optional[str] = Field(default=None, description="Presigned thumbnail URL")
    video_url: Optional[str] = Field(default=None, description="Presigned video URL")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @classmethod
    def from_record(cls, record: VideoRecord) -> "VideoResponse":
        return cls(
            id=record.id,
            user_id=record.user_id,
            title=record.title,
            description=record.description,
            thumbnail_url=record.thumbnail_url,
            video_url=record.video_url,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "id": "0b6e2b1c-4f3a-4d8e-9a51-2f0c7e1d9a10",
                "user_id": "user-123",
                "title": "Boots on the ground",
                "description": "",
                "thumbnail_url": None,
                "video_url": "https://tubely-media.s3.amazonaws.com/landscape/0b6e2b1c-4f3a-4d8e-9a51-2f0c7e1d9a10.mp4?X-Amz-Expires=3600",
                "created_at": "2026-01-01T12:00:00Z",
                "updated_at": "2026-01-01T12:05:00Z",
            }
        }


class ErrorResponse(BaseModel):
    """Error body returned for every classified failure."""

    error: str = Field(..., description="Human-readable error message")


UPLOAD_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing file, bad content type or oversized upload"},
    401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"},
    403: {"model": ErrorResponse, "description": "Caller does not own the video"},
    404: {"model": ErrorResponse, "description": "Unknown video"},
    500: {"model": ErrorResponse, "description": "Media tool or storage failure"},
}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Service version")


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool = Field(..., description="Whether the service is ready to accept uploads")
    database: str = Field(..., description="Metadata database status")
    ffmpeg: str = Field(..., description="ffmpeg availability")
    ffprobe: str = Field(..., description="ffprobe availability")
