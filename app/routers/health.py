"""
Health check endpoints for the media service.
"""

import shutil

from fastapi import APIRouter, Request

from app.config import get_settings
from app.schemas.responses import HealthResponse, ReadinessResponse

router = APIRouter()

SERVICE_VERSION = "1.0.0"


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Basic health check endpoint.

    Returns 200 if the service is running.
    """
    return HealthResponse(
        status="healthy",
        version=SERVICE_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request):
    """
    Readiness check endpoint.

    Checks that the metadata database answers and that the media tools
    used by the ingestion pipeline are on PATH.
    """
    settings = get_settings()
    video_store = getattr(request.app.state, "video_store", None)

    db_ready = video_store is not None and video_store.ping()
    ffmpeg_ready = shutil.which(settings.ffmpeg_path) is not None
    ffprobe_ready = shutil.which(settings.ffprobe_path) is not None

    return ReadinessResponse(
        ready=db_ready and ffmpeg_ready and ffprobe_ready,
        database="ready" if db_ready else "unavailable",
        ffmpeg="available" if ffmpeg_ready else "not_found",
        ffprobe="available" if ffprobe_ready else "not_found",
    )
