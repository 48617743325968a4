"""
FastAPI dependencies resolving shared services from application state.
"""

from fastapi import HTTPException, Request

from app.services.s3_client import S3Client
from app.services.thumbnail_service import ThumbnailService
from app.services.video_ingestion import VideoIngestionService
from app.services.video_store import VideoStore


def _state(request: Request, name: str):
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(
            status_code=503,
            detail=f"{name} not initialized. Service not ready.",
        )
    return service


def get_video_store(request: Request) -> VideoStore:
    return _state(request, "video_store")


def get_s3_client(request: Request) -> S3Client:
    return _state(request, "s3_client")


def get_ingestion_service(request: Request) -> VideoIngestionService:
    return _state(request, "ingestion_service")


def get_thumbnail_service(request: Request) -> ThumbnailService:
    return _state(request, "thumbnail_service")
