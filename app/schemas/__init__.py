"""
Pydantic schemas for request/response models.
"""

from app.schemas.requests import CreateVideoRequest
from app.schemas.responses import (
    ErrorResponse,
    HealthResponse,
    ReadinessResponse,
    VideoResponse,
)

__all__ = [
    "CreateVideoRequest",
    "VideoResponse",
    "ErrorResponse",
    "HealthResponse",
    "ReadinessResponse",
]
