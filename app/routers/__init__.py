"""
FastAPI routers for the media service.
"""

from app.routers import health, thumbnails, videos

__all__ = ["health", "videos", "thumbnails"]
