"""
FastAPI application entry point for Tubely.

Tubely lets video owners attach a video file and a thumbnail to a video
record and serves them back through short-lived presigned S3 URLs.
"""

import logging
import shutil
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.errors import TubelyError
from app.routers import health, thumbnails, videos
from app.services.assets import ensure_directory
from app.services.s3_client import S3Client
from app.services.thumbnail_service import ThumbnailService
from app.services.video_ingestion import VideoIngestionService
from app.services.video_store import VideoStore

# Configure logging
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for startup and shutdown events.
    Wires the store, S3 client and upload services on startup.
    """
    settings = get_settings()
    logger.info("Starting Tubely...")

    # Create temp directory
    ensure_directory(settings.temp_directory)
    logger.info(f"Temp directory: {settings.temp_directory}")

    video_store = VideoStore(settings.database_url)
    video_store.create_tables()
    s3_client = S3Client()

    # Store in app state for dependency injection
    app.state.video_store = video_store
    app.state.s3_client = s3_client
    app.state.ingestion_service = VideoIngestionService(video_store, s3_client, settings)
    app.state.thumbnail_service = ThumbnailService(video_store, s3_client, settings)

    # Verify external tools
    _verify_external_tools()

    logger.info("Tubely ready to accept uploads.")

    yield

    logger.info("Shutting down Tubely...")
    video_store.engine.dispose()
    app.state.video_store = None
    app.state.s3_client = None
    app.state.ingestion_service = None
    app.state.thumbnail_service = None
    logger.info("Shutdown complete")


def _verify_external_tools():
    """Verify that required external tools are available."""
    settings = get_settings()
    tools = {
        settings.ffmpeg_path: "FFmpeg for fast-start remuxing",
        settings.ffprobe_path: "FFprobe for video analysis",
    }

    for tool, description in tools.items():
        if shutil.which(tool):
            logger.info(f"✓ {description} available")
        else:
            logger.warning(f"✗ {description} NOT FOUND - video uploads will fail")


async def tubely_error_handler(request: Request, exc: TubelyError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Malformed request", "details": [str(e.get("msg")) for e in exc.errors()]},
    )


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    application = FastAPI(
        title="Tubely",
        description="""
Tubely - video hosting API for content owners.

## Features

### Videos (`/api/videos`)
- Create, list, fetch and delete video records
- Upload a video: fast-start remux, orientation classification, S3 storage

### Thumbnails (`/api/thumbnail_upload`, `/api/thumbnails`)
- JPEG/PNG thumbnails stored in S3

Media URLs in responses are presigned and expire after one hour.
        """,
        version="1.0.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.add_exception_handler(TubelyError, tubely_error_handler)
    application.add_exception_handler(StarletteHTTPException, http_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_handler)

    # Include routers
    application.include_router(health.router, tags=["Health"])
    application.include_router(videos.router, tags=["Videos"])
    application.include_router(thumbnails.router, tags=["Thumbnails"])

    @application.get("/")
    async def root():
        """Root endpoint with basic info."""
        return {
            "service": get_settings().app_name,
            "version": "1.0.0",
            "status": "running",
            "docs": "/docs",
        }

    return application


app = create_app()
