"""
Configuration module using Pydantic Settings for environment variable management.

Only essential environment variables are exposed. Upload limits and media
policy are hardcoded for consistency and simplicity.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings.

    Only deployment-specific configuration is loaded from environment variables.
    Upload ceilings and accepted media types are hardcoded.
    """

    # ============================================================
    # ENVIRONMENT VARIABLES (minimal set)
    # ============================================================

    # Application
    app_name: str = "tubely"
    debug: bool = False
    log_level: str = "INFO"

    # Security - JWT authentication
    jwt_secret: str = "change-me"

    # AWS S3
    aws_region: str = "us-east-1"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    s3_bucket: str = "tubely-media"
    s3_endpoint_url: Optional[str] = None  # MinIO / LocalStack

    # Metadata database
    database_url: str = "sqlite:///./tubely.db"

    # Local scratch space for uploads being processed
    temp_directory: str = "/tmp/tubely"

    # Signed URL lifetime
    presigned_url_ttl_seconds: int = 3600

    # External tools
    ffmpeg_path: str = "ffmpeg"
    ffprobe_path: str = "ffprobe"

    # ============================================================
    # HARDCODED SETTINGS (not configurable via env vars)
    # ============================================================

    @property
    def max_video_upload_bytes(self) -> int:
        return 1 << 30  # 1 GiB

    @property
    def max_thumbnail_upload_bytes(self) -> int:
        return 10 << 20  # 10 MiB

    @property
    def allowed_video_types(self) -> tuple[str, ...]:
        return ("video/mp4",)

    @property
    def allowed_thumbnail_types(self) -> tuple[str, ...]:
        return ("image/jpeg", "image/png")

    @property
    def jwt_algorithm(self) -> str:
        return "HS256"

    @property
    def jwt_issuer(self) -> str:
        return "tubely-access"

    @property
    def jwt_expiry_seconds(self) -> int:
        return 3600

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
