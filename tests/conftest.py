"""
Pytest configuration and fixtures.
"""

import io
import os
import sys

import pytest

# Add app directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.config import Settings, get_settings  # noqa: E402
from app.services.video_store import VideoStore  # noqa: E402

TEST_JWT_SECRET = "test-secret"


@pytest.fixture(autouse=True)
def test_env(monkeypatch, tmp_path):
    """Point settings at throwaway locations for every test."""
    monkeypatch.setenv("JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setenv("S3_BUCKET", "test-bucket")
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    monkeypatch.setenv("TEMP_DIRECTORY", str(tmp_path / "uploads"))
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'tubely.db'}")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
def temp_dir(settings):
    os.makedirs(settings.temp_directory, exist_ok=True)
    return settings.temp_directory


@pytest.fixture
def video_store(settings):
    store = VideoStore(settings.database_url)
    store.create_tables()
    yield store
    store.engine.dispose()


@pytest.fixture
def owned_video(video_store):
    """A draft video owned by user-1."""
    return video_store.create_video("user-1", "My clip", "desc")


@pytest.fixture
def mock_s3_client(mocker):
    """Mock S3 client for testing."""
    mock = mocker.MagicMock()
    mock.upload_file.side_effect = lambda local_path, key, content_type: key
    mock.upload_fileobj.side_effect = lambda fileobj, key, content_type: key
    mock.get_presigned_url.side_effect = (
        lambda key, expires_in=3600, client_method="get_object":
        f"https://test-bucket.s3.amazonaws.com/{key}?X-Amz-Expires={expires_in}"
    )
    return mock


@pytest.fixture
def upload_stream():
    """500 KB of fake mp4 bytes."""
    return io.BytesIO(b"\x00" * 500 * 1024)
