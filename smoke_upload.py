#!/usr/bin/env python3
"""
Smoke script for the Tubely video API.

Creates a video record, uploads a thumbnail and a video file to it, and
prints the resulting presigned URLs. Optionally downloads the stored video
through its presigned URL so it can be compared with a local remux.

Usage:
    python smoke_upload.py --video sample.mp4
    python smoke_upload.py --video sample.mp4 --thumbnail thumb.png
    python smoke_upload.py --video sample.mp4 --download stored.mp4
    python smoke_upload.py --video-id <existing-id> --video sample.mp4

Requires JWT_SECRET in .env (or the environment) matching the server.
"""

import argparse
import json
import mimetypes
import os
from pathlib import Path

import requests
from dotenv import load_dotenv

from app.auth import make_jwt

# Load .env file
load_dotenv()

# Configuration
BASE_URL = os.getenv("TUBELY_BASE_URL", "http://localhost:8000")
JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
USER_ID = os.getenv("TUBELY_USER_ID", "smoke-test-user")


def auth_headers() -> dict:
    return {"Authorization": f"Bearer {make_jwt(USER_ID, JWT_SECRET)}"}


def create_video(title: str) -> dict:
    """Create a draft video record."""
    response = requests.post(
        f"{BASE_URL}/api/videos",
        json={"title": title, "description": "Uploaded by smoke_upload.py"},
        headers=auth_headers(),
        timeout=30,
    )
    response.raise_for_status()
    video = response.json()
    print(f"Created video {video['id']}")
    return video


def upload_file(endpoint: str, field: str, path: Path, content_type: str) -> dict:
    with path.open("rb") as f:
        response = requests.post(
            f"{BASE_URL}{endpoint}",
            files={field: (path.name, f, content_type)},
            headers=auth_headers(),
            timeout=600,
        )
    if response.status_code != 200:
        print(f"Upload failed ({response.status_code}): {response.text}")
        response.raise_for_status()
    return response.json()


def download(url: str, destination: Path) -> None:
    with requests.get(url, stream=True, timeout=600) as response:
        response.raise_for_status()
        with destination.open("wb") as f:
            for chunk in response.iter_content(chunk_size=1024 * 1024):
                f.write(chunk)
    print(f"Downloaded {destination.stat().st_size / 1024 / 1024:.2f} MB to {destination}")


def main():
    parser = argparse.ArgumentParser(
        description="Upload a video (and optional thumbnail) to a running Tubely server",
    )
    parser.add_argument("--video", type=Path, required=True, help="Local mp4 to upload")
    parser.add_argument("--thumbnail", type=Path, default=None, help="Local JPEG/PNG thumbnail")
    parser.add_argument("--video-id", type=str, default=None, help="Existing video id (skips create)")
    parser.add_argument("--title", type=str, default="Smoke test upload", help="Title for a new video")
    parser.add_argument("--download", type=Path, default=None, help="Save the stored video here")
    args = parser.parse_args()

    video_id = args.video_id or create_video(args.title)["id"]

    if args.thumbnail:
        thumb_type = mimetypes.guess_type(args.thumbnail.name)[0] or "image/jpeg"
        video = upload_file(f"/api/thumbnail_upload/{video_id}", "thumbnail", args.thumbnail, thumb_type)
        print(f"Thumbnail URL: {video['thumbnail_url']}")

    video = upload_file(f"/api/video_upload/{video_id}", "video", args.video, "video/mp4")
    print(json.dumps(video, indent=2))

    if args.download:
        download(video["video_url"], args.download)


if __name__ == "__main__":
    main()
