"""
FFmpeg/FFprobe wrappers used by the ingestion pipeline.

Each tool call is synchronous: the process is spawned, awaited to completion
and its outcome is classified into a typed result or error.
"""

import json
import logging
import subprocess
from dataclasses import dataclass
from typing import Optional

from app.config import get_settings
from app.errors import NoStreamError, ToolExecutionError

logger = logging.getLogger(__name__)

PROCESSED_SUFFIX = ".processed"


@dataclass
class VideoDimensions:
    """Geometry of the first video stream."""

    width: int
    height: int


def _decode(output: Optional[bytes]) -> str:
    # Output may carry non-UTF-8 bytes from container metadata and file names
    return (output or b"").decode("utf-8", errors="replace")


def _run_tool(cmd: list[str]) -> str:
    """Run an external tool and return its decoded stdout."""
    tool = cmd[0]
    try:
        result = subprocess.run(cmd, capture_output=True)
    except FileNotFoundError:
        raise ToolExecutionError(tool, f"{tool} not found in PATH")

    stderr = _decode(result.stderr)
    if stderr:
        logger.warning(f"{tool} stderr: {stderr.strip()}")

    if result.returncode != 0:
        raise ToolExecutionError(tool, stderr, returncode=result.returncode)

    return _decode(result.stdout)


def probe_video_dimensions(video_path: str, ffprobe_path: Optional[str] = None) -> VideoDimensions:
    """
    Get width/height of the first video stream using ffprobe.

    Args:
        video_path: Path to the video file
        ffprobe_path: ffprobe binary (defaults to settings)

    Returns:
        VideoDimensions of stream v:0

    Raises:
        ToolExecutionError: If ffprobe exits non-zero
        NoStreamError: If the output lists no video stream
    """
    ffprobe = ffprobe_path or get_settings().ffprobe_path
    cmd = [
        ffprobe,
        "-v", "error",
        "-select_streams", "v:0",
        "-show_entries", "stream=width,height",
        "-of", "json",
        video_path,
    ]
    stdout = _run_tool(cmd)

    try:
        output = json.loads(stdout or "{}")
    except json.JSONDecodeError:
        raise ToolExecutionError(ffprobe, f"unparseable output: {stdout[:200]}")

    streams = output.get("streams") or []
    if not streams:
        raise NoStreamError(f"No video streams found in {video_path}")

    stream = streams[0]
    width = stream.get("width")
    height = stream.get("height")
    if not width or not height:
        raise NoStreamError(f"Video stream in {video_path} has no dimensions")

    logger.info(f"Probed {video_path}: {width}x{height}")
    return VideoDimensions(width=int(width), height=int(height))


def process_video_for_fast_start(input_path: str, ffmpeg_path: Optional[str] = None) -> str:
    """
    Remux a video so the moov atom precedes the media data.

    Streams are copied, not re-encoded. The output is written next to the
    input with the ``.processed`` suffix. A partially written output is left
    in place on failure; the caller owns its removal.

    Returns:
        Path of the remuxed file

    Raises:
        ToolExecutionError: If ffmpeg exits non-zero
    """
    ffmpeg = ffmpeg_path or get_settings().ffmpeg_path
    output_path = f"{input_path}{PROCESSED_SUFFIX}"
    cmd = [
        ffmpeg,
        "-v", "error",
        "-y",
        "-i", input_path,
        "-movflags", "faststart",
        "-map_metadata", "0",
        "-codec", "copy",
        "-f", "mp4",
        output_path,
    ]
    _run_tool(cmd)

    logger.info(f"Fast-start remux written to {output_path}")
    return output_path
