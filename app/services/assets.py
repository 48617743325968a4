"""
Helpers shared by the video and thumbnail upload paths.
"""

import logging
import os
import secrets
from typing import BinaryIO

from app.errors import ValidationError

logger = logging.getLogger(__name__)

COPY_CHUNK_SIZE = 1024 * 1024


def ensure_directory(path: str) -> None:
    if not os.path.isdir(path):
        os.makedirs(path, exist_ok=True)
        logger.info(f"Created directory {path}")


def file_type_to_ext(file_type: str) -> str:
    """Map a ``type/subtype`` media type to ``.subtype``; anything else to ``.bin``."""
    parts = file_type.split("/")
    if len(parts) != 2:
        return ".bin"
    return "." + parts[1]


def random_asset_name(file_type: str) -> str:
    """URL-safe random filename carrying the extension for ``file_type``."""
    return f"{secrets.token_urlsafe(32)}{file_type_to_ext(file_type)}"


def validate_upload(
    content_type: str,
    size: int,
    allowed_types: tuple[str, ...],
    max_bytes: int,
) -> None:
    """
    Check a declared upload against the accepted types and size ceiling.

    Raises:
        ValidationError: On a disallowed content type or oversized payload
    """
    if content_type not in allowed_types:
        raise ValidationError(
            f"Unsupported content type {content_type!r}, expected one of {', '.join(allowed_types)}"
        )
    if size > max_bytes:
        raise ValidationError(f"File too large, max size is {max_bytes} bytes")


def write_stream(stream: BinaryIO, path: str, max_bytes: int) -> int:
    """
    Copy ``stream`` to ``path`` in chunks, enforcing ``max_bytes`` on the
    bytes actually received.

    Returns:
        Number of bytes written

    Raises:
        ValidationError: If the stream exceeds ``max_bytes``
    """
    written = 0
    with open(path, "wb") as out:
        while True:
            chunk = stream.read(COPY_CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > max_bytes:
                raise ValidationError(f"File too large, max size is {max_bytes} bytes")
            out.write(chunk)
    return written


def remove_file(path: str) -> None:
    """Best-effort delete. A missing file is fine; other failures are logged."""
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Failed to remove temp file {path}: {e}")
