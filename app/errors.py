"""
Error hierarchy for the media service.

Each error kind carries the HTTP status it maps to. Services raise these;
the exception handlers registered in app.main turn them into JSON bodies.
"""

from typing import Optional


class TubelyError(Exception):
    """Base class for all classified service errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TubelyError):
    """Bad content type, oversized payload or missing field."""

    status_code = 400


class AuthError(TubelyError):
    """Missing or invalid credentials."""

    status_code = 401


class ForbiddenError(AuthError):
    """Caller is authenticated but does not own the record."""

    status_code = 403


class NotFoundError(TubelyError):
    """Unknown record id or missing asset."""

    status_code = 404


class ToolExecutionError(TubelyError):
    """An external media tool exited non-zero."""

    status_code = 500

    def __init__(self, tool: str, stderr: str, returncode: Optional[int] = None):
        super().__init__(f"{tool} error: {stderr.strip()}")
        self.tool = tool
        self.stderr = stderr
        self.returncode = returncode


class NoStreamError(TubelyError):
    """The inspected file has no usable video stream."""

    status_code = 500


class StoreError(TubelyError):
    """Object store upload, delete or signing failure."""

    status_code = 500
