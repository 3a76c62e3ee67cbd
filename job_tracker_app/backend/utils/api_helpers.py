"""
Common API utilities shared by the routers: the error type every handler
raises, input validation and classification of Gemini failures.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from google.api_core import exceptions as google_exceptions

from ..services.gemini_service import GenerationConfigError

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    """
    HTTPException rendered as {"error": detail, "details": details}.

    Args:
        status_code: HTTP status to return.
        error: User-facing message.
        details: Optional technical detail (upstream message).
    """

    def __init__(
        self,
        status_code: int,
        error: str,
        details: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=error, headers=headers)
        self.details = details


def error_body(exc: HTTPException) -> Dict[str, Any]:
    body = {"error": exc.detail if isinstance(exc.detail, str) else str(exc.detail)}
    details = getattr(exc, "details", None)
    if details:
        body["details"] = details
    return body


def validate_non_empty_string(value: Optional[str], message: str) -> str:
    """
    Validates that a string field is not None or blank.

    Args:
        value: The string value to validate
        message: Error message returned to the client

    Raises:
        ApiError: 400 if value is None or empty
    """
    if not value or not value.strip():
        raise ApiError(status.HTTP_400_BAD_REQUEST, message)
    return value


def check_resource_exists(resource: Optional[object], resource_type: str) -> None:
    """Raises a 404 ApiError when `resource` is None."""
    if resource is None:
        raise ApiError(status.HTTP_404_NOT_FOUND, f"{resource_type} not found")


def classify_generation_error(error: Exception) -> int:
    """
    Maps a failed Gemini call to an HTTP status.

    401 for rejected or missing credentials, 429 for exhausted quota, 500 for
    everything else. The SDK's typed exceptions are checked first, then the
    message text, since some key errors arrive as plain InvalidArgument.
    """
    cause = error.__cause__ or error
    message = str(error).lower()

    if isinstance(error, GenerationConfigError) or isinstance(
        cause, (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied)
    ) or "api key" in message:
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(cause, google_exceptions.ResourceExhausted) or "quota" in message:
        return status.HTTP_429_TOO_MANY_REQUESTS
    return status.HTTP_500_INTERNAL_SERVER_ERROR
