"""
API error taxonomy.

Every failure the API can report is an ``ApiError`` subclass carrying the
HTTP status and the public message. ``to_response`` is the single place
the failure envelope is built.
"""

import traceback
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.http import JsonResponse


class ApiError(Exception):
    """Base class for errors that map onto a JSON failure envelope."""

    status_code = 500
    default_message = "An error occurred"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)

    def payload(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}

    def to_response(self, expose_detail: Optional[bool] = None) -> JsonResponse:
        if expose_detail is None:
            expose_detail = settings.DEBUG

        data = self.payload()
        if expose_detail and self.detail and self.status_code >= 500:
            data["detail"] = self.detail

        return JsonResponse(data, status=self.status_code)


class RateLimitExceeded(ApiError):
    status_code = 429
    default_message = "Too many requests from this IP, please try again later."

    def __init__(self, message: Optional[str] = None, retry_after: int = 0):
        super().__init__(message)
        self.retry_after = retry_after

    def to_response(self, expose_detail: Optional[bool] = None) -> JsonResponse:
        response = super().to_response(expose_detail)
        response["Retry-After"] = str(self.retry_after)
        return response


class ValidationFailed(ApiError):
    status_code = 400
    default_message = "Validation failed"

    def __init__(self, details: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message)
        self.details = details

    def payload(self) -> Dict[str, Any]:
        data = super().payload()
        data["details"] = self.details
        return data


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class UpstreamFailure(ApiError):
    status_code = 502
    default_message = "Upstream service unavailable"


class PersistenceFailure(ApiError):
    status_code = 500
    default_message = "Storage operation failed"


class RequestTooLarge(ApiError):
    status_code = 413
    default_message = "Request entity too large"

    def __init__(self, request_size: int, size_limit: int, message: Optional[str] = None):
        super().__init__(message)
        self.request_size = request_size
        self.size_limit = size_limit

    def payload(self) -> Dict[str, Any]:
        data = super().payload()
        data["request_size"] = self.request_size
        data["size_limit"] = self.size_limit
        return data


class OriginNotAllowed(ApiError):
    status_code = 403
    default_message = "Not allowed by CORS"


class Gone(ApiError):
    status_code = 410
    default_message = "This endpoint is no longer available"


def unexpected_error_response(exc: BaseException) -> JsonResponse:
    """Generic 500 envelope for anything outside the taxonomy."""
    if settings.DEBUG:
        data = {
            "success": False,
            "error": str(exc) or "Internal server error",
            "stack": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        }
    else:
        data = {"success": False, "error": "An error occurred"}

    return JsonResponse(data, status=500)


def validation_detail(field: str, message: str, location: str = "body") -> Dict[str, str]:
    return {"field": field, "message": message, "location": location}
