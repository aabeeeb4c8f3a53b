"""
Request Size Limit Middleware

Enforces the request body cap before any parsing or validation.
"""

import logging

from django.conf import settings
from django.core.exceptions import RequestDataTooBig
from django.utils.deprecation import MiddlewareMixin

from server.errors import RequestTooLarge
from server.security.conf import API_SECURITY_DEFAULTS

logger = logging.getLogger(__name__)


class RequestSizeLimitMiddleware(MiddlewareMixin):
    """
    Middleware to enforce request size limits.

    The declared ``Content-Length`` is checked first; when it is missing
    the body itself is measured.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        super().__init__(get_response)

        # Get configuration
        self.config = getattr(settings, "API_SECURITY", {})
        self.enabled = self.config.get("ENABLE_REQUEST_SIZE_LIMIT", True)
        self.limit = self.config.get(
            "REQUEST_SIZE_LIMIT", API_SECURITY_DEFAULTS["REQUEST_SIZE_LIMIT"]
        )

    def _get_request_size(self, request):
        """Get the size of the request body."""
        content_length = request.META.get("CONTENT_LENGTH")

        if content_length:
            try:
                return int(content_length)
            except (ValueError, TypeError):
                # Malformed header, measure the body instead
                pass

        return len(request.body)

    def _format_size(self, size_bytes):
        """Format size in human-readable format."""
        for unit in ["B", "KB", "MB"]:
            if size_bytes < 1024.0:
                return f"{size_bytes:.2f} {unit}"
            size_bytes /= 1024.0
        return f"{size_bytes:.2f} GB"

    def _too_large(self, request, request_size):
        logger.warning(
            "Request size limit exceeded on %s %s: %s > %s",
            request.method,
            request.path,
            self._format_size(request_size),
            self._format_size(self.limit),
        )
        return RequestTooLarge(request_size, self.limit).to_response()

    def process_request(self, request):
        """Check request size before processing."""
        if not self.enabled:
            return None

        try:
            request_size = self._get_request_size(request)
        except RequestDataTooBig:
            return self._too_large(request, int(request.META.get("CONTENT_LENGTH") or 0))

        if request_size > self.limit:
            return self._too_large(request, request_size)

        return None
