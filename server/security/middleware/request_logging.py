"""
Request Logging Middleware

One log line per request. Enabled outside production by default.
"""

import logging
import time

from django.conf import settings
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(MiddlewareMixin):
    def __init__(self, get_response):
        self.get_response = get_response
        super().__init__(get_response)

        self.config = getattr(settings, "API_SECURITY", {})
        self.enabled = self.config.get("ENABLE_REQUEST_LOGGING", settings.DEBUG)

    def process_request(self, request):
        request._started_at = time.monotonic()

    def process_response(self, request, response):
        if self.enabled:
            started_at = getattr(request, "_started_at", None)
            elapsed_ms = (time.monotonic() - started_at) * 1000 if started_at else 0.0
            logger.info(
                "%s %s %s (%.1fms)",
                request.method,
                request.path,
                response.status_code,
                elapsed_ms,
            )
        return response
