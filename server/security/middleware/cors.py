"""
CORS Middleware

Allow-list based cross-origin policy. Requests without an ``Origin`` header
(curl, server-to-server) pass through untouched.
"""

import logging

from django.conf import settings
from django.http import HttpResponse
from django.utils.cache import patch_vary_headers
from django.utils.deprecation import MiddlewareMixin

from server.errors import OriginNotAllowed
from server.security.conf import DEFAULT_CORS

logger = logging.getLogger(__name__)


class CorsMiddleware(MiddlewareMixin):
    """
    Middleware to enforce the CORS allow list.

    Configurable via API_SECURITY['CORS'].
    """

    def __init__(self, get_response):
        self.get_response = get_response
        super().__init__(get_response)

        self.config = dict(DEFAULT_CORS)
        self.config.update(getattr(settings, "API_SECURITY", {}).get("CORS", {}))
        self.allowed_origins = list(self.config["ALLOWED_ORIGINS"])

    def _is_preflight(self, request):
        return (
            request.method == "OPTIONS"
            and "HTTP_ACCESS_CONTROL_REQUEST_METHOD" in request.META
        )

    def process_request(self, request):
        origin = request.META.get("HTTP_ORIGIN")
        if not origin:
            return None

        if origin not in self.allowed_origins and "*" not in self.allowed_origins:
            logger.warning("Rejected cross-origin request from %s to %s", origin, request.path)
            return OriginNotAllowed().to_response()

        if self._is_preflight(request):
            response = HttpResponse(status=200)
            response["Content-Length"] = "0"
            response["Access-Control-Allow-Methods"] = ", ".join(self.config["METHODS"])
            response["Access-Control-Allow-Headers"] = ", ".join(self.config["HEADERS"])
            response["Access-Control-Max-Age"] = str(self.config["MAX_AGE"])
            return response

        return None

    def process_response(self, request, response):
        """Add CORS headers to response."""
        origin = request.META.get("HTTP_ORIGIN")
        if not origin:
            return response

        if origin in self.allowed_origins or "*" in self.allowed_origins:
            response["Access-Control-Allow-Origin"] = origin
            if self.config["ALLOW_CREDENTIALS"]:
                response["Access-Control-Allow-Credentials"] = "true"
            patch_vary_headers(response, ("Origin",))

        return response
