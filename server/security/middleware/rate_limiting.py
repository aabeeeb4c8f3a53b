"""
Rate Limiting Middleware

Applies the per-endpoint limit classes before any view code runs.
"""

import logging

from django.conf import settings
from django.utils.deprecation import MiddlewareMixin

from server.errors import RateLimitExceeded
from server.security.rate_limit import GENERAL, build_rate_limiter
from server.security.utils import get_client_ip

logger = logging.getLogger(__name__)


class RateLimitingMiddleware(MiddlewareMixin):
    """
    Middleware to enforce sliding-window rate limits.

    The classes applied to a request come from the resolved view: routes
    expose ``rate_limits_for(method)``, anything else is limited by the
    ``general`` class only. Unknown paths resolve to the catch-all route,
    so they are counted too.

    Configurable via API_SECURITY['RATE_LIMITING'] settings.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        super().__init__(get_response)

        # Get configuration
        self.config = getattr(settings, "API_SECURITY", {})
        self.rate_config = self.config.get("RATE_LIMITING", {})
        self.enabled = self.config.get("ENABLE_RATE_LIMITING", True)
        self.trust_forwarded = self.rate_config.get("TRUST_X_FORWARDED_FOR", False)

        self.limiter = build_rate_limiter(self.rate_config) if self.enabled else None

    def _get_limit_names(self, request, view_func):
        rate_limits_for = getattr(view_func, "rate_limits_for", None)
        if rate_limits_for is None:
            return (GENERAL,)
        return rate_limits_for(request.method)

    def process_view(self, request, view_func, view_args, view_kwargs):
        """Check every applicable limit class before the view runs."""
        if not self.enabled:
            return None

        address = get_client_ip(request, trust_forwarded=self.trust_forwarded)
        decision = self.limiter.hit(address, self._get_limit_names(request, view_func))

        if not decision.allowed:
            logger.warning(
                "Rate limit '%s' exceeded for %s on %s %s",
                decision.limit_class.name,
                address,
                request.method,
                request.path,
            )
            response = RateLimitExceeded(
                decision.limit_class.message, retry_after=decision.reset_after
            ).to_response()
            self._set_headers(response, decision)
            return response

        request._rate_limit_decision = decision
        return None

    def _set_headers(self, response, decision):
        response["RateLimit-Limit"] = str(decision.limit)
        response["RateLimit-Remaining"] = str(max(0, decision.remaining))
        response["RateLimit-Reset"] = str(decision.reset_after)

    def process_response(self, request, response):
        """Add rate limit headers to response."""
        decision = getattr(request, "_rate_limit_decision", None)
        if decision is not None:
            self._set_headers(response, decision)

        return response
