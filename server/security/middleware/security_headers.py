"""
Security Headers Middleware

Adds security headers to every HTTP response.
"""

from django.conf import settings
from django.utils.deprecation import MiddlewareMixin

from server.security.conf import DEFAULT_CSP_DIRECTIVES, DEFAULT_HSTS

STATIC_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Permitted-Cross-Domain-Policies": "none",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Embedder-Policy": "require-corp",
    "Cross-Origin-Resource-Policy": "same-site",
}


class SecurityHeadersMiddleware(MiddlewareMixin):
    """
    Middleware to add security headers to responses.

    Configurable via API_SECURITY['CSP_DIRECTIVES'] and API_SECURITY['HSTS'].
    Headers already set by a view are left alone.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        super().__init__(get_response)

        # Get configuration
        self.config = getattr(settings, "API_SECURITY", {})
        self.enabled = self.config.get("ENABLE_SECURITY_HEADERS", True)

        self.csp_directives = self.config.get("CSP_DIRECTIVES", DEFAULT_CSP_DIRECTIVES)
        self.hsts = dict(DEFAULT_HSTS)
        self.hsts.update(self.config.get("HSTS", {}))

    def _build_csp_header(self, directives=None):
        """Build the CSP header string from directives."""
        if directives is None:
            directives = self.csp_directives

        parts = []
        for directive, value in directives.items():
            if value:
                parts.append(f"{directive} {value}")
            else:
                parts.append(directive)

        return "; ".join(parts)

    def _build_hsts_header(self):
        parts = [f"max-age={self.hsts['MAX_AGE']}"]
        if self.hsts.get("INCLUDE_SUBDOMAINS"):
            parts.append("includeSubDomains")
        if self.hsts.get("PRELOAD"):
            parts.append("preload")
        return "; ".join(parts)

    def process_response(self, request, response):
        """Add security headers to response."""
        if not self.enabled:
            return response

        if "Content-Security-Policy" not in response:
            response["Content-Security-Policy"] = self._build_csp_header()

        if self.hsts.get("MAX_AGE") and "Strict-Transport-Security" not in response:
            response["Strict-Transport-Security"] = self._build_hsts_header()

        for header, value in STATIC_HEADERS.items():
            if header not in response:
                response[header] = value

        # Never advertise the server stack
        if "Server" in response:
            del response["Server"]

        return response
