"""
Security Middleware Module
"""

from .cors import CorsMiddleware
from .exception_handling import JsonExceptionMiddleware
from .rate_limiting import RateLimitingMiddleware
from .request_logging import RequestLoggingMiddleware
from .request_size_limit import RequestSizeLimitMiddleware
from .security_headers import SecurityHeadersMiddleware

__all__ = [
    "CorsMiddleware",
    "JsonExceptionMiddleware",
    "RateLimitingMiddleware",
    "RequestLoggingMiddleware",
    "RequestSizeLimitMiddleware",
    "SecurityHeadersMiddleware",
]
