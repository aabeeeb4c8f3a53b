"""
API security layer.

Secure default settings, the request-gating middleware stack (CORS, body
size, security headers, rate limiting) and the system checks that guard
its configuration.
"""

__all__ = ["conf", "middleware", "rate_limit", "utils", "checks"]
