"""
Security Configuration Module
"""

from .settings import (
    API_SECURITY_DEFAULTS,
    DEFAULT_CORS,
    DEFAULT_CSP_DIRECTIVES,
    DEFAULT_HSTS,
    SECURE_DEFAULTS,
    SECURITY_MIDDLEWARE,
    apply_secure_defaults,
    get_security_config,
)

__all__ = [
    "API_SECURITY_DEFAULTS",
    "DEFAULT_CORS",
    "DEFAULT_CSP_DIRECTIVES",
    "DEFAULT_HSTS",
    "SECURE_DEFAULTS",
    "SECURITY_MIDDLEWARE",
    "apply_secure_defaults",
    "get_security_config",
]
