"""
Security Settings Configuration

Secure defaults for the API project and the ``API_SECURITY`` settings
block read by the middleware stack.
"""

import copy
import warnings
from typing import Any, Dict

# Secure defaults dictionary - Best practices for Django security
SECURE_DEFAULTS = {
    # SSL/TLS Configuration
    "SECURE_SSL_REDIRECT": False,  # TLS is terminated by the proxy
    "SECURE_PROXY_SSL_HEADER": ("HTTP_X_FORWARDED_PROTO", "https"),
    # Security Headers
    "SECURE_HSTS_SECONDS": 31536000,  # 1 year
    "SECURE_HSTS_INCLUDE_SUBDOMAINS": True,
    "SECURE_HSTS_PRELOAD": True,
    "SECURE_CONTENT_TYPE_NOSNIFF": True,
    "SECURE_REFERRER_POLICY": "strict-origin-when-cross-origin",
    "SECURE_CROSS_ORIGIN_OPENER_POLICY": "same-origin",
    "X_FRAME_OPTIONS": "DENY",
    # Body limits
    "DATA_UPLOAD_MAX_MEMORY_SIZE": 10 * 1024,  # 10 KB
    "DATA_UPLOAD_MAX_NUMBER_FIELDS": 100,
    # Other Security Settings
    "USE_X_FORWARDED_HOST": False,
    "USE_X_FORWARDED_PORT": False,
    "DEFAULT_AUTO_FIELD": "django.db.models.BigAutoField",
}

DEFAULT_CSP_DIRECTIVES = {
    "default-src": "'self'",
    "style-src": "'self' 'unsafe-inline'",
    "script-src": "'self'",
    "img-src": "'self' data: https:",
    "connect-src": "'self'",
    "font-src": "'self'",
    "object-src": "'none'",
    "media-src": "'self'",
    "frame-src": "'none'",
}

DEFAULT_HSTS = {
    "MAX_AGE": 31536000,
    "INCLUDE_SUBDOMAINS": True,
    "PRELOAD": True,
}

DEFAULT_CORS = {
    "ALLOWED_ORIGINS": ["http://localhost:3000"],
    "ALLOW_CREDENTIALS": True,
    "METHODS": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    "HEADERS": ["Content-Type", "Authorization"],
    "MAX_AGE": 86400,  # 24 hours
}

API_SECURITY_DEFAULTS = {
    "ENABLE_RATE_LIMITING": True,
    "RATE_LIMITING": {
        "BACKEND": "cache",
        "TRUST_X_FORWARDED_FOR": False,
    },
    "ENABLE_REQUEST_SIZE_LIMIT": True,
    "REQUEST_SIZE_LIMIT": 10 * 1024,
    "ENABLE_SECURITY_HEADERS": True,
    "CSP_DIRECTIVES": DEFAULT_CSP_DIRECTIVES,
    "HSTS": DEFAULT_HSTS,
    "CORS": DEFAULT_CORS,
}

# Outermost first. Rate limiting hooks process_view, so it has to know the
# resolved route and therefore sits innermost.
SECURITY_MIDDLEWARE = [
    "server.security.middleware.request_logging.RequestLoggingMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "server.security.middleware.security_headers.SecurityHeadersMiddleware",
    "server.security.middleware.cors.CorsMiddleware",
    "server.security.middleware.request_size_limit.RequestSizeLimitMiddleware",
    "server.security.middleware.exception_handling.JsonExceptionMiddleware",
    "server.security.middleware.rate_limiting.RateLimitingMiddleware",
]

# Sub-dictionaries merged key by key instead of replaced
NESTED_KEYS = ("RATE_LIMITING", "HSTS", "CORS")


def get_security_config(overrides: Dict[str, Any] = None, debug: bool = False) -> Dict[str, Any]:
    """
    Merge ``API_SECURITY`` overrides onto the defaults.

    Args:
        overrides: The project's API_SECURITY dictionary
        debug: Whether the project runs in DEBUG mode

    Returns:
        A complete API_SECURITY dictionary
    """
    config = copy.deepcopy(API_SECURITY_DEFAULTS)
    config["ENABLE_REQUEST_LOGGING"] = debug

    for key, value in (overrides or {}).items():
        if key in NESTED_KEYS and isinstance(value, dict):
            config[key].update(value)
        else:
            config[key] = value

    return config


def apply_secure_defaults(settings_dict: Dict[str, Any]) -> None:
    """
    Apply secure defaults to Django settings.

    Args:
        settings_dict: Dictionary containing Django settings (usually globals())

    Example:
        # In settings.py
        from server.security.conf import apply_secure_defaults
        apply_secure_defaults(globals())
    """
    config = SECURE_DEFAULTS.copy()

    # Check if we're in DEBUG mode
    debug_mode = settings_dict.get("DEBUG", False)

    if debug_mode:
        warnings.warn(
            "Security: Running in DEBUG mode. Error details are exposed in responses.",
            UserWarning,
        )
        config.update(
            {
                "SECURE_SSL_REDIRECT": False,
                "SECURE_HSTS_SECONDS": 0,
            }
        )

    # Apply the configuration
    for key, value in config.items():
        # Don't override existing settings unless they're explicitly None
        if key not in settings_dict or settings_dict[key] is None:
            settings_dict[key] = value

    settings_dict["API_SECURITY"] = get_security_config(
        settings_dict.get("API_SECURITY"), debug=debug_mode
    )

    # Install the security stack ahead of any project middleware
    project_middleware = [
        mw for mw in settings_dict.get("MIDDLEWARE", []) if mw not in SECURITY_MIDDLEWARE
    ]
    settings_dict["MIDDLEWARE"] = SECURITY_MIDDLEWARE + project_middleware
