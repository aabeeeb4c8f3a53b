"""
Django System Checks for Security

Run with:
    python manage.py check --tag security
"""

import os

from django.conf import settings
from django.core.checks import Error, Warning, register

from server.security.rate_limit import build_limit_classes


@register("security")
def check_debug_mode(app_configs, **kwargs):
    """Check if DEBUG mode is disabled in production."""
    errors = []

    is_production = os.environ.get("APP_ENV") == "production"

    if is_production and settings.DEBUG:
        errors.append(
            Error(
                "DEBUG mode is enabled in production environment",
                hint="Unset DEBUG or set DEBUG=False in production",
                id="security.E001",
            )
        )

    return errors


@register("security")
def check_secret_key(app_configs, **kwargs):
    """Check SECRET_KEY configuration."""
    errors = []

    secret_key = settings.SECRET_KEY

    if len(secret_key) < 50:
        errors.append(
            Warning(
                f"SECRET_KEY is too short ({len(secret_key)} characters)",
                hint="Generate a SECRET_KEY with at least 50 characters",
                id="security.W001",
            )
        )

    if "django-insecure" in secret_key and not settings.DEBUG:
        errors.append(
            Error(
                "SECRET_KEY is the insecure development key",
                hint="Load a generated SECRET_KEY from the environment",
                id="security.E002",
            )
        )

    return errors


@register("security")
def check_cors_configuration(app_configs, **kwargs):
    """Check that credentials are never shared with a wildcard origin."""
    errors = []

    cors = getattr(settings, "API_SECURITY", {}).get("CORS", {})
    if "*" in cors.get("ALLOWED_ORIGINS", []) and cors.get("ALLOW_CREDENTIALS", True):
        errors.append(
            Error(
                "CORS allows credentials for any origin",
                hint="List explicit origins in API_SECURITY['CORS']['ALLOWED_ORIGINS']",
                id="security.E003",
            )
        )

    return errors


@register("security")
def check_rate_limit_configuration(app_configs, **kwargs):
    """Check that every configured rate limit parses."""
    errors = []

    config = getattr(settings, "API_SECURITY", {})
    if not config.get("ENABLE_RATE_LIMITING", True):
        errors.append(
            Warning(
                "Rate limiting is disabled",
                hint="Set API_SECURITY['ENABLE_RATE_LIMITING'] = True",
                id="security.W002",
            )
        )
        return errors

    rate_config = config.get("RATE_LIMITING", {})
    try:
        build_limit_classes(rate_config.get("LIMITS"), rate_config.get("MESSAGES"))
    except ValueError as e:
        errors.append(
            Error(
                f"Invalid rate limit configuration: {e}",
                hint='Use "<count>/<period>" strings such as "100/15m" or "10/h"',
                id="security.E004",
            )
        )

    if rate_config.get("BACKEND") == "redis" and not (
        rate_config.get("REDIS_URL") or getattr(settings, "REDIS_URL", None)
    ):
        errors.append(
            Error(
                "Redis rate limiting backend selected without REDIS_URL",
                hint="Set REDIS_URL or choose the 'cache' backend",
                id="security.E005",
            )
        )

    return errors


@register("security")
def check_security_middleware(app_configs, **kwargs):
    """Check that the request gates are installed."""
    from server.security.conf import SECURITY_MIDDLEWARE

    errors = []

    missing = [mw for mw in SECURITY_MIDDLEWARE if mw not in settings.MIDDLEWARE]
    for mw in missing:
        errors.append(
            Error(
                f"Security middleware is not enabled: {mw}",
                hint="Call apply_secure_defaults(globals()) at the end of settings.py",
                id="security.E006",
            )
        )

    return errors
