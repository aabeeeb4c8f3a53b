"""
Tests for the security settings helpers and system checks
"""

import pytest
from django.test import override_settings

from server.security import checks
from server.security.conf import (
    API_SECURITY_DEFAULTS,
    SECURITY_MIDDLEWARE,
    apply_secure_defaults,
    get_security_config,
)


class TestGetSecurityConfig:
    def test_defaults(self):
        config = get_security_config()

        assert config["REQUEST_SIZE_LIMIT"] == 10240
        assert config["RATE_LIMITING"]["BACKEND"] == "cache"
        assert config["ENABLE_REQUEST_LOGGING"] is False

    def test_nested_keys_merged(self):
        config = get_security_config({"CORS": {"ALLOWED_ORIGINS": ["https://app.example"]}})

        assert config["CORS"]["ALLOWED_ORIGINS"] == ["https://app.example"]
        assert config["CORS"]["MAX_AGE"] == 86400

    def test_defaults_not_mutated(self):
        get_security_config({"RATE_LIMITING": {"BACKEND": "memory"}})

        assert API_SECURITY_DEFAULTS["RATE_LIMITING"]["BACKEND"] == "cache"


class TestApplySecureDefaults:
    def test_middleware_installed_first(self):
        settings_dict = {"DEBUG": False, "MIDDLEWARE": ["myapp.middleware.Custom"]}

        apply_secure_defaults(settings_dict)

        assert settings_dict["MIDDLEWARE"] == SECURITY_MIDDLEWARE + ["myapp.middleware.Custom"]
        assert settings_dict["X_FRAME_OPTIONS"] == "DENY"
        assert settings_dict["DATA_UPLOAD_MAX_MEMORY_SIZE"] == 10240

    def test_existing_settings_kept(self):
        settings_dict = {"DEBUG": False, "X_FRAME_OPTIONS": "SAMEORIGIN"}

        apply_secure_defaults(settings_dict)

        assert settings_dict["X_FRAME_OPTIONS"] == "SAMEORIGIN"

    def test_debug_warns_and_disables_hsts(self):
        settings_dict = {"DEBUG": True}

        with pytest.warns(UserWarning):
            apply_secure_defaults(settings_dict)

        assert settings_dict["SECURE_HSTS_SECONDS"] == 0
        assert settings_dict["API_SECURITY"]["ENABLE_REQUEST_LOGGING"] is True

    def test_rate_limit_order(self):
        assert SECURITY_MIDDLEWARE[-1].endswith("RateLimitingMiddleware")
        assert SECURITY_MIDDLEWARE.index(
            "server.security.middleware.cors.CorsMiddleware"
        ) < SECURITY_MIDDLEWARE.index(
            "server.security.middleware.request_size_limit.RequestSizeLimitMiddleware"
        )


class TestSystemChecks:
    def test_project_settings_pass(self):
        assert checks.check_security_middleware(None) == []
        assert checks.check_rate_limit_configuration(None) == []
        assert checks.check_cors_configuration(None) == []

    def test_debug_in_production(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")

        with override_settings(DEBUG=True):
            errors = checks.check_debug_mode(None)

        assert [e.id for e in errors] == ["security.E001"]

    def test_short_secret_key(self):
        with override_settings(SECRET_KEY="short", DEBUG=True):
            ids = [e.id for e in checks.check_secret_key(None)]

        assert ids == ["security.W001"]

    def test_insecure_key_outside_debug(self):
        with override_settings(SECRET_KEY="django-insecure-" + "x" * 60, DEBUG=False):
            ids = [e.id for e in checks.check_secret_key(None)]

        assert ids == ["security.E002"]

    def test_cors_wildcard_with_credentials(self):
        with override_settings(API_SECURITY={"CORS": {"ALLOWED_ORIGINS": ["*"]}}):
            ids = [e.id for e in checks.check_cors_configuration(None)]

        assert ids == ["security.E003"]

    def test_rate_limit_disabled(self):
        with override_settings(API_SECURITY={"ENABLE_RATE_LIMITING": False}):
            ids = [e.id for e in checks.check_rate_limit_configuration(None)]

        assert ids == ["security.W002"]

    def test_invalid_rate_limit(self):
        with override_settings(API_SECURITY={"RATE_LIMITING": {"LIMITS": {"general": "lots"}}}):
            ids = [e.id for e in checks.check_rate_limit_configuration(None)]

        assert ids == ["security.E004"]

    def test_redis_without_url(self):
        with override_settings(
            API_SECURITY={"RATE_LIMITING": {"BACKEND": "redis"}}, REDIS_URL=None
        ):
            ids = [e.id for e in checks.check_rate_limit_configuration(None)]

        assert ids == ["security.E005"]

    def test_missing_middleware(self):
        with override_settings(MIDDLEWARE=SECURITY_MIDDLEWARE[:-1]):
            errors = checks.check_security_middleware(None)

        assert [e.id for e in errors] == ["security.E006"]
