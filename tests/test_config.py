"""Settings and header default loading tests."""

from __future__ import annotations

import os

from csp_guard.config import headers as header_defaults
from csp_guard.config.headers import default_headers, load_header_defaults
from csp_guard.config.loader import GuardSettings, get_settings, load_settings


class TestGuardSettings:
    def test_default_values(self, monkeypatch):
        """Settings have sensible defaults."""
        # Clear env vars that conftest sets, so we test true defaults
        for key in list(os.environ):
            if key.startswith("CSP_GUARD_"):
                monkeypatch.delenv(key, raising=False)
        settings = GuardSettings(_env_file=None)
        assert settings.environment == "production"
        assert settings.is_dev is False
        assert settings.log_level == "info"
        assert settings.log_json is True
        assert settings.nonce_bytes == 16

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CSP_GUARD_ENVIRONMENT", "development")
        monkeypatch.setenv("CSP_GUARD_NONCE_BYTES", "32")
        settings = GuardSettings()
        assert settings.is_dev is True
        assert settings.nonce_bytes == 32

    def test_any_non_production_environment_is_dev(self, monkeypatch):
        monkeypatch.setenv("CSP_GUARD_ENVIRONMENT", "staging")
        assert GuardSettings().is_dev is True

    def test_production_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("CSP_GUARD_ENVIRONMENT", "Production")
        assert GuardSettings().is_dev is False

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_load_settings_replaces_singleton(self):
        first = get_settings()
        second = load_settings()
        assert first is not second
        assert get_settings() is second


class TestHeaderDefaults:
    def test_yaml_loaded(self):
        defaults = load_header_defaults()
        assert "headers" in defaults
        assert "production_headers" in defaults

    def test_cached(self):
        assert load_header_defaults() is load_header_defaults()

    def test_production_includes_hsts(self):
        headers = default_headers(is_dev=False)
        assert headers["Strict-Transport-Security"] == "max-age=31536000; includeSubDomains; preload"

    def test_dev_excludes_hsts(self):
        assert "Strict-Transport-Security" not in default_headers(is_dev=True)

    def test_static_values(self):
        headers = default_headers(is_dev=True)
        assert headers["X-Frame-Options"] == "DENY"
        assert headers["X-Content-Type-Options"] == "nosniff"
        assert headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
        assert headers["X-XSS-Protection"] == "1; mode=block"
        for feature in ("camera", "microphone", "geolocation", "payment", "usb", "interest-cohort"):
            assert f"{feature}=()" in headers["Permissions-Policy"]

    def test_returns_copy(self):
        default_headers(is_dev=True)["X-Frame-Options"] = "SAMEORIGIN"
        assert default_headers(is_dev=True)["X-Frame-Options"] == "DENY"

    def test_missing_file_yields_empty(self, monkeypatch, tmp_path):
        monkeypatch.setattr(header_defaults, "_DEFAULTS_PATH", tmp_path / "missing.yaml")
        header_defaults.reset_header_defaults_cache()
        assert default_headers(is_dev=False) == {}
