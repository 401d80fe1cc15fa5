"""Shared test fixtures."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch):
    """Provide default settings for all tests."""
    monkeypatch.setenv("CSP_GUARD_ENVIRONMENT", "production")
    monkeypatch.setenv("CSP_GUARD_LOG_JSON", "false")
    monkeypatch.setenv("CSP_GUARD_LOG_LEVEL", "debug")

    # Reset cached settings and header defaults
    import csp_guard.config.headers as header_defaults
    import csp_guard.config.loader as loader
    loader._settings = None
    header_defaults.reset_header_defaults_cache()
    yield
    loader._settings = None
    header_defaults.reset_header_defaults_cache()


@pytest.fixture
def nonce():
    """A well-formed 24 character base64 nonce."""
    return "cmFuZG9tLW5vbmNlLTEyMzQ="
