"""Env var config loading with pydantic-settings."""

from __future__ import annotations

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()


class GuardSettings(BaseSettings):
    """Settings read from CSP_GUARD_* env vars or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="CSP_GUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = "production"
    log_level: str = "info"
    log_json: bool = True

    # Entropy for generated nonces (16 bytes -> 24 base64 chars)
    nonce_bytes: int = 16

    @property
    def is_dev(self) -> bool:
        return self.environment.lower() != "production"


_settings: GuardSettings | None = None


def get_settings() -> GuardSettings:
    """Get or create the singleton settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def load_settings() -> GuardSettings:
    """Load settings from env vars (env vars override model defaults)."""
    global _settings
    _settings = GuardSettings()
    logger.debug("config_loaded", environment=_settings.environment)
    return _settings
