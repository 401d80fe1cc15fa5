"""Default auxiliary security headers loaded from YAML."""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml

logger = structlog.get_logger()

_DEFAULTS_PATH = Path(__file__).parent / "header_defaults.yaml"

# Cache loaded defaults
_defaults: dict | None = None


def load_header_defaults() -> dict:
    """Load header defaults from YAML, caching after first load."""
    global _defaults
    if _defaults is not None:
        return _defaults
    if not _DEFAULTS_PATH.exists():
        logger.error("header_defaults_not_found", path=str(_DEFAULTS_PATH))
        _defaults = {}
        return _defaults
    with open(_DEFAULTS_PATH) as f:
        _defaults = yaml.safe_load(f) or {}
    return _defaults


def reset_header_defaults_cache() -> None:
    """Reset the defaults cache (for testing)."""
    global _defaults
    _defaults = None


def default_headers(is_dev: bool) -> dict[str, str]:
    """Return a fresh copy of the static headers for the environment."""
    defaults = load_header_defaults()
    headers = dict(defaults.get("headers", {}))
    if not is_dev:
        headers.update(defaults.get("production_headers", {}))
    return headers
