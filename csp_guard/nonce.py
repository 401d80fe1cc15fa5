"""Per-request CSP nonce helpers."""

from __future__ import annotations

import base64
import re
import secrets

import structlog

logger = structlog.get_logger()

MIN_NONCE_LENGTH = 24

# Standard and URL-safe base64 alphabets, optional padding
_BASE64_RE = re.compile(r"^[A-Za-z0-9+/_-]+={0,2}$")


def generate_nonce(num_bytes: int = 16) -> str:
    """Return a base64-encoded nonce from ``num_bytes`` of CSPRNG output."""
    return base64.b64encode(secrets.token_bytes(num_bytes)).decode("ascii")


def validate_nonce(nonce: str) -> bool:
    """Check that a nonce looks strong enough. Logs a warning if not."""
    if len(nonce) < MIN_NONCE_LENGTH:
        logger.warning("csp_nonce_weak", reason="too_short", length=len(nonce), minimum=MIN_NONCE_LENGTH)
        return False
    if not _BASE64_RE.match(nonce):
        logger.warning("csp_nonce_weak", reason="not_base64", length=len(nonce))
        return False
    return True
