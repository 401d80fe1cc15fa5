"""Assemble the full set of security response headers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from csp_guard.config.headers import default_headers
from csp_guard.config.loader import get_settings
from csp_guard.csp.builder import build_csp_header
from csp_guard.models.csp_rule import CspRule, SecurityOptions

CSP_HEADER = "Content-Security-Policy"
NONCE_HEADER = "x-nonce"


def generate_security_headers(
    rules: Iterable[CspRule | Mapping[str, Any]] | None = None,
    options: SecurityOptions | Mapping[str, Any] | None = None,
) -> dict[str, str]:
    """Generate CSP plus the auxiliary security headers.

    ``options.is_dev`` falls back to the configured environment.
    Strict-Transport-Security is only sent outside development unless
    ``header_config`` sets it explicitly.
    """
    if options is None:
        options = SecurityOptions()
    elif not isinstance(options, SecurityOptions):
        options = SecurityOptions.model_validate(options)

    is_dev = options.is_dev if options.is_dev is not None else get_settings().is_dev

    headers = {CSP_HEADER: build_csp_header(rules, options.nonce, is_dev)}
    headers.update(default_headers(is_dev))
    headers.update(options.header_config)

    if options.nonce:
        headers[NONCE_HEADER] = options.nonce
    return headers
