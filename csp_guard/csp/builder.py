"""CSP header serialization and the build entry point."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from csp_guard.csp.baseline import baseline_directives
from csp_guard.csp.merger import DirectiveTable, merge_rules, propagate_granular
from csp_guard.csp.values import BOOLEAN_SIGNAL
from csp_guard.models.csp_rule import CspRule, coerce_rules
from csp_guard.nonce import validate_nonce

logger = structlog.get_logger()

# Advisory thresholds for the serialized header, in bytes
HEADER_SIZE_WARN_BYTES = 4000
HEADER_SIZE_LIMIT_BYTES = 8000


def serialize_directives(directives: DirectiveTable) -> str:
    """Build a CSP string from a directive table.

    Example:
        >>> serialize_directives({"default-src": ["'self'"], "upgrade-insecure-requests": [""]})
        "default-src 'self'; upgrade-insecure-requests"
    """
    parts = []
    for directive, values in directives.items():
        sources = [v for v in values if v != BOOLEAN_SIGNAL]
        if sources:
            parts.append(f"{directive} {' '.join(sources)}")
        else:
            parts.append(directive)
    return "; ".join(parts)


def _check_header_size(header: str) -> None:
    size = len(header.encode("utf-8"))
    if size > HEADER_SIZE_LIMIT_BYTES:
        logger.error("csp_header_too_large", size=size, limit=HEADER_SIZE_LIMIT_BYTES)
    elif size > HEADER_SIZE_WARN_BYTES:
        logger.warning("csp_header_large", size=size, threshold=HEADER_SIZE_WARN_BYTES)


def build_directives(
    rules: Iterable[CspRule | Mapping[str, Any]] | None,
    nonce: str | None,
    is_dev: bool,
) -> DirectiveTable:
    """Return the final directive table for the given rules."""
    merged = merge_rules(baseline_directives(is_dev, nonce), coerce_rules(rules), is_dev)
    return propagate_granular(merged)


def build_csp_header(
    rules: Iterable[CspRule | Mapping[str, Any]] | None,
    nonce: str | None,
    is_dev: bool,
) -> str:
    """Build the Content-Security-Policy header value.

    Rules are merged over the baseline policy, base script/style sources are
    copied into their ``-elem`` directives, and the table is serialized.
    Oversized headers and weak nonces are logged but still returned.
    """
    if nonce:
        validate_nonce(nonce)
    header = serialize_directives(build_directives(rules, nonce, is_dev))
    _check_header_size(header)
    return header
