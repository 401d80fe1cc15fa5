"""Baseline CSP directives applied before caller rules."""

from __future__ import annotations

DEV_CONNECT_SOURCES = ("ws://localhost:*", "wss://localhost:*")


def baseline_directives(is_dev: bool, nonce: str | None = None) -> dict[str, list[str]]:
    """Return a fresh baseline directive table.

    With a nonce, scripts are trusted through ``'nonce-...' 'strict-dynamic'``
    only. CSP Level 3 browsers ignore ``'self'``, ``'unsafe-inline'`` and
    scheme sources once ``'strict-dynamic'`` is present, so they are left out.
    Without a nonce, scripts fall back to ``'self' 'unsafe-inline'``.

    Styles stay on ``'unsafe-inline'``: UI frameworks inject style elements
    and attributes that cannot carry a nonce.
    """
    if nonce:
        script_elem = [f"'nonce-{nonce}'", "'strict-dynamic'"]
    else:
        script_elem = ["'self'", "'unsafe-inline'"]
    script_src = script_elem + (["'unsafe-eval'"] if is_dev else [])

    connect_src = ["'self'"]
    if is_dev:
        connect_src.extend(DEV_CONNECT_SOURCES)

    return {
        "default-src": ["'self'"],
        "base-uri": ["'self'"],
        "child-src": ["'none'"],
        "connect-src": connect_src,
        "font-src": ["'self'"],
        "form-action": ["'self'"],
        "frame-ancestors": ["'none'"],
        "frame-src": ["'none'"],
        "img-src": ["'self'", "blob:", "data:"],
        "manifest-src": ["'self'"],
        "media-src": ["'self'"],
        "object-src": ["'none'"],
        "script-src": script_src,
        # unsafe-eval governs eval(), which only script-src controls
        "script-src-elem": list(script_elem),
        "style-src": ["'self'", "'unsafe-inline'"],
        "style-src-elem": ["'self'", "'unsafe-inline'"],
        "style-src-attr": ["'unsafe-inline'"],
        "worker-src": ["'self'", "blob:"],
    }
