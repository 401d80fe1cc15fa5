"""Decorator that adds security headers to a single Starlette handler."""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from csp_guard.headers import generate_security_headers
from csp_guard.models.csp_rule import CspRule, SecurityOptions, coerce_rules

Handler = Callable[[Request], Awaitable[Response]]


def create_secure_handler(
    rules: Iterable[CspRule | Mapping[str, Any]] | None = None,
    options: SecurityOptions | Mapping[str, Any] | None = None,
) -> Callable[[Handler], Handler]:
    """Return a decorator that sets security headers on a handler's response.

    Uses ``options.nonce`` as-is; for a fresh nonce per request use
    SecureHeadersMiddleware instead. Handler exceptions propagate unchanged.

        secure = create_secure_handler(rules=[{"img-src": "https://cdn.example.com"}])

        @secure
        async def homepage(request):
            return HTMLResponse("...")
    """
    rule_list = coerce_rules(rules)

    def decorator(handler: Handler) -> Handler:
        @functools.wraps(handler)
        async def wrapped_handler(request: Request) -> Response:
            response = await handler(request)
            for header_name, header_value in generate_security_headers(rule_list, options).items():
                response.headers[header_name] = header_value
            return response

        return wrapped_handler

    return decorator
