"""Starlette integration for security headers."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from csp_guard.middleware.security_headers import NONCE_STATE_ATTR, RequestContext, SecurityHeaders
from csp_guard.models.csp_rule import CspRule, SecurityOptions


class SecureHeadersMiddleware(BaseHTTPMiddleware):
    """Attach CSP and security headers to every response of an ASGI app.

    Usage::

        app.add_middleware(
            SecureHeadersMiddleware,
            rules=[{"description": "youtube", "frame-src": "https://www.youtube.com"}],
            options={"is_dev": False},
        )

    Exceptions raised by the application are not caught here.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        rules: Iterable[CspRule | Mapping[str, Any]] | None = None,
        options: SecurityOptions | Mapping[str, Any] | None = None,
        nonce_generator: Callable[[], str] | None = None,
        additional_headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(app)
        self.security_headers = SecurityHeaders(rules, options, nonce_generator, additional_headers)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        context = RequestContext()
        self.security_headers.process_request(request, context)
        response = await call_next(request)
        return self.security_headers.process_response(response, context)


def get_csp_nonce(request: Request) -> str:
    """Return the CSP nonce generated for this request, or ''."""
    return getattr(request.state, NONCE_STATE_ATTR, "")
