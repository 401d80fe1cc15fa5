"""Security headers with per-request CSP nonces."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

import structlog
from starlette.requests import Request
from starlette.responses import Response

from csp_guard.config.loader import get_settings
from csp_guard.headers import generate_security_headers
from csp_guard.models.csp_rule import CspRule, SecurityOptions, coerce_rules
from csp_guard.nonce import generate_nonce

logger = structlog.get_logger()

# Request state attribute holding the nonce for templates
NONCE_STATE_ATTR = "csp_nonce"


@dataclass
class RequestContext:
    """Per-request state carried from the request hook to the response hook."""

    request_id: str = field(default_factory=lambda: uuid4().hex[:8])
    nonce: str = ""


def _default_nonce_generator() -> str:
    return generate_nonce(get_settings().nonce_bytes)


class SecurityHeaders:
    """Inject CSP and auxiliary security headers into a response.

    - Generates a fresh nonce per request and exposes it on
      ``request.state.csp_nonce`` and ``context.nonce``
    - Builds CSP from the baseline policy plus the configured rules
    """

    def __init__(
        self,
        rules: Iterable[CspRule | Mapping[str, Any]] | None = None,
        options: SecurityOptions | Mapping[str, Any] | None = None,
        nonce_generator: Callable[[], str] | None = None,
        additional_headers: Mapping[str, str] | None = None,
    ) -> None:
        self.rules = coerce_rules(rules)
        if options is None:
            options = SecurityOptions()
        elif not isinstance(options, SecurityOptions):
            options = SecurityOptions.model_validate(options)
        self.options = options
        self.nonce_generator = nonce_generator or _default_nonce_generator
        self.additional_headers = dict(additional_headers or {})

    def process_request(self, request: Request, context: RequestContext) -> None:
        context.nonce = self.nonce_generator()
        setattr(request.state, NONCE_STATE_ATTR, context.nonce)

    def process_response(self, response: Response, context: RequestContext) -> Response:
        """Write the headers; on failure log and return the response untouched."""
        try:
            return self._apply_headers(response, context)
        except Exception as exc:
            logger.error("security_headers_error", error=str(exc), request_id=context.request_id)
            return response

    def _apply_headers(self, response: Response, context: RequestContext) -> Response:
        options = self.options.model_copy(update={"nonce": context.nonce or self.options.nonce})
        headers = generate_security_headers(self.rules, options)
        headers.update(self.additional_headers)
        for header_name, header_value in headers.items():
            response.headers[header_name] = header_value
        return response
