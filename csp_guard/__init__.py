"""
csp-guard - Content-Security-Policy and security header generation
"""

__version__ = "0.1.0"

from csp_guard.csp.builder import build_csp_header
from csp_guard.headers import generate_security_headers
from csp_guard.middleware.asgi import SecureHeadersMiddleware, get_csp_nonce
from csp_guard.middleware.handler import create_secure_handler
from csp_guard.models.csp_rule import CspRule, SecurityOptions
from csp_guard.nonce import generate_nonce, validate_nonce

__all__ = [
    'CspRule',
    'SecureHeadersMiddleware',
    'SecurityOptions',
    'build_csp_header',
    'create_secure_handler',
    'generate_nonce',
    'generate_security_headers',
    'get_csp_nonce',
    'validate_nonce',
]
