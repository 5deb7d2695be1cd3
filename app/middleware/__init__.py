"""HTTP middleware: request/correlation IDs and security headers.

Applied in main app; order matters (first added = outermost).
Import and use from app.main.
"""

from app.middleware.request_context import RequestContextMiddleware
from app.middleware.security_headers import SecurityHeadersMiddleware

__all__ = ["RequestContextMiddleware", "SecurityHeadersMiddleware"]
