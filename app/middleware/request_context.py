"""Request and correlation IDs.

Forwards or generates X-Request-ID and X-Correlation-ID, stores both on the
request state and echoes them on the response. Client-provided values are
sanitized (length + character set) to prevent log injection. The correlation
ID falls back to the request ID so a single call is traceable end to end.
Uses raw ASGI (no BaseHTTPMiddleware) for production-safe streaming.
"""

import re
import uuid
from typing import Callable

ID_MAX_LENGTH = 64
_ID_ALLOWED_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1," + str(ID_MAX_LENGTH) + r"}$")


def _get_header(scope: dict, name: str) -> str | None:
    """Return first header value for name (case-insensitive). Headers are (bytes, bytes)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


def sanitize_id(raw: str | None) -> str | None:
    """Return the stripped value if it is a safe identifier, else None."""
    if raw is None:
        return None
    value = raw.strip()
    return value if _ID_ALLOWED_PATTERN.fullmatch(value) else None


def RequestContextMiddleware(
    app: Callable,
    request_id_header: str = "X-Request-ID",
    correlation_id_header: str = "X-Correlation-ID",
) -> Callable:
    """Set request_id and correlation_id on scope state and response headers. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_id(_get_header(scope, request_id_header)) or str(uuid.uuid4())
        correlation_id = sanitize_id(_get_header(scope, correlation_id_header)) or request_id
        state = scope.setdefault("state", {})
        state["request_id"] = request_id
        state["correlation_id"] = correlation_id

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((request_id_header.encode(), request_id.encode()))
                headers.append((correlation_id_header.encode(), correlation_id.encode()))
                message["headers"] = headers
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
