"""Security headers middleware.

Adds security-related response headers suited to a JSON API. Responses under
the API prefix also get Cache-Control: no-store, since they carry agency and
personal data (exports, invoices) that must not sit in shared caches.
Uses raw ASGI (no BaseHTTPMiddleware) for production-safe streaming.
"""

from typing import Callable

DEFAULT_HEADERS = {
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}
NO_STORE = (b"cache-control", b"no-store")


def SecurityHeadersMiddleware(
    app: Callable,
    headers: dict[str, str] | None = None,
    no_store_prefix: str = "/api/",
) -> Callable:
    """Set security headers on all responses; no-store on API paths. Raw ASGI."""
    resolved = headers if headers is not None else DEFAULT_HEADERS.copy()
    header_list = [(k.lower().encode(), v.encode()) for k, v in resolved.items()]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        extra = list(header_list)
        if scope.get("path", "").startswith(no_store_prefix):
            extra.append(NO_STORE)

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                seen = {h[0].lower() for h in headers}
                for name_b, value_b in extra:
                    if name_b not in seen:
                        headers.append((name_b, value_b))
                        seen.add(name_b)
                message["headers"] = headers
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
