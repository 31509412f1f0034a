"""Security headers middleware.

Adds baseline security response headers, and marks auth responses (access
tokens, verification results) as non-cacheable. Raw ASGI.
"""

from typing import Callable

BASE_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}
NO_STORE_PREFIXES = ("/api/v1/auth",)


def SecurityHeadersMiddleware(
    app: Callable,
    headers: dict[str, str] | None = None,
    no_store_prefixes: tuple[str, ...] = NO_STORE_PREFIXES,
) -> Callable:
    """Set security headers on responses without overriding ones the route set. Raw ASGI."""
    base = [(k.lower().encode(), v.encode()) for k, v in (headers or BASE_HEADERS).items()]
    no_store = [(b"cache-control", b"no-store"), (b"pragma", b"no-cache")]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        extra = base + (no_store if scope["path"].startswith(no_store_prefixes) else [])

        async def send_with_headers(message: dict) -> None:
            if message["type"] == "http.response.start":
                current = list(message.get("headers", []))
                present = {name.lower() for name, _ in current}
                current.extend(h for h in extra if h[0] not in present)
                message["headers"] = current
            await send(message)

        await app(scope, receive, send_with_headers)

    return asgi_app
