"""Request ID middleware.

Forwards a safe client X-Request-ID or generates one, exposes it to log
records through app.shared.context, and echoes it on the response.
Raw ASGI so streaming responses are untouched.
"""

import re
import uuid
from typing import Callable

from app.shared.context import reset_request_id, set_request_id

# Alphanumeric, hyphen, underscore only; keeps log lines single-line.
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def resolve_request_id(raw: str | None) -> str:
    """Return raw when it is a safe id, otherwise a fresh uuid4 hex."""
    if raw:
        candidate = raw.strip()
        if _VALID_REQUEST_ID.match(candidate):
            return candidate
    return uuid.uuid4().hex


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Bind a request id for the duration of each HTTP request. Raw ASGI."""
    header_key = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        incoming = next(
            (
                v.decode("latin-1")
                for k, v in scope.get("headers", [])
                if k.lower() == header_key
            ),
            None,
        )
        request_id = resolve_request_id(incoming)
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (header_key, request_id.encode()),
                ]
            await send(message)

        token = set_request_id(request_id)
        try:
            await app(scope, receive, send_with_id)
        finally:
            reset_request_id(token)

    return asgi_app
