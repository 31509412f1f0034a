"""Request context management using contextvars.

Async-safe storage for request-scoped data. RequestIDMiddleware sets the
request id; RequestIdFilter reads it into every log record.
"""

from contextvars import ContextVar, Token

_current_request_id: ContextVar[str | None] = ContextVar(
    "current_request_id", default=None
)


def set_request_id(request_id: str | None) -> Token[str | None]:
    """Set the request id for the current task; returns a token for reset."""
    return _current_request_id.set(request_id)


def reset_request_id(token: Token[str | None]) -> None:
    """Restore the request id that was current before set_request_id."""
    _current_request_id.reset(token)


def get_request_id() -> str | None:
    """Return the request id of the current request, if any."""
    return _current_request_id.get()
