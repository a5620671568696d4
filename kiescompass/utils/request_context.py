"""Request-scoped metadata shared by middleware, handlers, and log lines.

The HTTP middleware in :mod:`kiescompass.main` stamps every inbound call with
an identifier; exception handlers and structured error payloads read it back
through the helpers below.
"""

from __future__ import annotations

from contextvars import ContextVar, Token

__all__ = [
    "REQUEST_ID_CONTEXT",
    "clear_request_id",
    "get_request_id",
    "new_request_id",
    "set_request_id",
]

# Each request handler runs in its own task, so a ContextVar keeps the value
# isolated per request without any global mutable state.
REQUEST_ID_CONTEXT: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    """Return a fresh opaque request identifier."""

    import uuid

    return uuid.uuid4().hex


def set_request_id(request_id: str) -> Token[str]:
    """Store ``request_id`` for the active task and return the reset token."""

    return REQUEST_ID_CONTEXT.set(request_id)


def get_request_id() -> str:
    """Return the identifier of the current request, or ``""`` outside one."""

    return REQUEST_ID_CONTEXT.get()


def clear_request_id(token: Token[str] | None = None) -> None:
    """Restore the previous identifier (given a token) or blank it out."""

    if token is not None:
        REQUEST_ID_CONTEXT.reset(token)
    else:
        REQUEST_ID_CONTEXT.set("")
