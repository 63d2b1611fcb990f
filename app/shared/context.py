"""Request-scoped context using contextvars.

Holds the request id and the authenticated uid for the current request so
log records can carry them without threading values through every call.

Usage:
    set_request_id("abc123")
    set_current_uid("uid-1")
    get_request_id()
"""

from contextvars import ContextVar

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_current_uid: ContextVar[str | None] = ContextVar("current_uid", default=None)


def set_request_id(request_id: str | None) -> None:
    """Set the request id for the current async task."""
    _request_id.set(request_id)


def get_request_id() -> str | None:
    return _request_id.get()


def set_current_uid(uid: str | None) -> None:
    """Set the authenticated uid after bearer verification."""
    _current_uid.set(uid)


def get_current_uid() -> str | None:
    return _current_uid.get()

