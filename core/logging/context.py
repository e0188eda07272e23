"""Per-thread request context read by the logging processors.

This is logging context only. Services always receive the owner explicitly
and never read it from here.
"""

import threading

_context = threading.local()
_KEYS = ("request_id", "owner_id")


def set_request_id(request_id: str) -> None:
    _context.request_id = request_id


def get_request_id() -> str | None:
    return getattr(_context, "request_id", None)


def set_owner_id(owner_id: str) -> None:
    """Bind the authenticated owner's ID to the current thread."""
    _context.owner_id = owner_id


def get_owner_id() -> str | None:
    return getattr(_context, "owner_id", None)


def clear_request_context() -> None:
    """Forget both IDs once a request or job is done with this thread."""
    for key in _KEYS:
        _context.__dict__.pop(key, None)
