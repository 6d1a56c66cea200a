"""
DB Time Service: Exception Hierarchy
======================================

What:  Application-specific exceptions.
How:   Each exception carries a message and an optional context dict.
       Handlers registered in main.py turn them into HTTP responses.
Who:   Raised by the database client; caught by the global handlers.

Exception Hierarchy:
    DBTimeError (base)
    └── DatabaseError   → 500 Internal Server Error

Connectivity, authentication and query failures all map to DatabaseError.
Callers cannot tell them apart and do not need to.
"""

from typing import Any, Dict, Optional


class DBTimeError(Exception):
    """
    Base exception for all DB Time Service errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged, never returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class DatabaseError(DBTimeError):
    """
    Raised when a database operation fails.

    What:    Acquiring a connection, authenticating, or running the query failed.
    When:    Host unreachable, DNS failure, bad credentials, SQL error, pool timeout.
    HTTP:    500 Internal Server Error

    The message is the description of the underlying error (see
    describe_error). Whether it reaches the client is decided by the
    EXPOSE_ERROR_DETAILS setting, not here.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


def describe_error(exc: BaseException) -> str:
    """
    Render an exception as "<TypeName>: <message>".

    SQLAlchemy wraps driver exceptions (DBAPIError.orig); the driver's own
    exception is described instead, without SQLAlchemy's background link.
    Falls back to the bare type name when the message is empty, so the
    result is never an empty string.
    """
    original = getattr(exc, "orig", None)
    if isinstance(original, BaseException):
        exc = original

    text = str(exc).strip()
    name = type(exc).__name__
    if not text:
        return name
    return f"{name}: {text}"
