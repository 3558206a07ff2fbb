"""
iNote Backend - Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for error scenarios that end a request.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers registered in main.py turn them into JSON error
       responses with the matching status code.
Who:   Raised by services and route parameter parsing; caught by the handlers.

Exception Hierarchy:
    INoteError (base)      → 500 Internal Server Error
    ├── ValidationError    → 400 Bad Request
    ├── ConflictError      → 409 Conflict
    └── DatabaseError      → 500 Internal Server Error

A missing entity is not an exception here. Services return a
`inote.result.NotFound` value and routes map it to an empty 404.
"""

from typing import Any, Dict, Optional


class INoteError(Exception):
    """
    Base exception for all iNote application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(INoteError):
    """
    Raised when client input fails a business-level check.

    When:    Unknown role name, unparseable date, inverted date range,
             note owner that does not exist.
    HTTP:    400 Bad Request

    Schema-level problems (missing fields, over-long strings) are rejected by
    FastAPI with 422 before reaching the services.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(INoteError):
    """
    Raised when a write would violate a uniqueness or reference constraint.

    When:    Duplicate username or email; deleting a user who still owns notes.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "The request conflicts with existing data",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(INoteError):
    """
    Raised when a database operation fails unexpectedly.

    HTTP:    500 Internal Server Error

    The client always receives a generic message; the original error type is
    kept in `context` and logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
