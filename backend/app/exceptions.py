"""
Users Backend — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the error scenarios of the API.
Why:   Targeted error handling with the right HTTP status codes and messages
       that never leak internal details (SQL, driver errors) to the client.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) turn these into
       JSON error responses of the form {"error": message, "request_id": ...}.
Who:   Raised by the service layer and route helpers; caught by global handlers.

Exception Hierarchy:
    UsersAppError (base)
    ├── ValidationError   → 400 Bad Request
    └── DatabaseError     → 500 Internal Server Error

Request body parse failures are reported by FastAPI as RequestValidationError
and mapped to 400 in main.py as well.
"""

from typing import Any, Dict, Optional


class UsersAppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (returned in the "error" field)
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


class ValidationError(UsersAppError):
    """
    Raised when client input cannot be used as-is.

    When:    A path id is not an integer.
    HTTP:    400 Bad Request
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


class DatabaseError(UsersAppError):
    """
    Raised when a database statement fails.

    When:    Connection lost, constraint violation, timeout, missing table.
    HTTP:    500 Internal Server Error

    The message is operation-specific but generic ("Failed to fetch users");
    the underlying exception type goes into context for the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
