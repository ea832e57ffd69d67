"""
Travel Journal Backend — Custom Exception Hierarchy
=====================================================

What:  Application-specific exceptions for each failure class the API reports.
Why:   Services raise domain errors without knowing about HTTP; the global
       handlers in main.py translate them into status codes and envelopes.
How:   Each exception carries a user-safe message and an optional context dict
       that is logged but never returned to the client.

Exception Hierarchy:
    TravelJournalError (base)
    ├── ValidationError   → 400 Bad Request (missing/malformed input)
    ├── AuthError         → 401 Unauthorized (bad token or bad credentials)
    ├── NotFoundError     → 404 Not Found (absent, or owned by someone else)
    ├── ConflictError     → 400 Bad Request (duplicate registration)
    └── ServerError       → 500 Internal Server Error
        ├── FileStorageError
        └── DatabaseError
"""

from typing import Any, Dict, Optional


class TravelJournalError(Exception):
    """
    Base exception for all application errors.

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


class ValidationError(TravelJournalError):
    """
    Raised when client input fails validation.

    When:    Missing required fields, unparseable timestamps, empty uploads,
             unsupported image types.
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


class AuthError(TravelJournalError):
    """
    Raised when the caller cannot be authenticated.

    When:    Token missing, malformed, expired, or wrongly signed; or a login
             attempt with a password that does not match the stored hash.
    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(TravelJournalError):
    """
    Raised when a requested resource does not exist for this caller.

    An entry that exists but belongs to another owner raises this same error,
    so callers cannot probe for other users' entry ids.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(TravelJournalError):
    """
    Raised when creating something that must be unique and already exists.

    When:    Registration with an email that is already taken.
    HTTP:    400 Bad Request (the client can fix it by choosing another email)
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ServerError(TravelJournalError):
    """
    A failure on our side that the client cannot fix by changing the request.

    Also raised directly for malformed date-filter bounds, which are not
    validated up front.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "An internal error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(ServerError):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, directory not writable, I/O error.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(ServerError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; SQL and driver
    details only go to the server log.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
