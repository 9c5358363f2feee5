"""
Happy Thoughts API — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the different failure scenarios.
Why:   Services raise these instead of building responses; the global handlers
       registered in main.py turn each class into one HTTP status code and
       the `{success, response, message}` envelope.

Exception Hierarchy:
    HappyThoughtsError (base)
    ├── ValidationError            → 400 Bad Request
    ├── AuthenticationError        → 401 Unauthorized ({message, loggedOut})
    ├── InvalidCredentialsError    → 401 Unauthorized (wrong password)
    ├── NotFoundError              → 404 Not Found
    │   └── NoThoughtsFoundError   → 404 Not Found (empty listing, response=[])
    ├── ConflictError              → 409 Conflict
    ├── AuthenticationStoreError   → 500 ({message, error})
    └── DatabaseError              → 500 Internal Server Error

Ownership mismatches are raised as NotFoundError on purpose: a caller cannot
tell "does not exist" from "belongs to someone else".
"""

from typing import Any, Dict, Optional


class HappyThoughtsError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
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


class ValidationError(HappyThoughtsError):
    """
    Raised when client input fails validation.

    When:    Malformed id, message length out of range, missing field.
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


class AuthenticationError(HappyThoughtsError):
    """
    Raised when a request needs a caller and the bearer token is missing or
    does not belong to any user.

    HTTP:    401 with `{message, loggedOut: true}` so clients drop their token.
    """

    def __init__(
        self,
        message: str = "Authentication missing or invalid.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialsError(HappyThoughtsError):
    """Raised on login when the password does not match. HTTP 401."""

    def __init__(self, message: str = "Invalid password"):
        super().__init__(message=message)


class NotFoundError(HappyThoughtsError):
    """
    Raised when a requested resource does not exist (or is not visible to
    the caller).

    HTTP:    404 Not Found
    """

    def __init__(
        self,
        message: str = "The requested resource was not found",
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class NoThoughtsFoundError(NotFoundError):
    """
    Raised when a listing query returns an empty page.

    An empty page is reported as 404 with `response: []` rather than as an
    empty success; clients of the API rely on this.
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="No thoughts found on that query. Try another one.",
            resource="thought",
            context=context,
        )


class ConflictError(HappyThoughtsError):
    """
    Raised when a write would violate a uniqueness rule.

    When:    Duplicate user name, second like by the same user.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthenticationStoreError(HappyThoughtsError):
    """
    Raised when the token lookup itself fails (store unreachable, bad query).

    HTTP:    500 with `{message, error}`
    """

    def __init__(self, error: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Internal server error", context=context)
        self.error = error


class DatabaseError(HappyThoughtsError):
    """
    Raised when a store operation fails unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The response carries only the error type name. SQL text and driver
        messages are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
