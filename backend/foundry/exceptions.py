"""
Foundry — Custom Exception Hierarchy
=====================================

What:  Application-specific exceptions for the error scenarios the API,
       worker and CLI can recover from.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) turn them into
       structured JSON error responses with the right HTTP status code.
Who:   Raised by services, guards and integrations; caught by global handlers
       or by the CLI.

Exception Hierarchy:
    FoundryError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── PermissionDeniedError    → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── QueueError               → 503 Service Unavailable
    ├── FrontendAssetError       → 500 Internal Server Error
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class FoundryError(Exception):
    """
    Base exception for all Foundry application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; only some handlers return it)
    """

    status_code: int = 500
    error_code: str = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(FoundryError):
    """
    Raised when client input breaks a business rule.

    Schema-level validation (types, lengths) is handled by FastAPI and keeps
    its 422 response; this is for rules only a service can check
    (e.g. "the team owner cannot be removed").
    """

    status_code = 400
    error_code = "validation_error"

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


class AuthenticationError(FoundryError):
    """
    Raised when the caller cannot be identified.

    When: missing/expired/forged token, unknown or inactive user, bad
    credentials at login.
    HTTP: 401 with `WWW-Authenticate: Bearer`.
    """

    status_code = 401
    error_code = "not_authorized"

    def __init__(
        self,
        message: str = "Could not validate credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(FoundryError):
    """Raised by guards when an authenticated user lacks the required privilege."""

    status_code = 403
    error_code = "permission_denied"

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(FoundryError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that None into
    NotFoundError so routes stay free of existence checks.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(FoundryError):
    """Raised when a write would violate a uniqueness or ownership rule (duplicate email, team owner)."""

    status_code = 409
    error_code = "conflict"

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class QueueError(FoundryError):
    """
    Raised when a job cannot be handed to the background queue.

    When: Redis unreachable, connection reset mid-enqueue.
    HTTP: 503 — the request can be retried once the queue is back.
    """

    status_code = 503
    error_code = "queue_unavailable"

    def __init__(
        self,
        message: str = "The background job queue is temporarily unavailable",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FrontendAssetError(FoundryError):
    """Raised when the built Vite manifest or an entry point in it is missing."""

    status_code = 500
    error_code = "frontend_assets_missing"

    def __init__(
        self,
        message: str = "Frontend assets have not been built",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(FoundryError):
    """
    Raised when database operations fail unexpectedly.

    Security Note:
        The message returned to the client is always generic. Details
        (statement, constraint name) are logged server-side only.
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
