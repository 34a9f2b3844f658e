"""
Catalogue Service — Exception Hierarchy
=========================================

What:  Domain error taxonomy shared by the service and transport layers.
How:   The repository surfaces raw SQLAlchemy/driver failures. The catalogue
       service classifies them into the classes below. Service middleware only
       observes them, and the global handlers in main.py are the single place
       that maps a class to an HTTP status and a user-facing message.

Exception Hierarchy:
    CatalogueError (base)
    ├── InvalidArgumentError  → 400 Bad Request (malformed pagination/order)
    ├── NotFoundError         → 404 Not Found
    ├── UnavailableError      → 503 Service Unavailable (store unreachable)
    └── InternalError         → 500 Internal Server Error (unclassified)
"""

from typing import Any, Dict, Optional


class CatalogueError(Exception):
    """
    Base exception for all catalogue errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned for 5xx)
    """

    error_code = "catalogue_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidArgumentError(CatalogueError):
    """
    Raised when a query cannot be executed as requested.

    When:    pageNum/pageSize below 1 or non-numeric, unrecognised order field.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "invalid_argument",
            "message": "pageNum must be a positive integer, got '0'",
            "status_code": 400,
            "details": {"field": "pageNum"}
        }
    """

    error_code = "invalid_argument"

    def __init__(
        self,
        message: str = "Invalid argument",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(CatalogueError):
    """
    Raised when a requested item does not exist.

    When:    GET /catalogue/{id} for an id absent from the store.
    HTTP:    404 Not Found
    """

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


class UnavailableError(CatalogueError):
    """
    Raised when the backing store cannot be reached.

    When:    Connection refused, pool checkout timeout, dropped connection.
    HTTP:    503 Service Unavailable
    """

    error_code = "unavailable"

    def __init__(
        self,
        message: str = "The catalogue store is temporarily unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InternalError(CatalogueError):
    """
    Raised for any failure the service cannot classify more precisely.

    HTTP:    500 Internal Server Error

    Security Note:
        The response message is always generic; the underlying exception type
        is kept in `context` for server-side logs only.
    """

    error_code = "internal_error"

    def __init__(
        self,
        message: str = "An internal error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
