"""
Menu Catalog Backend - Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a client-safe message and an optional context
       dict. Global exception handlers (registered in main.py) turn them into
       `{"error": message}` JSON responses with the matching HTTP status.
Who:   Raised by the image store, the repository and the menu service.

Exception Hierarchy:
    MenuCatalogError (base)
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── FileStorageError         → 500 Internal Server Error
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class MenuCatalogError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (returned in the API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MenuCatalogError):
    """
    Raised when client input fails validation.

    When:    Missing name/category, non-numeric or negative price,
             empty or oversized image upload, malformed path parameter.
    HTTP:    400 Bad Request

    Example response:
        {"error": "price must be a number"}
    """

    status_code = 400

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


class NotFoundError(MenuCatalogError):
    """
    Raised when a requested resource does not exist.

    When:    PUT/DELETE/GET /menu-items/{id} with an unknown id.
    HTTP:    404 Not Found

    The repository returns None for missing rows; the service layer converts
    that into this exception so routes never inspect None.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class FileStorageError(MenuCatalogError):
    """
    Raised when an image could not be written to the upload directory.

    When:    Disk full, permission denied, directory not writable.
    HTTP:    500 Internal Server Error

    Deletion failures never raise this; they are logged by the image store.
    """

    def __init__(
        self,
        message: str = "Failed to save uploaded image",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(MenuCatalogError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 Internal Server Error

    The message is a fixed per-operation string such as
    "Error creating menu item". Driver details go into context only.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
