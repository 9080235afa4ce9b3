"""
Utility functions for handling API responses and errors.

This module provides the exception types raised by the data layer and
helpers that turn them into consistent JSON error bodies.
"""
import logging
from typing import Any, Dict, Optional, Union

from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Configure logging
logger = logging.getLogger(__name__)

class APIError(Exception):
    """Base exception for API errors."""
    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        message: str = "An error occurred",
        error_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.message = message
        self.error_type = error_type or "api_error"
        self.details = details or {}
        super().__init__(message)

class DatabaseError(APIError):
    """Raised by query functions when the underlying statement fails.

    Only the fixed message reaches the client; the driver error is kept
    as ``__cause__`` and logged where it was caught.
    """
    def __init__(self, message: str = "Database error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=message,
            error_type="database_error"
        )

class NotFoundError(APIError):
    """Exception for not found errors."""
    def __init__(
        self,
        resource: str = "resource",
        id: Optional[Union[str, int]] = None
    ):
        message = f"{resource} not found"
        if id is not None:
            message = f"{resource} with id '{id}' not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message=message,
            error_type="not_found",
            details={"resource": resource, "id": id}
        )

def create_error_response(
    message: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    error_type: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> JSONResponse:
    """Create a standardized error response.

    Args:
        message: Error message.
        status_code: HTTP status code.
        error_type: Type of error (e.g., 'database_error', 'not_found').
        details: Additional error details.

    Returns:
        A FastAPI JSONResponse with the error details.
    """
    error_data = {
        "status": "error",
        "error": {
            "code": status_code,
            "message": message,
            "type": error_type or "api_error"
        }
    }

    if details:
        error_data["error"]["details"] = details

    return JSONResponse(
        status_code=status_code,
        content=error_data
    )

def handle_exception(exception: Exception) -> JSONResponse:
    """Handle an exception and return an appropriate API response.

    Args:
        exception: The exception to handle.

    Returns:
        A FastAPI JSONResponse with the error details.
    """
    # Handle our custom API errors
    if isinstance(exception, APIError):
        if exception.status_code >= 500:
            logger.error(f"API error: {exception.message}")
        return create_error_response(
            message=exception.message,
            status_code=exception.status_code,
            error_type=exception.error_type,
            details=exception.details
        )

    # Handle request validation errors
    if isinstance(exception, RequestValidationError):
        errors = [{"field": ".".join(str(loc) for loc in e["loc"]), "msg": e["msg"]}
                  for e in exception.errors()]
        return create_error_response(
            message="Validation error",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_type="validation_error",
            details={"errors": errors}
        )

    # Handle other HTTP errors (unknown routes, bad methods)
    if isinstance(exception, StarletteHTTPException):
        return create_error_response(
            message=str(exception.detail),
            status_code=exception.status_code
        )

    # Handle generic exceptions
    logger.error(f"Unhandled exception: {str(exception)}", exc_info=exception)
    return create_error_response(
        message="An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_type="server_error"
    )
