"""Custom exception classes for the request helpers.

This module provides exception classes that carry appropriate HTTP
status codes and structured error information, so handlers can turn
any of them into an error response.
"""

from __future__ import annotations

from typing import Any
from typing import Optional


class AppError(Exception):
    """Base exception for helper errors.

    Each exception carries an HTTP status code and optional details.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code (default 500).
        detail: Optional additional context.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        detail: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response body."""
        result: dict[str, Any] = {"error": self.message}
        if self.detail:
            result["detail"] = self.detail
        return result


class ValidationError(AppError):
    """Raised when input validation fails.

    Use for malformed requests, invalid parameter values,
    or constraint violations in user input.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        detail = f"Field: {field}" if field else None
        super().__init__(message, status_code=400, detail=detail)
        self.field = field


class ParameterError(ValidationError):
    """Raised when a route or query parameter is malformed."""

    def __init__(self, message: str, key: str):
        super().__init__(message, field=key)
        self.key = key


class RequestBodyError(ValidationError):
    """Raised when a JSON request body cannot be decoded.

    The message is safe to return to the client as-is.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, field=field)


class BodyTooLargeError(RequestBodyError):
    """Raised when a request body exceeds the configured size limit."""

    def __init__(self, max_bytes: int):
        super().__init__(f"body must not be larger than {max_bytes} bytes")
        self.status_code = 413
        self.max_bytes = max_bytes


class SerializationError(AppError):
    """Raised when a response payload cannot be encoded as JSON."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message, status_code=500, detail=detail)


class ConfigurationError(AppError):
    """Raised when required configuration is missing.

    Use when environment variables or settings are not properly configured.
    """

    def __init__(self, config_name: str):
        super().__init__(
            f"Missing required configuration: {config_name}",
            status_code=500,
        )
        self.config_name = config_name
