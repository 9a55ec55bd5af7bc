"""Shared response utilities for Lambda handlers."""

from __future__ import annotations

import os
from typing import Any
from typing import Mapping
from typing import Optional

from pydantic import BaseModel

from apihelpers.api.envelope import Envelope
from apihelpers.exceptions import AppError


def get_security_headers() -> dict[str, str]:
    """Get security headers for all responses.

    SECURITY: These headers protect against common web vulnerabilities:
    - X-Content-Type-Options: Prevents MIME type sniffing
    - X-Frame-Options: Prevents clickjacking
    - Cache-Control: Prevents caching of sensitive data

    Returns:
        Dictionary of security headers.
    """
    return {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Cache-Control": "no-store, no-cache, must-revalidate",
        "Pragma": "no-cache",
    }


def get_cors_headers(
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, str]:
    """Get CORS headers for the response.

    Allowed origins come from the comma-separated ``CORS_ALLOWED_ORIGINS``
    environment variable. Without it every origin is allowed.

    Args:
        event: The Lambda event containing the request origin header.

    Returns:
        Dictionary of CORS headers to include in the response.
    """
    allowed_origins = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",")
        if origin.strip()
    ]

    request_origin = None
    if event:
        headers = event.get("headers") or {}
        request_origin = headers.get("origin") or headers.get("Origin")

    if not allowed_origins:
        allow_origin = "*"
    elif request_origin and request_origin in allowed_origins:
        allow_origin = request_origin
    else:
        # Non-browser clients send no Origin; browsers enforce the mismatch.
        allow_origin = allowed_origins[0]

    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": "Content-Type,Authorization,X-Api-Key",
        "Access-Control-Allow-Methods": "GET,POST,PUT,PATCH,DELETE,OPTIONS",
    }


def json_response(
    status_code: int,
    body: Any,
    headers: Optional[dict[str, str]] = None,
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Create a JSON API Gateway response.

    Args:
        status_code: HTTP status code.
        body: An ``Envelope``, a mapping or a pydantic model.
        headers: Optional additional headers to include.
        event: Optional Lambda event for CORS origin detection.

    Returns:
        API Gateway response dictionary.

    Raises:
        SerializationError: If the body cannot be encoded.
    """
    response_headers = {"Content-Type": "application/json"}
    response_headers.update(get_security_headers())
    response_headers.update(get_cors_headers(event))
    if headers:
        response_headers.update(headers)

    return {
        "statusCode": status_code,
        "headers": response_headers,
        "body": _to_envelope(body).marshal().decode("utf-8"),
    }


def _to_envelope(body: Any) -> Envelope:
    if isinstance(body, Envelope):
        return body
    if isinstance(body, BaseModel):
        return Envelope(body.model_dump(mode="json"))
    if isinstance(body, Mapping):
        return Envelope(body)
    raise TypeError(f"response body must be a mapping, got {type(body).__name__}")


def error_response(
    status_code: int,
    message: str,
    detail: Optional[str] = None,
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Create an error response.

    Args:
        status_code: HTTP status code.
        message: Error message.
        detail: Optional additional detail.
        event: Optional Lambda event for CORS origin detection.

    Returns:
        API Gateway response dictionary.
    """
    body = Envelope(error=message)
    if detail:
        body["detail"] = detail
    return json_response(status_code, body, event=event)


def app_error_response(
    error: AppError,
    event: Optional[Mapping[str, Any]] = None,
) -> dict[str, Any]:
    """Render an ``AppError`` as an error response."""
    return json_response(error.status_code, Envelope(error.to_dict()), event=event)
