# appia/core/errors.py
"""
Exception hierarchy for the Appia backend.

Every error raised on purpose by a route or service derives from AppiaError
and carries the HTTP status it maps to. The handlers registered in
appia.main turn them into ``{"error": ...}`` JSON bodies.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class AppiaError(Exception):
    """Base exception class for this application."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        body.update(self.details)
        return body


class RequestValidationError(AppiaError):
    """Raised when a request body or query is malformed."""

    status_code = 400


class AuthenticationError(AppiaError):
    """Raised when the caller cannot be identified."""

    status_code = 401


class AuthorizationError(AppiaError):
    """Raised when the caller does not own the resource it is touching."""

    status_code = 403


class NotFoundError(AppiaError):
    """Raised for a missing project, deployment or connection."""

    status_code = 404


class RateLimitError(AppiaError):
    status_code = 429


class UpstreamError(AppiaError):
    """Raised when the model or a deployment provider fails.

    ``upstream_detail`` holds the provider's own message. It is logged and
    only returned to the client in development.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        upstream_detail: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.upstream_detail = upstream_detail


class IntegrationNotConfiguredError(AppiaError):
    """Raised when an integration's credentials are missing from the settings."""

    status_code = 503
