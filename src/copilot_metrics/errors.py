"""Custom exception types for the Copilot metrics proxy.

Every error carries the HTTP status and JSON body the HTTP surface answers
with, so the server maps the whole hierarchy through one exception handler.
"""

from __future__ import annotations

from typing import Any, Dict


class MetricsProxyError(Exception):
    """Base exception for all recoverable Copilot metrics proxy errors."""

    status_code = 500

    def payload(self) -> Dict[str, Any]:
        """Return the JSON body reported to HTTP callers."""
        return {"error": str(self)}


class ConfigurationError(MetricsProxyError):
    """Raised when runtime configuration values are missing or invalid."""

    status_code = 400


class ValidationError(ConfigurationError):
    """Raised when a submitted credential is missing a token or organization."""

    def payload(self) -> Dict[str, Any]:
        return {"success": False, "message": str(self)}


class AuthenticationError(MetricsProxyError):
    """Raised when GitHub credentials are unavailable."""

    status_code = 401


class NotConfiguredError(AuthenticationError):
    """Raised when metrics are requested before a credential has been stored."""


class ApiError(MetricsProxyError):
    """Raised when a GitHub API request fails or returns an unexpected response."""

    status_code = 502


class UpstreamError(ApiError):
    """Raised when GitHub answers with a non-2xx status.

    The status and body are passed through to the caller uninterpreted.
    """

    def __init__(self, status: int, body: str) -> None:
        super().__init__("Failed to fetch metrics from GitHub API.")
        self.status = status
        self.body = body
        self.status_code = status

    def payload(self) -> Dict[str, Any]:
        return {"error": str(self), "details": self.body}


class UpstreamTimeoutError(ApiError):
    """Raised when the GitHub API does not answer within the configured timeout."""

    status_code = 504


class NetworkError(ApiError):
    """Raised on DNS, connection or other transport failures talking to GitHub."""


class InvalidResponseError(ApiError):
    """Raised when GitHub answers 2xx with a body that is not valid JSON."""
