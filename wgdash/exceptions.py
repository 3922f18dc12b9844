"""Custom exceptions raised by the wgdash client."""

from __future__ import annotations

from typing import Any, Optional


class WGDashboardError(Exception):
    """Base exception for all wgdash specific failures."""


class NetworkError(WGDashboardError):
    """Raised on transport failures: refused connections, timeouts, bad URLs."""


class ParseError(WGDashboardError):
    """Raised when a response arrives but its envelope is missing or malformed."""


class ConfigError(ParseError):
    """Raised when the dashboard configuration lacks its security settings."""


class ValidationError(WGDashboardError):
    """Raised when user input cannot be turned into a server address."""


class AuthError(WGDashboardError):
    """Raised when the server rejects the API key or the credentials."""


class APIError(WGDashboardError):
    """Raised when the server answers with a non-successful HTTP status."""

    def __init__(self, message: str, status_code: int, response: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response

    def __str__(self) -> str:  # pragma: no cover - repr helper
        return f"{self.status_code}: {self.message}"
