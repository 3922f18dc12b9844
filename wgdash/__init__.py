"""wgdash - connection and sign-in client for WGDashboard servers."""

from importlib.metadata import PackageNotFoundError, version

from .auth_flow import AuthFlow, AuthState
from .client import AsyncWGDashboardClient
from .exceptions import (
    APIError,
    AuthError,
    ConfigError,
    NetworkError,
    ParseError,
    ValidationError,
    WGDashboardError,
)
from .models import AuthResult, ConfigurationEntry, Credentials, ServerConfig
from .router import AppStateRouter, Screen, route
from .session import Session, SessionStore
from .validator import (
    ApiKeyRequired,
    ConnectionValidator,
    Invalid,
    Unreachable,
    Valid,
    ValidationOutcome,
    ValidationState,
)

__all__ = [
    "AsyncWGDashboardClient",
    "ConnectionValidator",
    "ValidationState",
    "ValidationOutcome",
    "Unreachable",
    "ApiKeyRequired",
    "Valid",
    "Invalid",
    "AuthFlow",
    "AuthState",
    "AppStateRouter",
    "Screen",
    "route",
    "Session",
    "SessionStore",
    "ServerConfig",
    "ConfigurationEntry",
    "Credentials",
    "AuthResult",
    "WGDashboardError",
    "NetworkError",
    "ParseError",
    "ConfigError",
    "ValidationError",
    "AuthError",
    "APIError",
]

try:
    __version__ = version("wgdash")
except PackageNotFoundError:
    __version__ = "0.1.0"
