"""Endpoint paths and user-facing messages for wgdash."""

from __future__ import annotations

# WGDashboard API endpoints, relative to the server base URL
HANDSHAKE_ENDPOINT = "api/handshake"
TOTP_ENABLED_ENDPOINT = "api/isTotpEnabled"
DASHBOARD_CONFIGURATION_ENDPOINT = "api/getDashboardConfiguration"
AUTHENTICATE_ENDPOINT = "api/authenticate"
WIREGUARD_CONFIGURATIONS_ENDPOINT = "api/getWireguardConfigurations"

# Session storage
SESSION_FILE = "session.json"
SERVER_ADDRESS_KEY = "server_address"
API_KEY_KEY = "api_key"

# Error messages
ERROR_INVALID_ADDRESS = "Invalid server address"
ERROR_SERVER_UNREACHABLE = "Server unreachable"
ERROR_CONFIG_FAILED = "Config failed"
ERROR_API_KEY_REJECTED = "API key rejected"
ERROR_API_KEY_REQUIRED = "API key required"
ERROR_SAVE_FAILED = "Could not save session"
ERROR_SUPERSEDED = "Superseded by a newer attempt"
ERROR_NETWORK = "Network error"
ERROR_AUTH_FAILED = "Authentication failed"
ERROR_NO_SERVER = "No server configured. Run 'wgdash connect <address>' first."
