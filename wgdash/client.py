"""Asynchronous HTTP client for a WGDashboard server."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ._http import build_headers, build_url, decode, handle_response, is_success
from .config import DEFAULT_TIMEOUT_SECONDS
from .constants import (
    AUTHENTICATE_ENDPOINT,
    DASHBOARD_CONFIGURATION_ENDPOINT,
    ERROR_NETWORK,
    HANDSHAKE_ENDPOINT,
    TOTP_ENABLED_ENDPOINT,
    WIREGUARD_CONFIGURATIONS_ENDPOINT,
)
from .exceptions import AuthError, NetworkError, WGDashboardError
from .models import (
    AuthResult,
    ConfigurationEntry,
    ConfigurationListEnvelope,
    Credentials,
    DataEnvelope,
    FlagEnvelope,
    ServerConfig,
    StatusEnvelope,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Target:
    """One client configuration. Replaced as a whole, never mutated."""

    base_url: str
    api_key: str | None = None

    def url_for(self, path: str) -> str:
        return build_url(self.base_url, path)


class AsyncWGDashboardClient:
    """Asynchronous client for the WGDashboard API.

    Example:
        >>> import asyncio
        >>> from wgdash import AsyncWGDashboardClient
        >>>
        >>> async def main():
        ...     async with AsyncWGDashboardClient() as client:
        ...         client.configure("http://192.168.2.43:10086")
        ...         if await client.handshake():
        ...             print(await client.fetch_server_config())
        >>>
        >>> asyncio.run(main())

    The client holds exactly one target (base URL plus optional API key) at a
    time. ``configure`` swaps it in one assignment and every request reads it
    once before dispatch, so a request never mixes two configurations.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Server base URL. May be left unset and supplied later
                through ``configure``.
            api_key: Value for the ``wg-dashboard-apikey`` header, if the
                server gates access with an API key.
            timeout: Transport timeout in seconds (default: 10).
            transport: Custom httpx transport, mainly for tests.
        """
        self._target: _Target | None = None
        self._handshake_target: _Target | None = None
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport, follow_redirects=True)
        if base_url is not None:
            self.configure(base_url, api_key)

    @property
    def base_url(self) -> str | None:
        return self._target.base_url if self._target else None

    @property
    def api_key(self) -> str | None:
        return self._target.api_key if self._target else None

    def configure(self, base_url: str, api_key: str | None = None) -> None:
        """Point the client at ``base_url``, sending ``api_key`` on every request.

        Passing no key clears the header. The last call wins.
        """
        self._target = _Target(base_url=base_url, api_key=api_key or None)
        logger.debug("Client configured for %s (api key: %s)", base_url, "set" if api_key else "none")

    def _current_target(self) -> _Target:
        target = self._target
        if target is None:
            raise RuntimeError("Client is not configured; call configure() first")
        return target

    async def _get(self, target: _Target, path: str) -> httpx.Response:
        url = target.url_for(path)
        logger.debug("GET %s", url)
        try:
            return await self._client.get(url, headers=build_headers(target.api_key))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkError(f"GET {path} failed: {e}") from e
        except Exception as e:
            # Socket-level errors httpx does not map, e.g. a port outside 0-65535
            raise NetworkError(f"GET {path} failed: {e!r}") from e

    async def _post(self, target: _Target, path: str, payload: dict[str, Any]) -> httpx.Response:
        url = target.url_for(path)
        logger.debug("POST %s", url)
        try:
            return await self._client.post(url, headers=build_headers(target.api_key), json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkError(f"POST {path} failed: {e}") from e
        except Exception as e:
            raise NetworkError(f"POST {path} failed: {e!r}") from e

    async def handshake(self) -> bool:
        """Probe the server for reachability.

        Returns:
            True for any 2xx response, whatever its body; False otherwise.

        Raises:
            NetworkError: On connection failure or timeout.
        """
        target = self._current_target()
        response = await self._get(target, HANDSHAKE_ENDPOINT)
        reachable = is_success(response)
        if reachable:
            self._handshake_target = target
        else:
            logger.debug("Handshake with %s returned HTTP %s", target.base_url, response.status_code)
        return reachable

    async def fetch_server_config(self) -> ServerConfig:
        """Fetch the dashboard settings, including the API-key gating flag.

        Raises:
            RuntimeError: If no successful handshake happened against the
                current configuration.
            NetworkError: On transport failure.
            AuthError: If the server rejects the API key.
            ParseError: If the envelope or the ``Server`` settings are missing
                or malformed (``ConfigError`` for the latter).
        """
        target = self._current_target()
        if self._handshake_target is not target:
            raise RuntimeError("fetch_server_config() requires a successful handshake() first")
        response = await self._get(target, DASHBOARD_CONFIGURATION_ENDPOINT)
        envelope = decode(DataEnvelope, handle_response(response))
        return ServerConfig.from_settings(envelope.data)

    async def is_otp_enabled(self) -> bool:
        """Ask whether sign-in needs a TOTP code. Any failure reads as False."""
        target = self._current_target()
        try:
            response = await self._get(target, TOTP_ENABLED_ENDPOINT)
            return decode(FlagEnvelope, handle_response(response)).data
        except WGDashboardError as e:
            logger.debug("Could not determine TOTP requirement, assuming none: %s", e)
            return False

    async def authenticate(self, credentials: Credentials) -> AuthResult:
        """Submit credentials. Transport or decode trouble reads as "Network error"."""
        target = self._current_target()
        try:
            response = await self._post(target, AUTHENTICATE_ENDPOINT, credentials.to_payload())
            envelope = decode(StatusEnvelope, handle_response(response))
        except AuthError as e:
            return AuthResult(success=False, message=str(e))
        except WGDashboardError as e:
            logger.debug("Authentication request failed: %s", e)
            return AuthResult(success=False, message=ERROR_NETWORK)
        return AuthResult(success=envelope.status, message=envelope.message)

    async def fetch_configurations(self) -> list[ConfigurationEntry] | None:
        """List WireGuard configurations.

        Returns:
            The decoded entries when the server reports ``status: true``,
            otherwise None. Transport and decode failures never raise.
        """
        target = self._current_target()
        try:
            response = await self._get(target, WIREGUARD_CONFIGURATIONS_ENDPOINT)
            envelope = decode(ConfigurationListEnvelope, handle_response(response))
        except WGDashboardError as e:
            logger.debug("Could not list configurations: %s", e)
            return None
        if not envelope.status or envelope.data is None:
            logger.debug("Configuration listing refused: %s", envelope.message)
            return None
        return envelope.data

    async def close(self) -> None:
        """Release the underlying HTTP client resources."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncWGDashboardClient:
        return self

    async def __aexit__(self, exc_type: type | None, exc: BaseException | None, traceback: Any) -> None:
        await self.close()
