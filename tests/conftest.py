"""Test configuration for wgdash tests."""

from __future__ import annotations

import asyncio
import json
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from wgdash.exceptions import NetworkError
from wgdash.models import AuthResult, ServerConfig
from wgdash.session import SessionStore


def make_response(status_code: int = 200, payload: Any = None, text: str | None = None) -> MagicMock:
    """Build a mocked httpx.Response carrying ``payload`` as its JSON body."""
    response = MagicMock(spec=httpx.Response)
    response.status_code = status_code
    if text is not None:
        response.text = text
        response.content = text.encode()
        response.json.side_effect = json.JSONDecodeError("Expecting value", text, 0)
    elif payload is None:
        response.text = ""
        response.content = b""
    else:
        body = json.dumps(payload)
        response.text = body
        response.content = body.encode()
        response.json.return_value = payload
    return response


def server_config(api_key_required: bool = False) -> ServerConfig:
    return ServerConfig.from_settings(
        {"Server": {"dashboard_api_key": "true" if api_key_required else "false"}, "Peers": {}}
    )


@pytest.fixture(autouse=True)
def _isolated_config_dir(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.wgdash."""
    monkeypatch.setenv("WGDASH_CONFIG_DIR", str(tmp_path / ".wgdash"))


@pytest.fixture
def store(tmp_path):
    return SessionStore(tmp_path / ".wgdash" / "session.json")


class FakeClient:
    """In-memory stand-in for AsyncWGDashboardClient that records every call."""

    def __init__(
        self,
        *,
        reachable: bool = True,
        handshake_error: Exception | None = None,
        config: ServerConfig | None = None,
        config_error: Exception | None = None,
        otp_enabled: bool = False,
        auth_results: list[AuthResult] | None = None,
        configurations: list[Any] | None = None,
        handshake_gates: dict[str, asyncio.Event] | None = None,
        config_gates: dict[str, asyncio.Event] | None = None,
        config_errors: dict[str, Exception] | None = None,
    ) -> None:
        self.reachable = reachable
        self.handshake_error = handshake_error
        self.config = config or server_config()
        self.config_error = config_error
        self.otp_enabled = otp_enabled
        self.auth_results = list(auth_results or [])
        self.configurations = configurations
        self.handshake_gates = handshake_gates or {}
        self.config_gates = config_gates or {}
        self.config_errors = config_errors or {}
        self.base_url: str | None = None
        self.api_key: str | None = None
        self.calls: list[tuple[Any, ...]] = []
        self.submitted: list[Any] = []

    def configure(self, base_url: str, api_key: str | None = None) -> None:
        self.calls.append(("configure", base_url, api_key))
        self.base_url = base_url
        self.api_key = api_key

    async def handshake(self) -> bool:
        base_url = self.base_url
        self.calls.append(("handshake", base_url, self.api_key))
        gate = self.handshake_gates.get(base_url)
        if gate is not None:
            await gate.wait()
        if self.handshake_error is not None:
            raise self.handshake_error
        return self.reachable

    async def fetch_server_config(self) -> ServerConfig:
        base_url = self.base_url
        self.calls.append(("fetch_server_config", base_url, self.api_key))
        gate = self.config_gates.get(base_url)
        if gate is not None:
            await gate.wait()
        error = self.config_errors.get(base_url, self.config_error)
        if error is not None:
            raise error
        return self.config

    async def is_otp_enabled(self) -> bool:
        self.calls.append(("is_otp_enabled", self.base_url, self.api_key))
        return self.otp_enabled

    async def authenticate(self, credentials) -> AuthResult:
        self.calls.append(("authenticate", self.base_url, self.api_key))
        self.submitted.append(credentials)
        if not self.auth_results:
            return AuthResult(success=False, message="Network error")
        return self.auth_results.pop(0)

    async def fetch_configurations(self):
        self.calls.append(("fetch_configurations", self.base_url, self.api_key))
        return self.configurations

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    async def close(self) -> None:
        pass

    async def __aenter__(self) -> FakeClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


@pytest.fixture
def unreachable_client():
    return FakeClient(handshake_error=NetworkError("Connection refused"))
