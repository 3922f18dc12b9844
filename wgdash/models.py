"""Typed payloads exchanged with a WGDashboard server.

Response envelopes are decoded with pydantic so that a missing or wrongly
shaped field becomes a ``ParseError`` instead of a silent ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ConfigError

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})
_FALSE_STRINGS = frozenset({"false", "0", "no", "off", ""})


class DataEnvelope(BaseModel):
    """``{"data": {...}}`` as returned by the dashboard configuration endpoint."""

    data: dict[str, Any]


class FlagEnvelope(BaseModel):
    """``{"data": bool}`` as returned by ``api/isTotpEnabled``."""

    data: bool


class StatusEnvelope(BaseModel):
    """``{"status": bool, "message": str | null, "data": ...}``."""

    status: bool
    message: str | None = None
    data: Any = None


class DataUsage(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    total: float = Field(0.0, alias="Total")
    sent: float = Field(0.0, alias="Sent")
    receive: float = Field(0.0, alias="Receive")


class ConfigurationEntry(BaseModel):
    """One WireGuard configuration from ``api/getWireguardConfigurations``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(..., alias="Name")
    status: bool = Field(False, alias="Status")
    public_key: str = Field("", alias="PublicKey")
    private_key: str = Field("", alias="PrivateKey", repr=False)
    listen_port: int | str = Field("", alias="ListenPort")
    address: str = Field("", alias="Address")
    connected_peers: int = Field(0, alias="ConnectedPeers")
    total_peers: int = Field(0, alias="TotalPeers")
    data_usage: DataUsage = Field(default_factory=DataUsage, alias="DataUsage")
    protocol: str = Field("wg", alias="Protocol")
    save_config: bool = Field(False, alias="SaveConfig")
    pre_up: str = Field("", alias="PreUp")
    pre_down: str = Field("", alias="PreDown")
    post_up: str = Field("", alias="PostUp")
    post_down: str = Field("", alias="PostDown")
    table: str = Field("", alias="Table")


class ConfigurationListEnvelope(StatusEnvelope):
    data: list[ConfigurationEntry] | None = None


def parse_flag(value: Any) -> bool:
    """Read a dashboard boolean stored either as JSON bool or as ``"true"``/``"false"``."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ConfigError(f"Unrecognized boolean setting: {value!r}")


class ServerConfig(BaseModel):
    """Server-reported dashboard settings.

    ``api_key_required`` is lifted out of ``Server.dashboard_api_key``; the
    rest of the tree is kept as-is in ``settings``.
    """

    api_key_required: bool
    settings: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> ServerConfig:
        """Build a ServerConfig from the decoded ``data`` tree.

        Raises:
            ConfigError: If the ``Server`` section or its ``dashboard_api_key``
                entry is missing or unreadable.
        """
        server = settings.get("Server")
        if not isinstance(server, dict):
            raise ConfigError("Dashboard configuration has no 'Server' section")
        if "dashboard_api_key" not in server:
            raise ConfigError("Dashboard configuration has no 'dashboard_api_key' setting")
        return cls(api_key_required=parse_flag(server["dashboard_api_key"]), settings=settings)

    def section(self, name: str) -> dict[str, Any]:
        value = self.settings.get(name)
        return value if isinstance(value, dict) else {}


@dataclass
class Credentials:
    """Sign-in form values. Only ever held for the duration of one request."""

    username: str
    password: str = field(repr=False)
    otp: str | None = field(default=None, repr=False)

    def to_payload(self) -> dict[str, str]:
        return {
            "username": self.username,
            "password": self.password,
            "totp": self.otp or "",
        }


@dataclass
class AuthResult:
    """Result of a sign-in attempt."""

    success: bool
    message: str | None = None
