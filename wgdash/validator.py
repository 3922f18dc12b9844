"""Server address validation: reachability probe followed by a settings fetch."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Union

from .config import normalize_server_address
from .constants import (
    ERROR_API_KEY_REJECTED,
    ERROR_CONFIG_FAILED,
    ERROR_INVALID_ADDRESS,
    ERROR_SAVE_FAILED,
    ERROR_SERVER_UNREACHABLE,
    ERROR_SUPERSEDED,
)
from .exceptions import AuthError, ValidationError, WGDashboardError
from .models import ServerConfig
from .session import Session, SessionStore

if TYPE_CHECKING:
    from .client import AsyncWGDashboardClient

logger = logging.getLogger(__name__)


class ValidationState(Enum):
    UNVALIDATED = "unvalidated"
    VALIDATING = "validating"
    API_KEY_REQUIRED = "api_key_required"
    VALID = "valid"
    FAILED = "failed"


@dataclass(frozen=True)
class Unreachable:
    reason: str = ERROR_SERVER_UNREACHABLE


@dataclass(frozen=True)
class ApiKeyRequired:
    server_address: str


@dataclass(frozen=True)
class Valid:
    server_address: str
    config: ServerConfig


@dataclass(frozen=True)
class Invalid:
    reason: str


ValidationOutcome = Union[Unreachable, ApiKeyRequired, Valid, Invalid]


class ConnectionValidator:
    """Decides whether a user-entered server address is usable.

    Only the most recent ``validate`` call may change state or the session
    store. Each call takes a new attempt number; an older call that finds it
    has been overtaken stops before its next request and returns
    ``Invalid(ERROR_SUPERSEDED)``.
    """

    def __init__(self, client: AsyncWGDashboardClient, store: SessionStore) -> None:
        self._client = client
        self._store = store
        self._attempt = 0
        self.state = ValidationState.UNVALIDATED
        self.error: str | None = None

    @property
    def attempt(self) -> int:
        return self._attempt

    def _is_current(self, attempt: int) -> bool:
        return attempt == self._attempt

    def _fail(self, attempt: int, outcome: ValidationOutcome, message: str) -> ValidationOutcome:
        if not self._is_current(attempt):
            return Invalid(ERROR_SUPERSEDED)
        self.state = ValidationState.FAILED
        self.error = message
        logger.info("Validation failed: %s", message)
        return outcome

    async def validate(self, address: str, api_key: str | None = None) -> ValidationOutcome:
        """Validate ``address`` and, on success, record it in the session store.

        Args:
            address: Server address as typed by the user, with or without a scheme.
            api_key: API key entered by the user, once the server asked for one.

        Returns:
            ``Unreachable`` if the handshake fails, ``Invalid`` if the input or
            the server settings are unusable, ``ApiKeyRequired`` if the server
            gates access with a key and none was given, ``Valid`` otherwise.
        """
        self._attempt += 1
        attempt = self._attempt
        self.state = ValidationState.VALIDATING
        self.error = None
        api_key = (api_key or "").strip() or None

        try:
            server_address = normalize_server_address(address)
        except ValidationError as e:
            logger.debug("Rejected server address %r: %s", address, e)
            return self._fail(attempt, Invalid(ERROR_INVALID_ADDRESS), ERROR_INVALID_ADDRESS)

        self._client.configure(server_address, api_key)
        try:
            reachable = await self._client.handshake()
        except WGDashboardError as e:
            logger.debug("Handshake with %s failed: %s", server_address, e)
            reachable = False
        if not self._is_current(attempt):
            return Invalid(ERROR_SUPERSEDED)
        if not reachable:
            return self._fail(attempt, Unreachable(), ERROR_SERVER_UNREACHABLE)

        try:
            config = await self._client.fetch_server_config()
        except AuthError as e:
            logger.debug("Server %s rejected the API key: %s", server_address, e)
            return self._fail(attempt, Invalid(ERROR_API_KEY_REJECTED), ERROR_API_KEY_REJECTED)
        except WGDashboardError as e:
            logger.debug("Fetching settings from %s failed: %s", server_address, e)
            return self._fail(attempt, Invalid(ERROR_CONFIG_FAILED), ERROR_CONFIG_FAILED)
        if not self._is_current(attempt):
            return Invalid(ERROR_SUPERSEDED)

        if config.api_key_required and api_key is None:
            self.state = ValidationState.API_KEY_REQUIRED
            logger.info("Server %s requires an API key", server_address)
            return ApiKeyRequired(server_address=server_address)

        session = Session(server_address=server_address, api_key=api_key if config.api_key_required else None)
        try:
            self._store.save(session)
        except OSError as e:
            logger.warning("Could not save session to %s: %s", self._store.path, e)
            return self._fail(attempt, Invalid(ERROR_SAVE_FAILED), ERROR_SAVE_FAILED)
        self._store.set_server(session.server_address, session.api_key)
        self.state = ValidationState.VALID
        logger.info("Server %s validated", server_address)
        return Valid(server_address=server_address, config=config)
