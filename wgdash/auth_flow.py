"""Sign-in sequence: TOTP requirement discovery, then credential submission."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable

from .constants import ERROR_AUTH_FAILED, ERROR_NO_SERVER
from .exceptions import ValidationError
from .models import AuthResult, Credentials

if TYPE_CHECKING:
    from .client import AsyncWGDashboardClient
    from .session import SessionStore

logger = logging.getLogger(__name__)


class AuthState(Enum):
    IDLE = "idle"
    CHECKING_OTP = "checking_otp"
    READY_TO_SIGN_IN = "ready_to_sign_in"
    SIGNING_IN = "signing_in"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class AuthFlow:
    """Drives the login form against the server stored in the session.

    The form values (``username``, ``password``, ``otp``) live on the flow and
    survive failed attempts so the user can correct them and resubmit.
    """

    def __init__(self, client: AsyncWGDashboardClient, store: SessionStore) -> None:
        self._client = client
        self._store = store
        self._listeners: list[Callable[[AuthState], None]] = []
        self.state = AuthState.IDLE
        self.otp_required = False
        self.error: str | None = None
        self.username = ""
        self.password = ""
        self.otp = ""

    def subscribe(self, listener: Callable[[AuthState], None]) -> Callable[[], None]:
        """Register ``listener`` for state transitions; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, state: AuthState) -> None:
        logger.debug("Auth flow: %s -> %s", self.state.value, state.value)
        self.state = state
        for listener in list(self._listeners):
            listener(state)

    @property
    def can_submit(self) -> bool:
        return bool(self.username) and bool(self.password) and self.state is not AuthState.SIGNING_IN

    async def start(self) -> bool:
        """Point the client at the stored server and find out whether a TOTP code is needed.

        Returns:
            Whether the form should ask for a one-time password.

        Raises:
            ValidationError: If the session has no validated server.
        """
        server_address = self._store.server_address
        if server_address is None:
            raise ValidationError(ERROR_NO_SERVER)

        self._client.configure(server_address, self._store.api_key)
        self.error = None
        self._transition(AuthState.CHECKING_OTP)
        self.otp_required = await self._client.is_otp_enabled()
        self._transition(AuthState.READY_TO_SIGN_IN)
        return self.otp_required

    async def submit(self) -> bool:
        """Send the form. Returns True once signed in.

        Does nothing and returns False while the form is incomplete or a
        submission is already running.
        """
        if not self.can_submit:
            return False

        self.error = None
        self._transition(AuthState.SIGNING_IN)
        credentials = Credentials(username=self.username, password=self.password, otp=self.otp or None)
        try:
            result = await self._client.authenticate(credentials)
        except Exception as e:
            logger.warning("Sign-in request could not be sent: %s", e)
            result = AuthResult(success=False, message=ERROR_AUTH_FAILED)

        if result.success:
            self._store.set_authenticated(True)
            self._transition(AuthState.AUTHENTICATED)
            logger.info("Signed in as %s", self.username)
            return True

        self.error = result.message or ERROR_AUTH_FAILED
        logger.info("Sign-in failed: %s", self.error)
        self._transition(AuthState.FAILED)
        self._transition(AuthState.READY_TO_SIGN_IN)
        return False

    def reset(self) -> None:
        """Return to IDLE and clear the form, e.g. after the server was forgotten."""
        self.username = ""
        self.password = ""
        self.otp = ""
        self.otp_required = False
        self.error = None
        self._transition(AuthState.IDLE)
