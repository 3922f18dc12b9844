"""Maps session state to the screen the user should see."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

from .session import Session

if TYPE_CHECKING:
    from .auth_flow import AuthFlow
    from .session import SessionStore


class Screen(Enum):
    SERVER_SETUP = "server_setup"
    LOGIN = "login"
    DASHBOARD = "dashboard"


def route(session: Session) -> Screen:
    if session.server_address is None:
        return Screen.SERVER_SETUP
    if session.authenticated:
        return Screen.DASHBOARD
    return Screen.LOGIN


class AppStateRouter:
    """Re-derives the current screen whenever the store or the auth flow changes."""

    def __init__(
        self,
        store: SessionStore,
        flow: Optional[AuthFlow] = None,
        on_change: Optional[Callable[[Screen], None]] = None,
    ) -> None:
        self._store = store
        self._on_change = on_change
        self._unsubscribers = [store.subscribe(self._refresh)]
        if flow is not None:
            self._unsubscribers.append(flow.subscribe(self._refresh))

    @property
    def screen(self) -> Screen:
        return route(self._store.session)

    def _refresh(self, _: Any) -> None:
        if self._on_change is not None:
            self._on_change(self.screen)

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
