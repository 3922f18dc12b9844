"""Session storage for the wgdash client.

The server address and API key live in ~/.wgdash/session.json with
restrictive permissions. Whether the user is signed in is only ever held in
memory and starts out False in every new process.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from .config import get_config_dir
from .constants import API_KEY_KEY, SERVER_ADDRESS_KEY, SESSION_FILE

logger = logging.getLogger(__name__)

Listener = Callable[["Session"], None]


@dataclass(frozen=True)
class Session:
    """Snapshot of the current session."""

    server_address: str | None = None
    api_key: str | None = None
    authenticated: bool = False


def get_session_path() -> Path:
    return get_config_dir() / SESSION_FILE


def load_session_file(path: Path) -> dict[str, Any]:
    """Read the persisted fields.

    Returns an empty dict if the file doesn't exist, is not valid UTF-8 JSON,
    or is not a dict.
    """
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except (ValueError, OSError):
        logger.warning("Ignoring unreadable session file %s", path)
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def _string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


class SessionStore:
    """Holds the session and tells subscribers whenever it changes.

    In-memory updates do not touch the disk; callers invoke ``save()`` once a
    flow has reached a successful end state.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or get_session_path()
        data = load_session_file(self._path)
        self._session = Session(
            server_address=_string_or_none(data.get(SERVER_ADDRESS_KEY)),
            api_key=_string_or_none(data.get(API_KEY_KEY)),
        )
        self._listeners: list[Listener] = []

    @property
    def path(self) -> Path:
        return self._path

    @property
    def session(self) -> Session:
        return self._session

    @property
    def server_address(self) -> str | None:
        return self._session.server_address

    @property
    def api_key(self) -> str | None:
        return self._session.api_key

    @property
    def authenticated(self) -> bool:
        return self._session.authenticated

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for change notifications; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _replace(self, session: Session) -> None:
        if session == self._session:
            return
        self._session = session
        for listener in list(self._listeners):
            listener(session)

    def set_server(self, server_address: str, api_key: str | None = None) -> None:
        """Record a validated server. Signing in has to happen again afterwards."""
        self._replace(Session(server_address=server_address, api_key=api_key or None, authenticated=False))

    def set_authenticated(self, authenticated: bool) -> None:
        self._replace(
            Session(
                server_address=self._session.server_address,
                api_key=self._session.api_key,
                authenticated=authenticated,
            )
        )

    def save(self, session: Session | None = None) -> None:
        """Write server address and API key with an atomic write and restrictive permissions.

        ``session`` defaults to the current in-memory session. Passing one lets
        a caller persist a change before publishing it with ``set_server``.

        - Directory: 0700 (owner read/write/execute only)
        - File: 0600 (owner read/write only)
        - Atomic: writes to temp file in same dir, then os.replace()
        """
        if session is None:
            session = self._session
        session_dir = self._path.parent
        session_dir.mkdir(parents=True, exist_ok=True)
        os.chmod(session_dir, 0o700)

        content = json.dumps(
            {
                SERVER_ADDRESS_KEY: session.server_address,
                API_KEY_KEY: session.api_key,
            },
            indent=2,
        )

        fd, tmp_path = tempfile.mkstemp(dir=session_dir, prefix=".session_", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                f.write(content)
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self._path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug("Session saved to %s", self._path)

    def forget(self) -> None:
        """Drop the server, its API key and the sign-in state, on disk and in memory."""
        if self._path.exists():
            self._path.unlink()
        self._replace(Session())
        logger.info("Forgot saved server")
