"""Configuration helpers for the wgdash client."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

FALLBACK_TIMEOUT_SECONDS = 10.0


def get_timeout() -> float:
    """Transport timeout in seconds from ``WGDASH_TIMEOUT``.

    An unset, unparseable or non-positive value falls back to 10 seconds.
    """
    raw = os.environ.get("WGDASH_TIMEOUT")
    if not raw:
        return FALLBACK_TIMEOUT_SECONDS
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning("Ignoring WGDASH_TIMEOUT=%r: not a number", raw)
        return FALLBACK_TIMEOUT_SECONDS
    if not timeout > 0:
        logger.warning("Ignoring WGDASH_TIMEOUT=%r: must be positive", raw)
        return FALLBACK_TIMEOUT_SECONDS
    return timeout


DEFAULT_TIMEOUT_SECONDS = get_timeout()

API_KEY_HEADER = "wg-dashboard-apikey"

DEFAULT_SCHEME = "http://"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


def get_config_dir() -> Path:
    """Directory holding the persisted session (``WGDASH_CONFIG_DIR`` overrides)."""
    override = os.environ.get("WGDASH_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".wgdash"


def sanitize_base_url(url: str) -> str:
    """Ensure the base URL never ends with a trailing slash."""

    return url.rstrip("/")


def has_explicit_scheme(address: str) -> bool:
    return bool(_SCHEME_RE.match(address))


def normalize_server_address(address: str) -> str:
    """Turn user input into a server URL.

    Input that already carries a ``scheme://`` prefix is returned unchanged;
    anything else is assumed to be a plain ``host[:port][/path]`` and gets
    ``http://`` prepended. This does not check that the result points at a
    real server: a bad address only shows up later as an unreachable server.

    Raises:
        ValidationError: If the input is empty or only whitespace.
    """
    address = (address or "").strip()
    if not address:
        raise ValidationError("Server address is empty")
    if has_explicit_scheme(address):
        return address
    return DEFAULT_SCHEME + address
