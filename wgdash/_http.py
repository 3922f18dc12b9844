"""Shared HTTP request utilities for the wgdash client."""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
import pydantic

from .config import API_KEY_HEADER, sanitize_base_url
from .exceptions import APIError, AuthError, ParseError

M = TypeVar("M", bound=pydantic.BaseModel)


def build_headers(api_key: str | None = None) -> dict[str, str]:
    """Build request headers, adding the API key header only when a key is set."""
    headers = {"Content-Type": "application/json"}

    if api_key:
        headers[API_KEY_HEADER] = api_key

    return headers


def build_url(base_url: str, path: str) -> str:
    return f"{sanitize_base_url(base_url)}/{path.lstrip('/')}"


def is_success(response: httpx.Response) -> bool:
    return 200 <= response.status_code < 300


def handle_response(response: httpx.Response) -> dict[str, Any]:
    """Process HTTP response, raising appropriate errors for failures."""
    if response.status_code in (401, 403):
        raise AuthError("Invalid or missing API key")

    if response.status_code >= 400:
        raise APIError(
            message=response.text or "WGDashboard API call failed",
            status_code=response.status_code,
            response=response,
        )

    if not response.content:
        raise ParseError("Empty response body")

    try:
        payload = response.json()
    except ValueError as e:
        raise ParseError("Response body is not valid JSON") from e

    if not isinstance(payload, dict):
        raise ParseError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload


def decode(model: type[M], payload: dict[str, Any]) -> M:
    """Validate ``payload`` against ``model``, mapping schema errors to ParseError."""
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ParseError(f"Malformed {model.__name__}: {e.error_count()} invalid field(s)") from e


def mask_key(key: str) -> str:
    if len(key) >= 16:
        return key[:4] + "..." + key[-4:]
    if len(key) >= 8:
        return key[:4] + "..."
    return "***"
