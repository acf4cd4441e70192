from __future__ import annotations

"""
Shared HTTP helpers for the contexter API clients.

Builds URLs and headers, and turns failed responses into TransportError
with the server's error message when one is provided.
"""

import logging
from typing import Any, Dict, Optional, Type
from urllib.parse import quote

import requests

from contexter_client import __version__
from contexter_client.domain.config import ClientSettings
from contexter_client.domain.errors import TransportError

logger = logging.getLogger(__name__)

USER_AGENT = f"ContexterClient/{__version__}"
API_PREFIX = "/api/v1"
API_KEY_HEADER = "X-API-Key"


def build_url(settings: ClientSettings, *segments: str) -> str:
    """
    Join the server URL, the API prefix and percent-encoded path segments.

    Args:
        settings: Client settings holding the base URL.
        segments: Path segments, each encoded as a single segment.

    Returns:
        str: Absolute request URL.
    """
    path = "/".join(quote(s, safe="") for s in segments)
    return f"{settings.server_url}{API_PREFIX}/{path}"


def build_headers(settings: ClientSettings, json_body: bool = False) -> Dict[str, str]:
    headers = {
        "User-Agent": USER_AGENT,
        API_KEY_HEADER: settings.api_key,
        "Accept": "application/json",
    }
    if json_body:
        headers["Content-Type"] = "application/json"
    return headers


def decode_json(
        response: requests.Response,
        action: str,
        error_cls: Type[TransportError] = TransportError,
) -> Dict[str, Any]:
    """
    Validate the status of a response and decode its JSON object body.

    Args:
        response: Received HTTP response.
        action: Human-readable description used in error messages.
        error_cls: TransportError subclass to raise.

    Returns:
        Dict[str, Any]: Decoded JSON object.

    Raises:
        TransportError: On a non-2xx status or a body that is not a JSON object.
    """
    status = response.status_code
    if not 200 <= status < 300:
        detail = _error_detail(response)
        reason = getattr(response, "reason", "")
        if not isinstance(reason, str):
            reason = ""
        msg = f"Failed to {action}: {status} {reason}".rstrip()
        if detail:
            msg = f"{msg} ({detail})"
        logger.error(f"Network: {msg}")
        raise error_cls(msg, status_code=status)

    try:
        data = response.json()
    except ValueError as e:
        msg = f"Failed to {action}: response is not valid JSON ({e})"
        logger.error(f"Network: {msg}")
        raise error_cls(msg, status_code=status) from e

    if not isinstance(data, dict):
        msg = f"Failed to {action}: expected a JSON object, got {type(data).__name__}"
        logger.error(f"Network: {msg}")
        raise error_cls(msg, status_code=status)

    return data


def transport_failure(
        exc: requests.exceptions.RequestException,
        action: str,
        timeout: float,
        error_cls: Type[TransportError] = TransportError,
) -> TransportError:
    """Build the error raised when no response was received."""
    if isinstance(exc, requests.exceptions.Timeout):
        msg = f"Failed to {action}: timed out after {timeout:g}s"
    else:
        msg = f"Failed to {action}: {exc}"
    logger.error(f"Network: {msg}")
    return error_cls(msg)


def _error_detail(response: requests.Response) -> Optional[str]:
    """Extract the 'error' field of a JSON error body, if any."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("error"), str):
        return data["error"]
    return None
