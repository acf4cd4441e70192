from __future__ import annotations

"""
Client Settings Management.

Loads and persists the server endpoint, API key and request timeout.
Values are resolved from built-in defaults, the JSON settings file in the
user data directory, environment variables and explicit overrides, in that
order of precedence.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping, Optional

from contexter_client.domain.errors import ConfigurationError
from contexter_client.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE = os.path.join(get_user_data_dir(), "config.json")
CURRENT_CONFIG_VERSION = "1.0.0"
DEFAULT_TIMEOUT = 10.0

ENV_SERVER_URL = "CONTEXTER_SERVER_URL"
ENV_API_KEY = "CONTEXTER_API_KEY"
ENV_TIMEOUT = "CONTEXTER_TIMEOUT"


# -----------------------------------------------------------------------------
# Settings Model
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ClientSettings:
    """
    Connection parameters for a contexter server.

    Attributes:
        server_url: Base URL of the server, without trailing slash.
        api_key: Key sent in the X-API-Key header.
        timeout: Per-request timeout in seconds.
    """
    server_url: str = ""
    api_key: str = ""
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        object.__setattr__(self, "server_url", (self.server_url or "").strip().rstrip("/"))
        object.__setattr__(self, "api_key", (self.api_key or "").strip())

    def __repr__(self) -> str:
        masked = "***" if self.api_key else ""
        return (
            f"ClientSettings(server_url={self.server_url!r}, "
            f"api_key={masked!r}, timeout={self.timeout!r})"
        )

    @property
    def is_ready(self) -> bool:
        return bool(self.server_url and self.api_key)

    def require_ready(self) -> "ClientSettings":
        """
        Ensure both endpoint and key are set.

        Raises:
            ConfigurationError: If the server URL or API key is missing.
        """
        if self.is_ready:
            return self
        missing = []
        if not self.server_url:
            missing.append("server URL")
        if not self.api_key:
            missing.append("API key")
        raise ConfigurationError(f"Missing {' and '.join(missing)}.")


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_settings() -> ClientSettings:
    """
    Load settings from disk.

    Returns:
        ClientSettings: Stored settings, or defaults if the file is missing
                        or unreadable.
    """
    if not os.path.exists(CONFIG_FILE):
        logger.debug("Settings file not found. Using defaults.")
        return ClientSettings()

    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to read settings file: {e}. Using defaults.")
        return ClientSettings()

    if not isinstance(data, dict):
        logger.warning("Corrupted settings file. Using defaults.")
        return ClientSettings()

    return apply_overrides(ClientSettings(), data)


def save_settings(settings: ClientSettings) -> None:
    """
    Persist settings to disk.

    Raises:
        OSError: If the file cannot be written.
    """
    os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
    payload: Dict[str, Any] = {"version": CURRENT_CONFIG_VERSION}
    payload.update(asdict(settings))
    with open(CONFIG_FILE, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=4)
    logger.debug(f"Settings saved to {CONFIG_FILE}")


def resolve_settings(
        overrides: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
) -> ClientSettings:
    """
    Merge stored settings with environment and explicit overrides.

    Args:
        overrides: Values from the command line. None entries are ignored.
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        ClientSettings: Effective settings.
    """
    env = os.environ if environ is None else environ
    settings = load_settings()

    env_values = {
        "server_url": env.get(ENV_SERVER_URL),
        "api_key": env.get(ENV_API_KEY),
        "timeout": env.get(ENV_TIMEOUT),
    }
    settings = apply_overrides(settings, env_values)
    return apply_overrides(settings, overrides or {})


# -----------------------------------------------------------------------------
# Merging
# -----------------------------------------------------------------------------
def apply_overrides(base: ClientSettings, values: Mapping[str, Any]) -> ClientSettings:
    """Overlay known, non-empty keys onto a settings instance."""
    changes: Dict[str, Any] = {}
    for key in ("server_url", "api_key"):
        value = values.get(key)
        if value:
            changes[key] = str(value)

    timeout = values.get("timeout")
    if timeout not in (None, ""):
        try:
            parsed = float(timeout)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid timeout value: {timeout!r}")
        else:
            if parsed > 0:
                changes["timeout"] = parsed
            else:
                logger.warning(f"Ignoring non-positive timeout value: {timeout!r}")

    return replace(base, **changes) if changes else base
