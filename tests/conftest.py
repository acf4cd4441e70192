from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for settings, sample project listings and fake
   HTTP responses used across unit and integration tests.
"""

import os
import sys
from typing import Any, Callable, List, Optional
from unittest.mock import MagicMock

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from contexter_client.domain.config import ClientSettings  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def settings() -> ClientSettings:
    """Return ready-to-use connection settings pointing at a fake server."""
    return ClientSettings(server_url="http://contexter.test:3030", api_key="secret-key", timeout=5)


@pytest.fixture
def sample_paths() -> List[str]:
    """
    Flat listing used by most selection tests.

    Tree:
      a/
        x.txt
        y.txt
      b.txt
    """
    return ["a/x.txt", "a/y.txt", "b.txt"]


@pytest.fixture
def nested_paths() -> List[str]:
    """Deeper listing with interleaved folders."""
    return [
        "src/main.py",
        "src/utils/io.py",
        "README.md",
        "src/utils/text.py",
        "tests/test_main.py",
    ]


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """
    Factory for fake requests.Response objects.

    Args (of the returned callable):
        status_code: HTTP status.
        json_data: Value returned by .json(); ignored if json_error is set.
        json_error: Exception raised by .json().
        reason: HTTP reason phrase.
    """
    def factory(
            status_code: int = 200,
            json_data: Any = None,
            json_error: Optional[Exception] = None,
            reason: str = "OK",
    ) -> MagicMock:
        resp = MagicMock()
        resp.status_code = status_code
        resp.reason = reason
        if json_error is not None:
            resp.json.side_effect = json_error
        else:
            resp.json.return_value = json_data
        return resp

    return factory
