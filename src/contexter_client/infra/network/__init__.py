from __future__ import annotations

"""
Network Communication Infrastructure.

Facade over the catalog and content clients of the contexter HTTP API.
"""

from contexter_client.infra.network.catalog_client import (
    fetch_project_metadata,
    list_projects,
    validate_api_key,
)
from contexter_client.infra.network.content_client import encode_selection, request_content

__all__ = [
    "list_projects",
    "fetch_project_metadata",
    "validate_api_key",
    "encode_selection",
    "request_content",
]
