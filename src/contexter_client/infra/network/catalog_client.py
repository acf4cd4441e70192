from __future__ import annotations

import logging
from typing import List, Optional

import requests

from contexter_client.domain.config import ClientSettings
from contexter_client.domain.errors import TransportError
from contexter_client.domain.project_models import ProjectMetadata, ProjectSummary
from contexter_client.infra.network.common import (
    build_headers,
    build_url,
    decode_json,
    transport_failure,
)

logger = logging.getLogger(__name__)


def list_projects(settings: ClientSettings) -> List[ProjectSummary]:
    """Retrieve the projects exposed by the server."""
    settings.require_ready()
    url = build_url(settings, "projects")
    logger.debug(f"Listing projects from: {url}")

    try:
        response = requests.get(url, headers=build_headers(settings), timeout=settings.timeout)
    except requests.exceptions.RequestException as e:
        raise transport_failure(e, "fetch projects", settings.timeout) from e

    data = decode_json(response, "fetch projects")
    raw = data.get("projects")
    if not isinstance(raw, list):
        raise TransportError("Failed to fetch projects: 'projects' is missing or not a list")

    try:
        projects = [ProjectSummary.from_dict(p) for p in raw]
    except (KeyError, TypeError, AttributeError) as e:
        raise TransportError(f"Failed to fetch projects: malformed entry ({e})") from e

    logger.info(f"Network: {len(projects)} project(s) available.")
    return projects


def fetch_project_metadata(settings: ClientSettings, name: str) -> Optional[ProjectMetadata]:
    """
    Retrieve name, root path and flat file list of a project.

    Returns None when the server reports the project as unknown (404).
    """
    settings.require_ready()
    url = build_url(settings, "projects", name)
    logger.debug(f"Fetching metadata for project '{name}'")

    try:
        response = requests.get(url, headers=build_headers(settings), timeout=settings.timeout)
    except requests.exceptions.RequestException as e:
        raise transport_failure(e, "fetch project metadata", settings.timeout) from e

    if response.status_code == 404:
        logger.warning(f"Network: Project not found: {name}")
        return None

    data = decode_json(response, "fetch project metadata")
    try:
        metadata = ProjectMetadata.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise TransportError(f"Failed to fetch project metadata: malformed body ({e})") from e

    logger.info(f"Network: Metadata for '{metadata.name}' lists {len(metadata.files)} file(s).")
    return metadata


def validate_api_key(settings: ClientSettings) -> bool:
    """
    Check the configured key against the server.

    Returns:
        bool: True on a 2xx answer, False on 401/403.

    Raises:
        TransportError: If the server cannot be reached or answers otherwise.
    """
    settings.require_ready()
    url = build_url(settings, "projects")

    try:
        response = requests.get(url, headers=build_headers(settings), timeout=settings.timeout)
    except requests.exceptions.RequestException as e:
        raise transport_failure(e, "validate API key", settings.timeout) from e

    if response.status_code in (401, 403):
        logger.warning("Network: API key rejected by server.")
        return False
    decode_json(response, "validate API key")
    return True
