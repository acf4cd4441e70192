from __future__ import annotations

"""
Content Retrieval Protocol.

Encodes a selection into the content-fetch request and interprets the
server's answer. When every file of the project is selected the request
carries an empty path list, which the server reads as "the whole project".
"""

import logging
from typing import AbstractSet, List, Sequence

import requests

from contexter_client.domain.config import ClientSettings
from contexter_client.domain.errors import ContentFetchError, EmptySelectionError
from contexter_client.domain.project_models import ContentRequest
from contexter_client.infra.network.common import (
    build_headers,
    build_url,
    decode_json,
    transport_failure,
)

logger = logging.getLogger(__name__)


def encode_selection(selected: AbstractSet[str], all_files: Sequence[str]) -> ContentRequest:
    """
    Build the request body for a selection.

    Args:
        selected: Selected file paths.
        all_files: Every file of the project, in listing order.

    Returns:
        ContentRequest: Empty when the selection covers every file,
                        otherwise the selected paths in listing order.
    """
    known = set(all_files)
    if len(selected) == len(known) and known <= selected:
        return ContentRequest(paths=[])

    paths: List[str] = [p for p in all_files if p in selected]
    paths.extend(sorted(set(selected) - known))
    return ContentRequest(paths=paths)


def request_content(
        settings: ClientSettings,
        project: str,
        selected: AbstractSet[str],
        all_files: Sequence[str],
) -> str:
    """
    Fetch the concatenated content of the selected files.

    Args:
        settings: Server URL, key and timeout.
        project: Project name.
        selected: Selected file paths.
        all_files: Every file of the project.

    Returns:
        str: Concatenated file contents as produced by the server.

    Raises:
        ConfigurationError: If the server URL or API key is missing.
        EmptySelectionError: If nothing is selected in a non-empty project.
        ContentFetchError: On any transport or protocol failure.
    """
    settings.require_ready()
    if not selected and all_files:
        raise EmptySelectionError(project)

    body = encode_selection(selected, all_files)
    if body.is_whole_project:
        logger.debug(f"All {len(all_files)} file(s) selected; requesting whole project '{project}'.")
    else:
        logger.debug(f"Requesting {len(body.paths)} of {len(all_files)} file(s) from '{project}'.")

    url = build_url(settings, "projects", project)
    try:
        response = requests.post(
            url,
            json=body.to_dict(),
            headers=build_headers(settings, json_body=True),
            timeout=settings.timeout,
        )
    except requests.exceptions.RequestException as e:
        raise transport_failure(
            e, "fetch project content", settings.timeout, ContentFetchError
        ) from e

    data = decode_json(response, "fetch project content", ContentFetchError)
    content = data.get("content")
    if not isinstance(content, str):
        msg = "Failed to fetch project content: 'content' is missing or not a string"
        logger.error(f"Network: {msg}")
        raise ContentFetchError(msg, status_code=response.status_code)

    logger.info(f"Network: Received {len(content)} character(s) for project '{project}'.")
    return content
