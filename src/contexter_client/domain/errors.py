from __future__ import annotations

"""
Domain Error Taxonomy.

Defines the exception hierarchy shared by the selection model, the
network protocol layer and the session orchestrator. Callers catch
ContexterError to handle every failure raised by this package.
"""

from typing import Optional


class ContexterError(Exception):
    """Base class for every error raised by contexter_client."""


# -----------------------------------------------------------------------------
# PRECONDITION ERRORS
# -----------------------------------------------------------------------------

class ConfigurationError(ContexterError):
    """Raised when the API key or server URL is missing. No request is sent."""


# -----------------------------------------------------------------------------
# REMOTE ERRORS
# -----------------------------------------------------------------------------

class TransportError(ContexterError):
    """
    Raised on network failure, non-2xx responses or undecodable bodies.

    Attributes:
        status_code: HTTP status of the failed response, if one was received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ContentFetchError(TransportError):
    """Raised when a content fetch cannot produce the concatenated text."""


class EmptySelectionError(ContentFetchError):
    """Raised when a fetch is attempted with nothing selected."""

    def __init__(self, project: str) -> None:
        super().__init__(f"No files selected in project '{project}'.")
        self.project = project


class ProjectNotFoundError(ContexterError):
    """Raised when the server does not know the requested project."""

    def __init__(self, project: str) -> None:
        super().__init__(f"Project '{project}' not found.")
        self.project = project


class FetchInProgressError(ContexterError):
    """Raised when a fetch is requested while another one is still running."""


# -----------------------------------------------------------------------------
# DATA INTEGRITY ERRORS
# -----------------------------------------------------------------------------

class InvalidPathError(ContexterError, ValueError):
    """Raised when a flat path list cannot be turned into a tree."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Invalid path '{path}': {reason}")
        self.path = path
        self.reason = reason


class UnknownNodeError(ContexterError, KeyError):
    """Raised when a node id does not exist in the current tree."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Unknown node: '{self.node_id}'"
