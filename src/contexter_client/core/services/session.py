from __future__ import annotations

"""
Project Session Orchestrator.

Owns the tree and selection of the currently opened project. Opening a
project replaces both wholesale; a failed open leaves the previous state
untouched. Content fetches are serialized by a non-blocking lock so a
second fetch issued while one is in flight is rejected.
"""

import logging
import threading
from typing import Callable, List, Optional

from contexter_client.core.services.selection import SelectionStore
from contexter_client.domain.config import ClientSettings
from contexter_client.domain.errors import (
    ContexterError,
    FetchInProgressError,
    ProjectNotFoundError,
)
from contexter_client.domain.project_models import ProjectMetadata, ProjectSummary
from contexter_client.domain.tree_models import PathTree
from contexter_client.infra import network

logger = logging.getLogger(__name__)


class ProjectSession:
    """
    Single-project browsing state bound to one server.

    Attributes:
        settings: Connection settings used for every request.
        metadata: Metadata of the opened project, or None.
        selection: Selection over the opened project's tree, or None.
    """

    def __init__(self, settings: ClientSettings) -> None:
        self.settings = settings
        self.metadata: Optional[ProjectMetadata] = None
        self.selection: Optional[SelectionStore] = None
        self._fetch_lock = threading.Lock()

    # -------------------------------------------------------------------------
    # CATALOG
    # -------------------------------------------------------------------------

    def list_projects(self) -> List[ProjectSummary]:
        return network.list_projects(self.settings)

    def open_project(self, name: str) -> SelectionStore:
        """
        Load a project and reset the selection to every file.

        Args:
            name: Project name as listed by the server.

        Returns:
            SelectionStore: The fresh selection of the opened project.

        Raises:
            ProjectNotFoundError: If the server does not know the project.
            TransportError: If the metadata cannot be retrieved.
            InvalidPathError: If the server's file list cannot form a tree.
        """
        metadata = network.fetch_project_metadata(self.settings, name)
        if metadata is None:
            raise ProjectNotFoundError(name)

        tree = PathTree.build(metadata.files)
        selection = SelectionStore(tree)

        self.metadata = metadata
        self.selection = selection
        logger.info(f"Opened project '{metadata.name}' ({len(tree.all_files)} file(s)).")
        return selection

    def close(self) -> None:
        self.metadata = None
        self.selection = None

    # -------------------------------------------------------------------------
    # CONTENT
    # -------------------------------------------------------------------------

    @property
    def is_fetching(self) -> bool:
        return self._fetch_lock.locked()

    def fetch_content(self) -> str:
        """
        Fetch the content of the current selection.

        Raises:
            ContexterError: If no project is open.
            FetchInProgressError: If another fetch is still running.
            ContentFetchError: If the server exchange fails.
        """
        self._acquire_fetch()
        try:
            return self._request_content()
        finally:
            self._fetch_lock.release()

    def fetch_content_async(
            self,
            on_complete: Callable[[object], None],
    ) -> threading.Thread:
        """
        Run a content fetch on a daemon thread.

        The callback receives the content string on success or the raised
        ContexterError on failure. The in-flight guard is taken before the
        thread starts, so a concurrent request raises immediately.

        Raises:
            ContexterError: If no project is open.
            FetchInProgressError: If another fetch is still running.
        """
        self._acquire_fetch()

        def worker() -> None:
            try:
                result: object = self._request_content()
            except ContexterError as e:
                logger.error(f"Content fetch failed: {e}")
                result = e
            finally:
                self._fetch_lock.release()
            on_complete(result)

        thread = threading.Thread(target=worker, name="contexter-fetch", daemon=True)
        try:
            thread.start()
        except RuntimeError:
            self._fetch_lock.release()
            raise
        return thread

    # -------------------------------------------------------------------------
    # PRIVATE HELPERS
    # -------------------------------------------------------------------------

    def _acquire_fetch(self) -> None:
        if self.metadata is None or self.selection is None:
            raise ContexterError("No project is open.")
        if not self._fetch_lock.acquire(blocking=False):
            raise FetchInProgressError(
                f"A content fetch for '{self.metadata.name}' is already in progress."
            )

    def _request_content(self) -> str:
        metadata, selection = self.metadata, self.selection
        if metadata is None or selection is None:
            raise ContexterError("No project is open.")
        return network.request_content(
            self.settings,
            metadata.name,
            selection.snapshot(),
            selection.tree.all_files,
        )
