from __future__ import annotations

"""
Tri-State Selection Service.

Keeps the set of selected file ids for one project tree. Only files are
stored; the checked/unchecked/indeterminate state of a folder is always
computed from its descendant files, so folder and file state cannot drift
apart.
"""

import logging
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Set

from contexter_client.domain.tree_models import PathTree

logger = logging.getLogger(__name__)


class SelectionState(str, Enum):
    """Derived display state of a tree node."""
    CHECKED = "checked"
    UNCHECKED = "unchecked"
    INDETERMINATE = "indeterminate"


class SelectionStore:
    """
    Mutable leaf-only selection bound to an immutable PathTree.

    Folder toggles are expanded to their descendant files and applied as a
    single set operation.
    """

    def __init__(self, tree: PathTree, selected: Optional[Iterable[str]] = None) -> None:
        self._tree = tree
        self._selected: Set[str] = set()
        if selected is None:
            self.initialize(tree.all_files)
        else:
            self.initialize(selected)

    @property
    def tree(self) -> PathTree:
        return self._tree

    # -------------------------------------------------------------------------
    # MUTATION
    # -------------------------------------------------------------------------

    def initialize(self, all_files: Iterable[str]) -> None:
        """
        Replace the selection with the given files.

        Args:
            all_files: File ids to select. Folder ids expand to their files.

        Raises:
            UnknownNodeError: If an id is not part of the tree.
        """
        files: Set[str] = set()
        for node_id in all_files:
            files |= self._tree.descendant_files(node_id)
        self._selected = files

    def set_node(self, node_id: str, checked: bool) -> None:
        """
        Check or uncheck a node and every file below it.

        Args:
            node_id: File or folder id.
            checked: Desired state.

        Raises:
            UnknownNodeError: If the node does not exist.
        """
        affected = self._tree.descendant_files(node_id)
        if not affected:
            return
        if checked:
            self._selected |= affected
        else:
            self._selected -= affected
        logger.debug(
            f"Selection: {'checked' if checked else 'unchecked'} '{node_id}' "
            f"({len(affected)} file(s), {len(self._selected)} selected)."
        )

    def toggle(self, node_id: str) -> SelectionState:
        """
        Flip a node. Partially selected folders become fully checked.

        Returns:
            SelectionState: The node state after the toggle.
        """
        checked = self.derived_state(node_id) is not SelectionState.CHECKED
        self.set_node(node_id, checked)
        return self.derived_state(node_id)

    def select_all(self) -> None:
        self._selected = set(self._tree.all_files)

    def clear(self) -> None:
        self._selected = set()

    # -------------------------------------------------------------------------
    # QUERIES
    # -------------------------------------------------------------------------

    def derived_state(self, node_id: str) -> SelectionState:
        """
        Compute the tri-state of a node from its descendant files.

        Raises:
            UnknownNodeError: If the node does not exist.
        """
        files = self._tree.descendant_files(node_id)
        hits = len(files & self._selected)
        if files and hits == len(files):
            return SelectionState.CHECKED
        if hits == 0:
            return SelectionState.UNCHECKED
        return SelectionState.INDETERMINATE

    def is_selected(self, file_id: str) -> bool:
        return file_id in self._selected

    def snapshot(self) -> FrozenSet[str]:
        """Return an immutable copy of the selected file ids."""
        return frozenset(self._selected)

    @property
    def is_complete(self) -> bool:
        return len(self._selected) == len(self._tree.all_files)

    def __len__(self) -> int:
        return len(self._selected)
