from __future__ import annotations

"""
Selection Tree Renderer.

Converts a PathTree and its selection into ASCII lines, prefixing every
node with its derived tri-state marker.
"""

from typing import Dict, List, Sequence

from contexter_client.core.services.selection import SelectionState, SelectionStore
from contexter_client.domain.tree_models import TreeNode

STATE_MARKERS: Dict[SelectionState, str] = {
    SelectionState.CHECKED: "[x]",
    SelectionState.UNCHECKED: "[ ]",
    SelectionState.INDETERMINATE: "[~]",
}

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_selection_tree(selection: SelectionStore) -> List[str]:
    """
    Render the whole tree of a selection.

    Nodes keep their first-seen order. Folders carry a trailing '/'.

    Args:
        selection: Selection whose tree and states are rendered.

    Returns:
        List[str]: One line per node.
    """
    lines: List[str] = []
    _render_level(selection.tree.roots, selection, lines, prefix="")
    return lines


def render_summary(selection: SelectionStore) -> str:
    total = len(selection.tree.all_files)
    return f"{len(selection)}/{total} file(s) selected"

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _render_level(
        nodes: Sequence[TreeNode],
        selection: SelectionStore,
        lines: List[str],
        prefix: str,
) -> None:
    total = len(nodes)
    for i, node in enumerate(nodes):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "
        if node.is_leaf:
            state = SelectionState.CHECKED if selection.is_selected(node.id) else SelectionState.UNCHECKED
        else:
            state = selection.derived_state(node.id)
        marker = STATE_MARKERS[state]
        suffix = "/" if not node.is_leaf else ""
        lines.append(f"{prefix}{connector}{marker} {node.label}{suffix}")

        if node.children:
            new_prefix = prefix + ("    " if is_last else "│   ")
            _render_level(node.children, selection, lines, new_prefix)
