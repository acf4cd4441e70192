from __future__ import annotations

"""
Project File Tree Data Models.

Provides the immutable node and tree types used by the selection model.
A PathTree is built once from the flat file listing of a project and never
mutated afterwards; descendant file sets are materialized during
construction so subtree propagation is a plain lookup.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterator, List, Sequence, Tuple

from contexter_client.domain.errors import InvalidPathError, UnknownNodeError

PATH_SEPARATOR = "/"


class NodeKind(str, Enum):
    """Structural classification of a tree node."""
    FILE = "file"
    FOLDER = "folder"


# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class TreeNode:
    """
    One path segment of a project tree.

    Attributes:
        id: Full '/'-joined path from the root to this node.
        label: Last segment of the id.
        children: Child nodes in first-seen order. Empty for files.
    """
    id: str
    label: str
    children: Tuple["TreeNode", ...] = ()

    @property
    def kind(self) -> NodeKind:
        return NodeKind.FOLDER if self.children else NodeKind.FILE

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass(frozen=True)
class PathTree:
    """
    Immutable tree over a project's flat file listing.

    Attributes:
        roots: Root-level nodes in first-seen order.
        all_files: File ids in the order they were supplied.
    """
    roots: Tuple[TreeNode, ...]
    all_files: Tuple[str, ...]
    _index: Dict[str, TreeNode] = field(default_factory=dict, repr=False, compare=False)
    _descendants: Dict[str, FrozenSet[str]] = field(
        default_factory=dict, repr=False, compare=False
    )

    # -------------------------------------------------------------------------
    # CONSTRUCTION
    # -------------------------------------------------------------------------

    @classmethod
    def build(cls, paths: Sequence[str]) -> "PathTree":
        """
        Build a tree from flat '/'-delimited file paths.

        Every input path becomes a File node; every proper prefix becomes a
        Folder node. Input is validated in full before a tree is returned.

        Args:
            paths: File paths in the order reported by the server.

        Returns:
            PathTree: The constructed tree.

        Raises:
            InvalidPathError: On empty paths, empty segments, duplicates or a
                path that is both a file and a folder.
        """
        # Mutable scaffolding: id -> ordered child ids
        child_ids: Dict[str, List[str]] = {"": []}
        files: Dict[str, None] = {}

        for path in paths:
            segments = _split_path(path)
            if path in files:
                raise InvalidPathError(path, "duplicate path")
            if path in child_ids:
                raise InvalidPathError(path, "path is already a folder")

            parent = ""
            for depth, segment in enumerate(segments[:-1]):
                current = PATH_SEPARATOR.join(segments[:depth + 1])
                if current in files:
                    raise InvalidPathError(path, f"'{current}' is already a file")
                if current not in child_ids:
                    child_ids[current] = []
                    child_ids[parent].append(current)
                parent = current

            child_ids[parent].append(path)
            files[path] = None

        index: Dict[str, TreeNode] = {}
        descendants: Dict[str, FrozenSet[str]] = {}

        def freeze(node_id: str) -> TreeNode:
            label = node_id.rsplit(PATH_SEPARATOR, 1)[-1]
            if node_id in files:
                node = TreeNode(id=node_id, label=label)
                descendants[node_id] = frozenset((node_id,))
            else:
                kids = tuple(freeze(c) for c in child_ids[node_id])
                node = TreeNode(id=node_id, label=label, children=kids)
                descendants[node_id] = frozenset().union(*(descendants[k.id] for k in kids))
            index[node_id] = node
            return node

        roots = tuple(freeze(c) for c in child_ids[""])
        return cls(
            roots=roots,
            all_files=tuple(files),
            _index=index,
            _descendants=descendants,
        )

    # -------------------------------------------------------------------------
    # TRAVERSAL
    # -------------------------------------------------------------------------

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def __len__(self) -> int:
        return len(self._index)

    def get(self, node_id: str) -> TreeNode:
        """Return the node with the given id or raise UnknownNodeError."""
        try:
            return self._index[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def children(self, node_id: str) -> Tuple[TreeNode, ...]:
        return self.get(node_id).children

    def is_leaf(self, node_id: str) -> bool:
        return self.get(node_id).is_leaf

    def descendant_files(self, node_id: str) -> FrozenSet[str]:
        """
        Return every File id at or below the given node.

        A File node yields a set containing only itself.
        """
        self.get(node_id)
        return self._descendants[node_id]

    def walk(self) -> Iterator[Tuple[int, TreeNode]]:
        """Yield (depth, node) pairs in depth-first, first-seen order."""
        stack: List[Tuple[int, TreeNode]] = [(0, n) for n in reversed(self.roots)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            stack.extend((depth + 1, c) for c in reversed(node.children))


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _split_path(path: str) -> List[str]:
    """Split a path into segments, rejecting empty paths and empty segments."""
    if not isinstance(path, str) or not path:
        raise InvalidPathError(str(path), "empty path")
    segments = path.split(PATH_SEPARATOR)
    if any(not s for s in segments):
        raise InvalidPathError(path, "empty path segment")
    return segments
