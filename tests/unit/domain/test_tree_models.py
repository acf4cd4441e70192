from __future__ import annotations

"""
Unit tests for the PathTree model.

Verifies:
1. Folder/file structure built from flat '/'-delimited paths.
2. First-seen child ordering and deterministic construction.
3. Descendant file materialization.
4. Rejection of malformed listings.
"""

import itertools

import pytest

from contexter_client.domain.errors import InvalidPathError, UnknownNodeError
from contexter_client.domain.tree_models import NodeKind, PathTree


def _shape(tree: PathTree):
    """Collect (node id, sorted child ids) pairs ignoring child order."""
    return {
        node.id: tuple(sorted(c.id for c in node.children))
        for _, node in tree.walk()
    }


# -----------------------------------------------------------------------------
# STRUCTURE
# -----------------------------------------------------------------------------

def test_build_sample_structure(sample_paths):
    """TC-01: Roots are 'a' (folder with x.txt, y.txt) and 'b.txt' (file)."""
    tree = PathTree.build(sample_paths)

    assert [n.id for n in tree.roots] == ["a", "b.txt"]

    a, b = tree.roots
    assert a.kind is NodeKind.FOLDER
    assert [c.label for c in a.children] == ["x.txt", "y.txt"]
    assert [c.id for c in a.children] == ["a/x.txt", "a/y.txt"]
    assert b.kind is NodeKind.FILE
    assert b.children == ()


def test_ids_are_joined_labels(nested_paths):
    """TC-02: Every node id equals its ancestors' labels joined with '/'."""
    tree = PathTree.build(nested_paths)

    def check(node, prefix):
        expected = f"{prefix}/{node.label}" if prefix else node.label
        assert node.id == expected
        for child in node.children:
            check(child, node.id)

    for root in tree.roots:
        check(root, "")


def test_children_follow_first_seen_order(nested_paths):
    """TC-03: Interleaved input keeps insertion order per folder."""
    tree = PathTree.build(nested_paths)

    assert [n.label for n in tree.roots] == ["src", "README.md", "tests"]
    assert [c.label for c in tree.children("src")] == ["main.py", "utils"]
    assert [c.label for c in tree.children("src/utils")] == ["io.py", "text.py"]


def test_file_ids_match_input_exactly(nested_paths):
    """TC-04: Leaves are exactly the input paths, in input order."""
    tree = PathTree.build(nested_paths)

    leaves = [node.id for _, node in tree.walk() if node.is_leaf]
    assert sorted(leaves) == sorted(nested_paths)
    assert tree.all_files == tuple(nested_paths)


def test_walk_is_depth_first(sample_paths):
    """TC-05: walk() yields (depth, node) in depth-first order."""
    tree = PathTree.build(sample_paths)

    assert [(d, n.id) for d, n in tree.walk()] == [
        (0, "a"),
        (1, "a/x.txt"),
        (1, "a/y.txt"),
        (0, "b.txt"),
    ]


def test_single_segment_and_deep_paths():
    """TC-06: Top-level files and deep chains both produce correct kinds."""
    tree = PathTree.build(["top.txt", "d1/d2/d3/leaf.rs"])

    assert tree.is_leaf("top.txt")
    for folder in ("d1", "d1/d2", "d1/d2/d3"):
        assert tree.get(folder).kind is NodeKind.FOLDER
    assert tree.get("d1/d2/d3/leaf.rs").label == "leaf.rs"


def test_empty_listing_builds_empty_tree():
    """TC-07: A project without files yields no nodes."""
    tree = PathTree.build([])

    assert tree.roots == ()
    assert tree.all_files == ()
    assert len(tree) == 0


# -----------------------------------------------------------------------------
# DETERMINISM & DESCENDANTS
# -----------------------------------------------------------------------------

def test_build_is_deterministic(nested_paths):
    """TC-08: Building the same list twice yields equal trees."""
    assert PathTree.build(nested_paths) == PathTree.build(list(nested_paths))


def test_permutations_share_node_set_and_edges(sample_paths):
    """TC-09: Any permutation yields the same nodes and parent/child pairs."""
    reference = _shape(PathTree.build(sample_paths))

    for perm in itertools.permutations(sample_paths):
        assert _shape(PathTree.build(list(perm))) == reference


def test_descendants_of_roots_cover_all_files(nested_paths):
    """TC-10: Union of root descendant sets equals the input file set."""
    tree = PathTree.build(nested_paths)

    union = set()
    for root in tree.roots:
        union |= tree.descendant_files(root.id)
    assert union == set(nested_paths)


def test_descendant_files_of_folder_and_file(nested_paths):
    """TC-11: Folders expand to nested files; files map to themselves."""
    tree = PathTree.build(nested_paths)

    assert tree.descendant_files("src") == {
        "src/main.py", "src/utils/io.py", "src/utils/text.py"
    }
    assert tree.descendant_files("src/utils/io.py") == {"src/utils/io.py"}


# -----------------------------------------------------------------------------
# INVALID INPUT
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("bad_path", ["", "/abs.txt", "dir/", "a//b.txt"])
def test_rejects_empty_segments(bad_path):
    """TC-12: Empty paths and empty segments are rejected."""
    with pytest.raises(InvalidPathError) as exc:
        PathTree.build(["ok.txt", bad_path])
    assert exc.value.path == bad_path


def test_rejects_duplicates():
    """TC-13: The same path twice is rejected."""
    with pytest.raises(InvalidPathError, match="duplicate"):
        PathTree.build(["a/b.txt", "a/b.txt"])


def test_rejects_path_through_file():
    """TC-14: A path cannot pass through an existing file."""
    with pytest.raises(InvalidPathError) as exc:
        PathTree.build(["a", "a/b.txt"])
    assert exc.value.path == "a/b.txt"


def test_rejects_file_on_existing_folder():
    """TC-15: A file cannot share the id of an existing folder."""
    with pytest.raises(InvalidPathError) as exc:
        PathTree.build(["a/b.txt", "a"])
    assert exc.value.path == "a"


def test_invalid_path_is_value_error():
    """TC-16: InvalidPathError is also a ValueError."""
    with pytest.raises(ValueError):
        PathTree.build([""])


def test_unknown_node_lookup():
    """TC-17: Lookups on missing ids raise UnknownNodeError."""
    tree = PathTree.build(["a/x.txt"])

    with pytest.raises(UnknownNodeError):
        tree.get("missing")
    with pytest.raises(UnknownNodeError):
        tree.descendant_files("a/y.txt")
    assert "a" in tree
    assert "missing" not in tree
