from __future__ import annotations

"""
Tree Locator.

Pure recursive search over the node hierarchy. Absence is an expected
outcome (a node may have been deleted by an earlier command), so every
lookup returns None or an empty tuple instead of raising.
"""

from typing import Iterator, Optional, Sequence

from foldertree.domain.constants import NAME_PATH_SEPARATOR
from foldertree.domain.tree_models import FolderNode, Node, Roots, TreeState, get_children

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def find_node(roots: Sequence[Node], node_id: str) -> Optional[Node]:
    """
    Depth-first search for a node by id.

    Args:
        roots: Sequence of top-level nodes.
        node_id: Identifier to look up.

    Returns:
        Optional[Node]: The matching node or None.
    """
    for node in roots:
        if node.id == node_id:
            return node
        if isinstance(node, FolderNode):
            found = find_node(node.children, node_id)
            if found is not None:
                return found
    return None


def find_parent(roots: Sequence[Node], node_id: str) -> Optional[FolderNode]:
    """
    Return the folder that directly contains node_id.

    None is returned both when node_id is a root and when it is absent;
    use find_node first if the distinction matters.
    """
    for node in roots:
        if isinstance(node, FolderNode):
            if any(c.id == node_id for c in node.children):
                return node
            found = find_parent(node.children, node_id)
            if found is not None:
                return found
    return None


def parent_id_of(roots: Sequence[Node], node_id: str) -> Optional[str]:
    parent = find_parent(roots, node_id)
    return parent.id if parent is not None else None


def siblings_of(roots: Sequence[Node], node_id: str) -> Roots:
    """
    Return every node sharing node_id's parent, excluding node_id itself.

    At root level this is all other roots. Empty if node_id is absent.
    """
    if any(n.id == node_id for n in roots):
        return tuple(n for n in roots if n.id != node_id)

    parent = find_parent(roots, node_id)
    if parent is None:
        return ()
    return tuple(c for c in parent.children if c.id != node_id)


def children_of(roots: Sequence[Node], parent_id: Optional[str]) -> Roots:
    """
    Return the sibling scope under parent_id (None means root level).

    Empty if the parent is missing or is a file.
    """
    if parent_id is None:
        return tuple(roots)
    return get_children(find_node(roots, parent_id))


def iter_nodes(roots: Sequence[Node]) -> Iterator[Node]:
    """Yield every node in depth-first pre-order."""
    for node in roots:
        yield node
        if isinstance(node, FolderNode):
            yield from iter_nodes(node.children)


def is_descendant(roots: Sequence[Node], ancestor_id: str, candidate_id: Optional[str]) -> bool:
    """
    Walk upward from candidate_id and report whether ancestor_id is met.

    A node counts as its own descendant, so moving a node into itself is
    caught by the same check.
    """
    current = candidate_id
    while current is not None:
        if current == ancestor_id:
            return True
        current = parent_id_of(roots, current)
    return False


def find_by_path(roots: Sequence[Node], path: str) -> Optional[Node]:
    """
    Resolve a slash-separated name path (case-insensitive per scope).

    Example: "Documents/Projects/project-a.md".
    """
    parts = [p for p in path.strip().split(NAME_PATH_SEPARATOR) if p]
    if not parts:
        return None

    scope: Sequence[Node] = roots
    node: Optional[Node] = None
    for part in parts:
        wanted = part.lower()
        node = next((n for n in scope if n.name.lower() == wanted), None)
        if node is None:
            return None
        scope = get_children(node)
    return node


def containing_folder_id(roots: Sequence[Node], node_id: Optional[str]) -> Optional[str]:
    """
    Resolve the folder that new entries should land in for node_id.

    A folder resolves to itself; a file to its parent (None at root);
    a missing node to None.
    """
    if node_id is None:
        return None
    node = find_node(roots, node_id)
    if node is None:
        return None
    if isinstance(node, FolderNode):
        return node.id
    return parent_id_of(roots, node_id)


def active_folder_id(state: TreeState) -> Optional[str]:
    return containing_folder_id(state.roots, state.active_node_id)
