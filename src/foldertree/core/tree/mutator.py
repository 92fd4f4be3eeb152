from __future__ import annotations

"""
Tree Mutator.

Pure structural edits producing a new tuple of roots. Only the path from
the changed node up to the root is rebuilt; untouched subtrees are reused
by identity. Unknown ids leave the tree unchanged (the very same object
is returned).
"""

from dataclasses import replace
from typing import Callable, Optional, Sequence, Tuple

from foldertree.domain.tree_models import FolderNode, Node, Roots

NodeEdit = Callable[[Node], Optional[Node]]


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def insert(roots: Roots, parent_id: Optional[str], new_node: Node) -> Roots:
    """
    Append new_node under parent_id (None appends to the root sequence).

    Inserting into a folder expands it. A missing or file-typed parent is
    a no-op.
    """
    if parent_id is None:
        return tuple(roots) + (new_node,)

    def _append(node: Node) -> Node:
        if not isinstance(node, FolderNode):
            return node
        return replace(node, children=node.children + (new_node,), expanded=True)

    return _edit(roots, parent_id, _append)


def remove(roots: Roots, node_id: str) -> Roots:
    """Delete node_id together with its whole subtree."""
    return _edit(roots, node_id, lambda node: None)


def rename(roots: Roots, node_id: str, new_name: str) -> Roots:
    """Replace the name of node_id. Uniqueness is validated by the caller."""
    return _edit(roots, node_id, lambda node: replace(node, name=new_name))


def set_expanded(roots: Roots, node_id: str, expanded: bool) -> Roots:
    """Set the expansion flag of a folder; files are left untouched."""
    def _expand(node: Node) -> Node:
        if isinstance(node, FolderNode) and node.expanded != expanded:
            return replace(node, expanded=expanded)
        return node

    return _edit(roots, node_id, _expand)


def toggle_expanded(roots: Roots, node_id: str) -> Roots:
    def _toggle(node: Node) -> Node:
        if isinstance(node, FolderNode):
            return replace(node, expanded=not node.expanded)
        return node

    return _edit(roots, node_id, _toggle)


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _edit(roots: Roots, node_id: str, edit: NodeEdit) -> Roots:
    """
    Apply edit to node_id and rebuild its ancestor path.

    edit may return a replacement node, the same node (no change) or
    None (delete). Returns the original roots object when nothing changed.
    """
    new_roots, changed = _edit_sequence(roots, node_id, edit)
    return new_roots if changed else roots


def _edit_sequence(nodes: Sequence[Node], node_id: str, edit: NodeEdit) -> Tuple[Roots, bool]:
    for index, node in enumerate(nodes):
        if node.id == node_id:
            replacement = edit(node)
            if replacement is node:
                return tuple(nodes), False
            head = tuple(nodes[:index])
            tail = tuple(nodes[index + 1:])
            if replacement is None:
                return head + tail, True
            return head + (replacement,) + tail, True

        if isinstance(node, FolderNode):
            children, changed = _edit_sequence(node.children, node_id, edit)
            if changed:
                rebuilt = replace(node, children=children)
                return tuple(nodes[:index]) + (rebuilt,) + tuple(nodes[index + 1:]), True

    return tuple(nodes), False
