from __future__ import annotations

"""
Tree Renderer.

Converts tree snapshots into ASCII lines for terminal output. Children
keep their insertion order; folders are suffixed with a slash.
"""

from typing import List, Optional, Sequence

from foldertree.domain.tree_models import FolderNode, Node


def render_tree(roots: Sequence[Node], active_node_id: Optional[str] = None) -> List[str]:
    """
    Render the whole tree using standard connectors (├──, └──).

    Args:
        roots: Top-level nodes.
        active_node_id: Node to highlight with a trailing marker.

    Returns:
        List[str]: One line per node.
    """
    lines: List[str] = []
    _render_level(roots, lines, "", active_node_id)
    return lines


def _render_level(nodes: Sequence[Node], lines: List[str], prefix: str, active_node_id: Optional[str]) -> None:
    total = len(nodes)
    for i, node in enumerate(nodes):
        is_last = i == total - 1
        connector = "└── " if is_last else "├── "
        label = f"{node.name}/" if isinstance(node, FolderNode) else node.name
        if node.id == active_node_id:
            label += "  *"
        lines.append(f"{prefix}{connector}{label}")

        if isinstance(node, FolderNode):
            _render_level(node.children, lines, prefix + ("    " if is_last else "│   "), active_node_id)
