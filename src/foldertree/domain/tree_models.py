from __future__ import annotations

"""
Tree Structure Data Models.

Provides the two node variants of the virtual namespace, the immutable
state snapshot owned by the store, and the wire (de)serialization used
by the persistence backends and the CLI.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileNode:
    """
    Represents a leaf entry (file) in the tree.

    Attributes:
        id: Globally unique node identifier.
        name: Display name, unique per sibling scope (case-insensitive).
    """
    id: str
    name: str


@dataclass(frozen=True)
class FolderNode:
    """
    Represents a container entry (folder) in the tree.

    Attributes:
        id: Globally unique node identifier.
        name: Display name, unique per sibling scope (case-insensitive).
        children: Ordered child nodes (insertion order is render order).
        expanded: Whether the folder currently reveals its children.
    """
    id: str
    name: str
    children: Tuple["Node", ...] = ()
    expanded: bool = False


Node = Union[FileNode, FolderNode]
Roots = Tuple[Node, ...]

FILE_TYPE = "file"
FOLDER_TYPE = "folder"


@dataclass(frozen=True)
class TreeState:
    """
    Immutable snapshot published by the tree store.

    Attributes:
        roots: Top-level nodes in render order.
        active_node_id: Currently selected node, if any.
        pending_operation: True while a persistence call is in flight.
        dragging_node_id: Node being dragged in the current gesture, if any.
    """
    roots: Roots = field(default_factory=tuple)
    active_node_id: Optional[str] = None
    pending_operation: bool = False
    dragging_node_id: Optional[str] = None


# -----------------------------------------------------------------------------
# CAPABILITY CHECKS
# -----------------------------------------------------------------------------

def is_folder(node: Optional[Node]) -> bool:
    """Return True if the node may contain children."""
    return isinstance(node, FolderNode)


has_children = is_folder


def node_type(node: Node) -> str:
    return FOLDER_TYPE if isinstance(node, FolderNode) else FILE_TYPE


def get_children(node: Optional[Node]) -> Roots:
    """Return the children of a folder, or an empty tuple for files."""
    if isinstance(node, FolderNode):
        return node.children
    return ()


def new_node_id() -> str:
    """Mint a fresh, never reused node identifier."""
    return uuid.uuid4().hex


# -----------------------------------------------------------------------------
# WIRE FORMAT
# -----------------------------------------------------------------------------

def node_to_dict(node: Node) -> Dict[str, Any]:
    """Serialize a node (and its subtree) into the JSON wire shape."""
    if isinstance(node, FolderNode):
        return {
            "id": node.id,
            "name": node.name,
            "type": FOLDER_TYPE,
            "expanded": node.expanded,
            "children": [node_to_dict(c) for c in node.children],
        }
    return {"id": node.id, "name": node.name, "type": FILE_TYPE}


def node_from_dict(data: Dict[str, Any]) -> Node:
    """
    Deserialize a node from its JSON wire shape.

    Raises:
        ValueError: If the payload is not a mapping, lacks an id/name
                    or declares an unknown node type.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Invalid node payload: expected object, received {type(data).__name__}.")

    node_id = data.get("id")
    name = data.get("name")
    if node_id is None or name is None:
        raise ValueError("Invalid node payload: 'id' and 'name' are required.")

    kind = data.get("type", FILE_TYPE)
    if kind == FILE_TYPE:
        return FileNode(id=str(node_id), name=str(name))
    if kind == FOLDER_TYPE:
        children = data.get("children") or []
        return FolderNode(
            id=str(node_id),
            name=str(name),
            children=tuple(node_from_dict(c) for c in children),
            expanded=bool(data.get("expanded", False)),
        )
    raise ValueError(f"Invalid node payload: unknown type '{kind}'.")


def roots_from_list(items: Sequence[Dict[str, Any]]) -> Roots:
    return tuple(node_from_dict(item) for item in items)


def roots_to_list(roots: Sequence[Node]) -> List[Dict[str, Any]]:
    return [node_to_dict(n) for n in roots]
