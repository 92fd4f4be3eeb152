from __future__ import annotations

"""
Move Planner.

Decides whether a node can be relocated under a new parent. Guards run
in a fixed order (existence, target validity, cycle, no-op, name
conflict) and every verdict other than MOVE leaves the tree untouched.
"""

from typing import Optional

from foldertree.core.tree import mutator
from foldertree.core.tree.locator import (
    children_of,
    find_node,
    is_descendant,
    parent_id_of,
)
from foldertree.domain.results import MoveOutcome, MovePlan
from foldertree.domain.tree_models import FolderNode, Roots


def plan_move(roots: Roots, node_id: str, target_parent_id: Optional[str]) -> MovePlan:
    """
    Analyse relocating node_id under target_parent_id (None for root level).

    Args:
        roots: Current tree.
        node_id: Node to relocate.
        target_parent_id: Destination folder id, or None for the root scope.

    Returns:
        MovePlan: The planner verdict and the resolved participants.
    """
    node = find_node(roots, node_id)
    if node is None:
        return MovePlan(MoveOutcome.NOT_FOUND, target_parent_id=target_parent_id)

    if target_parent_id is not None:
        target = find_node(roots, target_parent_id)
        if not isinstance(target, FolderNode):
            return MovePlan(MoveOutcome.INVALID_TARGET, node=node, target_parent_id=target_parent_id)

        if is_descendant(roots, node_id, target_parent_id):
            return MovePlan(MoveOutcome.CYCLE, node=node, target_parent_id=target_parent_id)

    if parent_id_of(roots, node_id) == target_parent_id:
        return MovePlan(MoveOutcome.NO_OP, node=node, target_parent_id=target_parent_id)

    wanted = node.name.lower()
    for sibling in children_of(roots, target_parent_id):
        if sibling.name.lower() == wanted:
            return MovePlan(
                MoveOutcome.CONFLICT,
                node=node,
                target_parent_id=target_parent_id,
                conflicting_node=sibling,
            )

    return MovePlan(MoveOutcome.MOVE, node=node, target_parent_id=target_parent_id)


def apply_move(roots: Roots, plan: MovePlan) -> Roots:
    """
    Execute an accepted plan: remove from the old scope, append to the new.

    The node keeps its id and full subtree. Non-MOVE plans return roots
    unchanged.
    """
    if not plan.accepted or plan.node is None:
        return roots

    detached = mutator.remove(roots, plan.node.id)
    return mutator.insert(detached, plan.target_parent_id, plan.node)
