from __future__ import annotations

"""
Tree State Container.

Owns the current immutable TreeState snapshot and exposes the command
surface used by interface layers. Commands with a persistence leg follow
commit-after-confirm: the remote call runs first and the local mutation
is applied only after it succeeds.

Thread-safety: a command lock serializes commands that talk to the
backend, while a re-entrant state lock guards every snapshot swap. Local
commands (selection, expansion, rename, plain moves) therefore stay available
while a persistence call is in flight, and the confirmed mutation is
applied to whatever snapshot is current when the call returns.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import replace
from typing import Callable, Iterator, List, Optional

from foldertree.core.tree import mutator
from foldertree.core.tree.locator import (
    active_folder_id,
    children_of,
    find_node,
    siblings_of,
)
from foldertree.core.tree.move_planner import apply_move, plan_move
from foldertree.core.tree.naming import is_duplicate, unique_file_name, unique_folder_name
from foldertree.core.tree.validation import NameValidator, validate_name
from foldertree.domain.constants import DEFAULT_FOLDER_NAME, DRAG_DWELL_MS
from foldertree.domain.persistence import FilePersistence
from foldertree.domain.results import (
    CommandResult,
    ConflictPolicy,
    ErrorKind,
    MoveOutcome,
    MoveResult,
    create_error_result,
    create_success_result,
)
from foldertree.domain.tree_models import (
    FILE_TYPE,
    FOLDER_TYPE,
    FileNode,
    FolderNode,
    Node,
    Roots,
    TreeState,
    new_node_id,
    roots_from_list,
)

logger = logging.getLogger(__name__)

Subscriber = Callable[[TreeState], None]

_DECLINE_MESSAGES = {
    MoveOutcome.NOT_FOUND: "The node to move no longer exists.",
    MoveOutcome.INVALID_TARGET: "The drop target is not a folder.",
    MoveOutcome.CYCLE: "A folder cannot be moved into itself or one of its subfolders.",
    MoveOutcome.NO_OP: "The node is already in that folder.",
}


class TreeStore:
    """
    Single logical owner of the file/folder tree.

    Every public command either publishes a complete, invariant-preserving
    snapshot or leaves the previous snapshot untouched.
    """

    def __init__(
            self,
            persistence: FilePersistence,
            validator: Optional[NameValidator] = None,
            id_factory: Callable[[], str] = new_node_id,
            default_folder_name: str = DEFAULT_FOLDER_NAME,
            drag_dwell_ms: int = DRAG_DWELL_MS,
    ) -> None:
        """
        Args:
            persistence: Remote backend receiving create/delete calls.
            validator: Name validation collaborator used by rename and add.
            id_factory: Source of fresh node identifiers.
            default_folder_name: Base name proposed for new folders.
            drag_dwell_ms: Hover time before a drop-target folder auto-expands.
        """
        self._persistence = persistence
        self._validator: NameValidator = validator or validate_name
        self._id_factory = id_factory
        self.default_folder_name = default_folder_name
        self.drag_dwell_ms = drag_dwell_ms

        self._state = TreeState()
        self._state_lock = threading.RLock()
        self._command_lock = threading.Lock()
        self._subscribers: List[Subscriber] = []

    # -------------------------------------------------------------------------
    # Snapshot & Subscription
    # -------------------------------------------------------------------------

    @property
    def snapshot(self) -> TreeState:
        with self._state_lock:
            return self._state

    @property
    def roots(self) -> Roots:
        return self.snapshot.roots

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a subscriber and immediately deliver the current snapshot.

        Each later emission replaces, never patches, the previous one.

        Returns:
            Callable[[], None]: Function removing the subscription.
        """
        with self._state_lock:
            self._subscribers.append(callback)
            self._notify(callback, self._state)

        def _unsubscribe() -> None:
            with self._state_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return _unsubscribe

    def initialize(self, roots: Roots) -> None:
        """Replace the whole tree and reset all session flags."""
        with self._state_lock:
            self._commit(TreeState(roots=tuple(roots)))
        logger.debug(f"TreeStore initialized with {len(roots)} root node(s).")

    def load(self) -> CommandResult:
        """Seed the tree from the persistence backend listing."""
        with self._command_lock, self._pending():
            try:
                roots = roots_from_list(self._persistence.list_nodes())
            except Exception as e:
                logger.error(f"TreeStore: Failed to load tree listing: {e}")
                return create_error_result(ErrorKind.PERSISTENCE, str(e))

            with self._state_lock:
                self._commit(TreeState(roots=roots))
            logger.info(f"TreeStore: Loaded {len(roots)} root node(s) from backend.")
            return create_success_result()

    # -------------------------------------------------------------------------
    # Local Commands (always succeed)
    # -------------------------------------------------------------------------

    def set_active(self, node_id: Optional[str]) -> None:
        with self._state_lock:
            if self._state.active_node_id != node_id:
                self._commit(replace(self._state, active_node_id=node_id))

    def toggle_expand(self, node_id: str) -> None:
        self._apply_roots(lambda roots: mutator.toggle_expanded(roots, node_id))

    def set_expanded(self, node_id: str, expanded: bool) -> None:
        self._apply_roots(lambda roots: mutator.set_expanded(roots, node_id, expanded))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def check_duplicate(self, node_id: str, new_name: str) -> bool:
        """Report whether renaming node_id to new_name would collide."""
        return is_duplicate(siblings_of(self.roots, node_id), new_name)

    def get_unique_folder_name(self, parent_id: Optional[str], base_name: Optional[str] = None) -> str:
        return unique_folder_name(children_of(self.roots, parent_id), base_name or self.default_folder_name)

    def get_unique_file_name(self, parent_id: Optional[str], file_name: str) -> str:
        return unique_file_name(children_of(self.roots, parent_id), file_name)

    def active_folder_id(self) -> Optional[str]:
        """Folder that new entries should be created in (None for root)."""
        return active_folder_id(self.snapshot)

    # -------------------------------------------------------------------------
    # Persistent Commands (commit-after-confirm)
    # -------------------------------------------------------------------------

    def add_file(self, name: str, parent_id: Optional[str] = None) -> CommandResult:
        return self._add(name, FILE_TYPE, parent_id)

    def add_folder(self, name: str, parent_id: Optional[str] = None) -> CommandResult:
        return self._add(name, FOLDER_TYPE, parent_id)

    def delete(self, node_id: str) -> CommandResult:
        """
        Delete a node (and its subtree) after the backend confirms.

        Clears the selection and drag session when they pointed into the
        removed subtree.
        """
        with self._command_lock:
            if find_node(self.roots, node_id) is None:
                return create_error_result(ErrorKind.NOT_FOUND, "The node no longer exists.", node_id)

            with self._pending():
                try:
                    self._persistence.delete(node_id)
                except Exception as e:
                    logger.error(f"TreeStore: Failed to delete '{node_id}': {e}")
                    return create_error_result(ErrorKind.PERSISTENCE, str(e), node_id)

                with self._state_lock:
                    roots = mutator.remove(self._state.roots, node_id)
                    self._commit(replace(_moved_state(self._state, roots), pending_operation=False))

            logger.info(f"TreeStore: Deleted node '{node_id}'.")
            return create_success_result(node_id)

    # -------------------------------------------------------------------------
    # Rename & Move
    # -------------------------------------------------------------------------

    def rename(self, node_id: str, new_name: str) -> CommandResult:
        """
        Rename a node after validation and sibling-scope duplicate check.

        Validation failures carry the validator's reason verbatim; name
        conflicts are reported with ErrorKind.CONFLICT.
        """
        with self._state_lock:
            roots = self._state.roots
            node = find_node(roots, node_id)
            if node is None:
                return create_error_result(ErrorKind.NOT_FOUND, "The node no longer exists.", node_id)

            verdict = self._validator(new_name)
            if not verdict.ok:
                return create_error_result(ErrorKind.VALIDATION, verdict.reason, node_id)

            if is_duplicate(siblings_of(roots, node_id), new_name):
                return create_error_result(
                    ErrorKind.CONFLICT,
                    f"An item named '{new_name}' already exists here.",
                    node_id,
                )

            if node.name != new_name:
                self._commit(replace(self._state, roots=mutator.rename(roots, node_id, new_name)))
                logger.info(f"TreeStore: Renamed '{node.name}' to '{new_name}'.")
            return create_success_result(node_id)

    def move_node(
            self,
            node_id: str,
            target_parent_id: Optional[str],
            policy: ConflictPolicy = ConflictPolicy.REPORT,
    ) -> MoveResult:
        """
        Relocate a node under target_parent_id (None for root level).

        Declined moves (missing node, invalid target, cycle, no-op) leave
        the state unchanged and are not errors. A name conflict is resolved
        according to policy. OVERWRITE deletes the conflicting sibling on
        the backend first and commits the removal and the move together
        only after that delete is confirmed.
        """
        with self._state_lock:
            roots = self._state.roots
            plan = plan_move(roots, node_id, target_parent_id)

            if plan.outcome in _DECLINE_MESSAGES:
                return _declined(plan.outcome, node_id)

            new_name = None
            conflicting_id = ""
            if plan.outcome is MoveOutcome.CONFLICT:
                if plan.node is None or plan.conflicting_node is None:
                    return _declined(MoveOutcome.NOT_FOUND, node_id)

                if policy is ConflictPolicy.OVERWRITE and not _contains(plan.conflicting_node, node_id):
                    conflicting_id = plan.conflicting_node.id
                elif policy is ConflictPolicy.RENAME:
                    new_name = _free_name(plan.node, children_of(roots, target_parent_id))
                    verdict = self._validator(new_name)
                    if not verdict.ok:
                        return MoveResult(
                            False, MoveOutcome.CONFLICT, verdict.reason, node_id,
                            error_kind=ErrorKind.VALIDATION,
                        )
                    plan = replace(plan, outcome=MoveOutcome.MOVE, node=replace(plan.node, name=new_name))
                else:
                    return MoveResult(
                        False,
                        MoveOutcome.CONFLICT,
                        f"An item named '{plan.node.name}' already exists in the destination.",
                        node_id,
                        error_kind=ErrorKind.CONFLICT,
                    )

            if plan.outcome is MoveOutcome.MOVE:
                self._commit(_moved_state(self._state, apply_move(roots, plan)))
                logger.info(f"TreeStore: Moved '{node_id}' under '{target_parent_id or '<root>'}'.")
                return MoveResult(True, MoveOutcome.MOVE, "", node_id, new_name)

        # The state lock is released before the command lock is taken
        return self._overwrite_move(node_id, target_parent_id, conflicting_id)

    # -------------------------------------------------------------------------
    # Drag Session
    # -------------------------------------------------------------------------

    def start_drag(self, node_id: str) -> None:
        """Record the dragged node, overwriting any previous gesture."""
        with self._state_lock:
            self._commit(replace(self._state, dragging_node_id=node_id))

    def end_drag(self) -> None:
        with self._state_lock:
            if self._state.dragging_node_id is not None:
                self._commit(replace(self._state, dragging_node_id=None))

    def drop(
            self,
            target_parent_id: Optional[str],
            policy: ConflictPolicy = ConflictPolicy.REPORT,
    ) -> MoveResult:
        """Move the dragged node under target_parent_id and end the gesture."""
        with self._state_lock:
            dragging = self._state.dragging_node_id
            self.end_drag()
        if dragging is None:
            return MoveResult(False, MoveOutcome.NOT_FOUND, "No drag in progress.", error_kind=ErrorKind.DECLINED)
        return self.move_node(dragging, target_parent_id, policy)

    # -------------------------------------------------------------------------
    # Private Helpers
    # -------------------------------------------------------------------------

    def _add(self, name: str, node_type: str, parent_id: Optional[str]) -> CommandResult:
        with self._command_lock:
            rejected = self._check_insertable(self.roots, name, parent_id)
            if rejected is not None:
                return rejected

            with self._pending():
                try:
                    self._persistence.create(name, node_type, parent_id)
                except Exception as e:
                    logger.error(f"TreeStore: Failed to create {node_type} '{name}': {e}")
                    return create_error_result(ErrorKind.PERSISTENCE, str(e))

                node: Node
                if node_type == FOLDER_TYPE:
                    node = FolderNode(id=self._id_factory(), name=name)
                else:
                    node = FileNode(id=self._id_factory(), name=name)

                with self._state_lock:
                    # Local commands may have run while the call was in flight
                    rejected = self._check_insertable(self._state.roots, name, parent_id)
                    if rejected is not None:
                        logger.warning(f"TreeStore: Confirmed {node_type} '{name}' no longer fits: {rejected.message}")
                        return rejected
                    self._commit(replace(
                        self._state,
                        roots=mutator.insert(self._state.roots, parent_id, node),
                        pending_operation=False,
                    ))

            logger.info(f"TreeStore: Created {node_type} '{name}' ({node.id}).")
            return create_success_result(node.id)

    def _overwrite_move(self, node_id: str, target_parent_id: Optional[str], conflicting_id: str) -> MoveResult:
        """Delete the conflicting sibling remotely, then remove it and move in one commit."""
        with self._command_lock:
            with self._pending():
                try:
                    self._persistence.delete(conflicting_id)
                except Exception as e:
                    logger.error(f"TreeStore: Failed to delete overwritten node '{conflicting_id}': {e}")
                    return MoveResult(
                        False, MoveOutcome.CONFLICT, str(e), node_id,
                        error_kind=ErrorKind.PERSISTENCE,
                    )

                with self._state_lock:
                    # The delete is confirmed, so it is applied even if the move no longer fits
                    roots = mutator.remove(self._state.roots, conflicting_id)
                    plan = plan_move(roots, node_id, target_parent_id)
                    if plan.outcome is MoveOutcome.MOVE:
                        roots = apply_move(roots, plan)
                    self._commit(replace(_moved_state(self._state, roots), pending_operation=False))

        logger.info(f"TreeStore: Overwrote '{conflicting_id}' with '{node_id}'.")
        if plan.outcome is not MoveOutcome.MOVE:
            if plan.outcome in _DECLINE_MESSAGES:
                return _declined(plan.outcome, node_id)
            return MoveResult(
                False, plan.outcome, "The destination changed while the move was pending.", node_id,
                error_kind=ErrorKind.CONFLICT,
            )
        return MoveResult(True, MoveOutcome.MOVE, "", node_id)

    def _check_insertable(self, roots: Roots, name: str, parent_id: Optional[str]) -> Optional[CommandResult]:
        if parent_id is not None and not isinstance(find_node(roots, parent_id), FolderNode):
            return create_error_result(ErrorKind.NOT_FOUND, "The destination folder no longer exists.", parent_id)

        verdict = self._validator(name)
        if not verdict.ok:
            return create_error_result(ErrorKind.VALIDATION, verdict.reason)

        if is_duplicate(children_of(roots, parent_id), name):
            return create_error_result(ErrorKind.CONFLICT, f"An item named '{name}' already exists here.")
        return None

    @contextmanager
    def _pending(self) -> Iterator[None]:
        """Raise pending_operation for the duration of a persistence leg."""
        with self._state_lock:
            self._commit(replace(self._state, pending_operation=True))
        try:
            yield
        finally:
            with self._state_lock:
                if self._state.pending_operation:
                    self._commit(replace(self._state, pending_operation=False))

    def _apply_roots(self, edit: Callable[[Roots], Roots]) -> None:
        with self._state_lock:
            roots = self._state.roots
            new_roots = edit(roots)
            if new_roots is not roots:
                self._commit(replace(self._state, roots=new_roots))

    def _commit(self, state: TreeState) -> None:
        """Publish a new snapshot to every subscriber. Caller holds the state lock."""
        self._state = state
        for callback in list(self._subscribers):
            self._notify(callback, state)

    @staticmethod
    def _notify(callback: Subscriber, state: TreeState) -> None:
        try:
            callback(state)
        except Exception:
            logger.exception("TreeStore: Subscriber raised while handling a snapshot.")


def _free_name(node: Node, scope: Roots) -> str:
    if isinstance(node, FolderNode):
        return unique_folder_name(scope, node.name)
    return unique_file_name(scope, node.name)


def _contains(ancestor: Node, node_id: str) -> bool:
    if ancestor.id == node_id:
        return True
    if isinstance(ancestor, FolderNode):
        return any(_contains(child, node_id) for child in ancestor.children)
    return False


def _declined(outcome: MoveOutcome, node_id: str) -> MoveResult:
    logger.info(f"TreeStore: Move of '{node_id}' declined ({outcome.value}).")
    return MoveResult(False, outcome, _DECLINE_MESSAGES[outcome], node_id, error_kind=ErrorKind.DECLINED)


def _moved_state(state: TreeState, roots: Roots) -> TreeState:
    """State with new roots, dropping selection and drag ids that no longer resolve."""
    active = state.active_node_id
    if active is not None and find_node(roots, active) is None:
        active = None
    dragging = state.dragging_node_id
    if dragging is not None and find_node(roots, dragging) is None:
        dragging = None
    return replace(state, roots=roots, active_node_id=active, dragging_node_id=dragging)
