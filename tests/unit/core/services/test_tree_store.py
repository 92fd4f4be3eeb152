from __future__ import annotations

"""
Unit tests for the TreeStore state container.

Verifies:
1. Commit-after-confirm for add/delete (no change on persistence failure).
2. Rename validation and conflict reporting.
3. Move decisions (declines, conflict policies) and the drag session.
4. Subscription semantics and the pending-operation flag.
"""

import threading
from unittest.mock import MagicMock

from foldertree.core.services.tree_store import TreeStore
from foldertree.core.tree.validation import make_validator
from foldertree.core.tree.locator import children_of, find_node, iter_nodes, parent_id_of
from foldertree.domain.results import ConflictPolicy, ErrorKind, MoveOutcome, ValidationResult
from foldertree.domain.tree_models import FolderNode, TreeState
from foldertree.infra.memory_backend import InMemoryBackend


def _assert_unique_siblings(roots) -> None:
    scopes = [roots] + [n.children for n in iter_nodes(roots) if isinstance(n, FolderNode)]
    for scope in scopes:
        names = [n.name.lower() for n in scope]
        assert len(names) == len(set(names))


# -----------------------------------------------------------------------------
# LOAD & SUBSCRIBE
# -----------------------------------------------------------------------------

def test_load_seeds_tree(store, backend) -> None:
    assert [n.name for n in store.roots] == ["Documents", "Images", "readme.md"]
    assert store.snapshot.pending_operation is False
    assert backend.calls[0][0] == "list"


def test_load_failure_keeps_empty_tree(id_factory) -> None:
    s = TreeStore(InMemoryBackend(fail_on={"list"}), id_factory=id_factory)
    result = s.load()

    assert result.ok is False
    assert result.error_kind is ErrorKind.PERSISTENCE
    assert s.roots == ()
    assert s.snapshot.pending_operation is False


def test_subscribe_delivers_current_and_future_snapshots(store) -> None:
    received = []
    unsubscribe = store.subscribe(received.append)

    assert received == [store.snapshot]
    store.set_active("3")
    assert received[-1].active_node_id == "3"

    unsubscribe()
    store.set_active(None)
    assert received[-1].active_node_id == "3"


def test_failing_subscriber_does_not_block_others(store) -> None:
    seen = []
    store.subscribe(MagicMock(side_effect=RuntimeError("boom")))
    store.subscribe(seen.append)

    store.toggle_expand("2")
    assert find_node(seen[-1].roots, "2").expanded is True


# -----------------------------------------------------------------------------
# ADD (commit-after-confirm)
# -----------------------------------------------------------------------------

def test_docs_scenario(empty_store) -> None:
    """Empty root -> docs folder -> notes.txt inside it -> pre-resolved duplicate."""
    result = empty_store.add_folder("docs")
    assert result.ok
    docs = find_node(empty_store.roots, result.node_id)
    assert docs.name == "docs"
    assert docs.expanded is False

    assert empty_store.add_file("notes.txt", docs.id).ok
    docs = find_node(empty_store.roots, docs.id)
    assert docs.expanded is True
    assert [c.name for c in docs.children] == ["notes.txt"]

    name = empty_store.get_unique_file_name(docs.id, "notes.txt")
    assert name == "notes(1).txt"
    assert empty_store.add_file(name, docs.id).ok
    assert [c.name for c in find_node(empty_store.roots, docs.id).children] == ["notes.txt", "notes(1).txt"]


def test_add_sends_create_then_inserts(store, backend) -> None:
    result = store.add_file("todo.md", "1-3")

    assert result.ok
    assert result.node_id == "n1"
    assert backend.calls[-1] == ("create", {"name": "todo.md", "type": "file", "parentId": "1-3"})
    assert parent_id_of(store.roots, "n1") == "1-3"


def test_add_failure_leaves_tree_unchanged(sample_roots, id_factory) -> None:
    s = TreeStore(InMemoryBackend(fail_on={"create"}), id_factory=id_factory)
    s.initialize(sample_roots)
    before = s.snapshot

    result = s.add_folder("Archive")

    assert result.ok is False
    assert result.error_kind is ErrorKind.PERSISTENCE
    assert s.snapshot == before
    assert s.snapshot.pending_operation is False


def test_add_sets_pending_during_call(store) -> None:
    flags = []
    store.subscribe(lambda state: flags.append(state.pending_operation))
    store.add_file("x.txt")

    assert flags == [False, True, False]


def test_add_rejects_duplicate_without_calling_backend(store, backend) -> None:
    calls_before = len(backend.calls)
    result = store.add_file("README.md")

    assert result.error_kind is ErrorKind.CONFLICT
    assert len(backend.calls) == calls_before


def test_add_rejects_missing_or_file_parent(store, backend) -> None:
    calls_before = len(backend.calls)

    assert store.add_file("a.txt", "missing").error_kind is ErrorKind.NOT_FOUND
    assert store.add_file("a.txt", "3").error_kind is ErrorKind.NOT_FOUND
    assert len(backend.calls) == calls_before


def test_add_rejects_invalid_name(store) -> None:
    result = store.add_folder("a/b")
    assert result.error_kind is ErrorKind.VALIDATION
    assert "/" in result.message


def test_add_survives_unexpected_backend_exception(sample_roots) -> None:
    backend = MagicMock()
    backend.create.side_effect = ConnectionError("socket closed")
    s = TreeStore(backend)
    s.initialize(sample_roots)

    result = s.add_file("x.txt")

    assert result.error_kind is ErrorKind.PERSISTENCE
    assert "socket closed" in result.message
    assert s.roots == sample_roots
    assert s.snapshot.pending_operation is False


def test_local_commands_run_while_create_is_in_flight(sample_roots, id_factory) -> None:
    """Selection and expansion stay responsive; the insert lands on the newest snapshot."""
    entered = threading.Event()
    release = threading.Event()

    backend = MagicMock()

    def slow_create(*args, **kwargs):
        entered.set()
        release.wait(5)
        return {"success": True}

    backend.create.side_effect = slow_create
    s = TreeStore(backend, id_factory=id_factory)
    s.initialize(sample_roots)

    results = []
    worker = threading.Thread(target=lambda: results.append(s.add_file("late.txt", "2")))
    worker.start()
    assert entered.wait(5)

    assert s.snapshot.pending_operation is True
    s.set_active("3")
    s.toggle_expand("1")
    release.set()
    worker.join(5)

    assert results[0].ok
    state = s.snapshot
    assert state.pending_operation is False
    assert state.active_node_id == "3"
    assert find_node(state.roots, "1").expanded is False
    assert parent_id_of(state.roots, "n1") == "2"


# -----------------------------------------------------------------------------
# DELETE
# -----------------------------------------------------------------------------

def test_delete_removes_subtree_and_clears_selection(store, backend) -> None:
    store.set_active("1-3-1")
    result = store.delete("1-3")

    assert result.ok
    assert backend.calls[-1] == ("delete", {"id": "1-3"})
    assert find_node(store.roots, "1-3") is None
    assert store.snapshot.active_node_id is None


def test_delete_keeps_unrelated_selection(store) -> None:
    store.set_active("3")
    store.delete("2")
    assert store.snapshot.active_node_id == "3"


def test_delete_failure_leaves_tree_unchanged(sample_roots) -> None:
    s = TreeStore(InMemoryBackend(fail_on={"delete"}))
    s.initialize(sample_roots)
    s.set_active("1")
    before = s.snapshot

    result = s.delete("1")

    assert result.error_kind is ErrorKind.PERSISTENCE
    assert s.snapshot == before


def test_delete_missing_node(store, backend) -> None:
    calls_before = len(backend.calls)
    assert store.delete("missing").error_kind is ErrorKind.NOT_FOUND
    assert len(backend.calls) == calls_before


# -----------------------------------------------------------------------------
# RENAME
# -----------------------------------------------------------------------------

def test_rename_success(store, backend) -> None:
    calls_before = len(backend.calls)
    result = store.rename("1-2", "ideas.txt")

    assert result.ok
    assert find_node(store.roots, "1-2").name == "ideas.txt"
    assert len(backend.calls) == calls_before


def test_rename_case_only_change_is_allowed(store) -> None:
    assert store.rename("3", "README.md").ok
    assert find_node(store.roots, "3").name == "README.md"


def test_rename_conflict(store) -> None:
    before = store.snapshot
    result = store.rename("1-2", "Report.pdf")

    assert result.error_kind is ErrorKind.CONFLICT
    assert store.snapshot is before


def test_rename_validation_reason_is_verbatim(sample_roots) -> None:
    validator = MagicMock(return_value=ValidationResult(False, "No emoji please"))
    s = TreeStore(InMemoryBackend(), validator=validator)
    s.initialize(sample_roots)

    result = s.rename("3", "x")

    assert result.error_kind is ErrorKind.VALIDATION
    assert result.message == "No emoji please"
    validator.assert_called_once_with("x")


def test_rename_missing_node(store) -> None:
    assert store.rename("missing", "x").error_kind is ErrorKind.NOT_FOUND


def test_check_duplicate(store) -> None:
    assert store.check_duplicate("1-2", "REPORT.pdf") is True
    assert store.check_duplicate("1-2", "notes.txt") is False


# -----------------------------------------------------------------------------
# MOVE
# -----------------------------------------------------------------------------

def test_move_into_descendant_is_declined(store) -> None:
    before = store.snapshot
    result = store.move_node("1", "1-3")

    assert result.ok is False
    assert result.outcome is MoveOutcome.CYCLE
    assert result.declined
    assert result.error_kind is ErrorKind.DECLINED
    assert store.snapshot is before


def test_move_to_same_parent_is_noop(store) -> None:
    before = store.snapshot
    result = store.move_node("1-1", "1")

    assert result.outcome is MoveOutcome.NO_OP
    assert store.snapshot is before


def test_move_success(store) -> None:
    result = store.move_node("3", "2")

    assert result.ok
    assert parent_id_of(store.roots, "3") == "2"
    assert [n.id for n in store.roots] == ["1", "2"]


def test_move_conflict_reported_by_default(store) -> None:
    store.add_file("notes.txt")
    before = store.snapshot

    result = store.move_node("n1", "1")

    assert result.outcome is MoveOutcome.CONFLICT
    assert not result.declined
    assert store.snapshot is before


def test_move_conflict_rename_policy(store) -> None:
    store.add_file("notes.txt")
    result = store.move_node("n1", "1", ConflictPolicy.RENAME)

    assert result.ok
    assert result.new_name == "notes(1).txt"
    assert [c.name for c in children_of(store.roots, "1")][-1] == "notes(1).txt"
    _assert_unique_siblings(store.roots)


def test_move_conflict_overwrite_policy(store) -> None:
    store.add_file("notes.txt")
    result = store.move_node("n1", "1", ConflictPolicy.OVERWRITE)

    assert result.ok
    assert find_node(store.roots, "1-2") is None
    assert parent_id_of(store.roots, "n1") == "1"
    _assert_unique_siblings(store.roots)


def test_overwrite_never_removes_an_ancestor_of_the_moved_node(empty_store) -> None:
    outer = empty_store.add_folder("x").node_id
    inner = empty_store.add_folder("x", outer).node_id
    before = empty_store.snapshot

    result = empty_store.move_node(inner, None, ConflictPolicy.OVERWRITE)

    assert result.outcome is MoveOutcome.CONFLICT
    assert empty_store.snapshot is before



def test_overwrite_deletes_conflicting_node_on_backend(store, backend) -> None:
    store.add_file("notes.txt")
    store.set_active("1-2")

    result = store.move_node("n1", "1", ConflictPolicy.OVERWRITE)

    assert result.ok
    assert ("delete", {"id": "1-2"}) in backend.calls
    assert find_node(store.roots, "1-2") is None
    assert store.snapshot.active_node_id is None
    assert store.snapshot.pending_operation is False


def test_overwrite_failed_delete_leaves_tree_untouched(store, backend) -> None:
    """The overwritten node survives when the backend refuses the delete."""
    store.add_file("notes.txt")
    before = store.roots
    backend.fail_on.add("delete")

    result = store.move_node("n1", "1", ConflictPolicy.OVERWRITE)

    assert result.ok is False
    assert result.error_kind is ErrorKind.PERSISTENCE
    assert store.roots is before
    assert parent_id_of(store.roots, "n1") is None
    assert store.snapshot.pending_operation is False


def test_rename_policy_rejects_name_over_limit(id_factory) -> None:
    """A collision-free name that breaks the length limit is refused."""
    store = TreeStore(InMemoryBackend(), validator=make_validator(10), id_factory=id_factory)
    store.load()
    folder = store.add_folder("docs").node_id
    store.add_file("xxxxxxxxxx", folder)
    loose = store.add_file("xxxxxxxxxx").node_id
    before = store.roots

    result = store.move_node(loose, folder, ConflictPolicy.RENAME)

    assert result.ok is False
    assert result.error_kind is ErrorKind.VALIDATION
    assert result.message == "The name is too long."
    assert store.roots is before


def test_conflict_report_carries_conflict_kind(store) -> None:
    store.add_file("notes.txt")
    assert store.move_node("n1", "1").error_kind is ErrorKind.CONFLICT

def test_move_sequences_keep_tree_acyclic(store) -> None:
    for node_id, target in [("1", "1-3"), ("2", "1"), ("1", "2"), ("1-3", "2"), ("2", "1-3"), ("3", "1-3")]:
        store.move_node(node_id, target)

    for node in iter_nodes(store.roots):
        if isinstance(node, FolderNode):
            assert node.id not in [d.id for d in iter_nodes(node.children)]
    assert len(list(iter_nodes(store.roots))) == 10
    _assert_unique_siblings(store.roots)


# -----------------------------------------------------------------------------
# DRAG SESSION & LOCAL FLAGS
# -----------------------------------------------------------------------------

def test_drop_moves_dragged_node_and_clears_session(store) -> None:
    store.start_drag("2-1")
    assert store.snapshot.dragging_node_id == "2-1"

    result = store.drop("1")

    assert result.ok
    assert parent_id_of(store.roots, "2-1") == "1"
    assert store.snapshot.dragging_node_id is None


def test_new_drag_overwrites_previous(store) -> None:
    store.start_drag("2-1")
    store.start_drag("3")
    store.drop("2")
    assert parent_id_of(store.roots, "3") == "2"
    assert parent_id_of(store.roots, "2-1") == "2"


def test_drop_without_drag(store) -> None:
    result = store.drop("1")
    assert result.ok is False
    assert result.outcome is MoveOutcome.NOT_FOUND


def test_declined_drop_still_ends_gesture(store) -> None:
    store.start_drag("1")
    assert store.drop("1-3").outcome is MoveOutcome.CYCLE
    assert store.snapshot.dragging_node_id is None


def test_expansion_commands(store) -> None:
    store.toggle_expand("2")
    assert find_node(store.roots, "2").expanded is True
    store.set_expanded("2", False)
    assert find_node(store.roots, "2").expanded is False

    before = store.snapshot
    store.toggle_expand("3")
    store.set_expanded("missing", True)
    assert store.snapshot is before


def test_active_folder_and_unique_folder_name(store) -> None:
    store.set_active("1-3-1")
    assert store.active_folder_id() == "1-3"

    assert store.get_unique_folder_name(None) == "New Folder"
    store.add_folder("New Folder")
    assert store.get_unique_folder_name(None) == "New Folder(1)"
    assert store.get_unique_folder_name("1", "Projects") == "Projects(1)"


def test_initialize_resets_flags(store, sample_roots) -> None:
    store.set_active("1")
    store.start_drag("2")
    store.initialize(sample_roots)
    assert store.snapshot == TreeState(roots=sample_roots)
