from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration merge
(defaults, persistent file, CLI overrides), backend selection, seeding the
tree store, executing one command and rendering the resulting tree.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional, Tuple

from foldertree.core.config_validator import validate_config
from foldertree.core.services.importer import import_entries
from foldertree.core.services.tree_store import TreeStore
from foldertree.core.tree.locator import find_by_path
from foldertree.core.tree.validation import make_validator
from foldertree.domain.config import get_default_config, load_config
from foldertree.domain.results import ConflictPolicy
from foldertree.domain.tree_models import FolderNode, Node, roots_to_list
from foldertree.infra.fs import iter_local_entries
from foldertree.infra.logging import LoggingConfig, configure_logging, get_logger
from foldertree.infra.memory_backend import InMemoryBackend, sample_tree
from foldertree.infra.network import FilesApiClient
from foldertree.interface.cli import args as cli_args
from foldertree.interface.cli.render import render_tree

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


class _UsageError(Exception):
    """A path argument could not be resolved."""


# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: 0 on success, 1 on a failed or declined command, 2 on usage errors.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 1. Configuration hierarchy
    base_conf = get_default_config() if args.use_defaults else load_config(args.config_path)
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    conf, warnings = validate_config(raw_conf)

    # 2. Logging bootstrap
    configure_logging(LoggingConfig.from_app_config(conf))
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    # 3. Store wiring
    store = build_store(conf, demo=args.demo)
    loaded = store.load()
    if not loaded.ok:
        print(f"ERROR: Could not load tree: {loaded.message}", file=sys.stderr)
        return EXIT_FAILED

    # 4. Command execution
    try:
        ok, message = _dispatch(store, args)
    except _UsageError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE

    # 5. Output rendering
    state = store.snapshot
    if args.json_output:
        payload: Dict[str, Any] = {"ok": ok, "message": message, "tree": roots_to_list(state.roots)}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        if message:
            print(message if ok else f"ERROR: {message}", file=sys.stdout if ok else sys.stderr)
        for line in render_tree(state.roots):
            print(line)

    return EXIT_OK if ok else EXIT_FAILED


def build_store(conf: Dict[str, Any], demo: bool = False) -> TreeStore:
    """Create a tree store wired to the configured persistence backend."""
    if demo:
        backend: Any = InMemoryBackend(seed=sample_tree())
        logger.debug("Using in-memory demo backend.")
    else:
        backend = FilesApiClient(conf["api_base_url"], timeout=conf["request_timeout"])
        logger.debug(f"Using files API at {conf['api_base_url']}.")

    return TreeStore(
        backend,
        validator=make_validator(conf["max_name_length"]),
        default_folder_name=conf["default_folder_name"],
        drag_dwell_ms=conf["drag_dwell_ms"],
    )


# -----------------------------------------------------------------------------
# COMMAND DISPATCH
# -----------------------------------------------------------------------------

def _dispatch(store: TreeStore, args: Any) -> Tuple[bool, str]:
    """Run the selected subcommand and return (ok, message)."""
    command = args.command

    if command == "list":
        return True, ""

    if command in ("mkdir", "touch"):
        parent_id = _resolve_folder(store, args.parent)
        name = args.name
        if args.unique:
            if command == "mkdir":
                name = store.get_unique_folder_name(parent_id, name)
            else:
                name = store.get_unique_file_name(parent_id, name)
        if command == "mkdir":
            result = store.add_folder(name, parent_id)
        else:
            result = store.add_file(name, parent_id)
        return result.ok, result.message or f"Created '{name}'."

    if command == "rm":
        node = _resolve_node(store, args.path)
        result = store.delete(node.id)
        return result.ok, result.message or f"Deleted '{args.path}'."

    if command == "mv":
        node = _resolve_node(store, args.path)
        target_id = _resolve_folder(store, args.target)
        moved = store.move_node(node.id, target_id, ConflictPolicy(args.on_conflict))
        if moved.ok and moved.new_name:
            return True, f"Moved as '{moved.new_name}'."
        return moved.ok, moved.message or "Moved."

    if command == "rename":
        node = _resolve_node(store, args.path)
        result = store.rename(node.id, args.new_name)
        return result.ok, result.message or f"Renamed to '{args.new_name}'."

    if command == "import":
        if not os.path.isdir(args.source):
            raise _UsageError(f"Local directory does not exist: {args.source}")
        parent_id = _resolve_folder(store, args.parent)
        report = import_entries(store, iter_local_entries(args.source), parent_id)
        message = f"Imported {report.created} item(s)."
        if report.failed:
            message += f" Failed: {', '.join(report.failed)}."
        if report.skipped:
            message += f" Skipped {report.skipped} item(s)."
        return report.ok, message

    raise _UsageError(f"Unknown command: {command}")


def _resolve_node(store: TreeStore, path: str) -> Node:
    node = find_by_path(store.roots, path)
    if node is None:
        raise _UsageError(f"No such item: {path}")
    return node


def _resolve_folder(store: TreeStore, path: Optional[str]) -> Optional[str]:
    """Resolve an optional folder path to its id (None means root level)."""
    if not path:
        return None
    node = _resolve_node(store, path)
    if not isinstance(node, FolderNode):
        raise _UsageError(f"Not a folder: {path}")
    return node.id


# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow-merge known, non-None override keys into base."""
    out = dict(base)
    for k, v in overrides.items():
        if k in out and v is not None:
            out[k] = v
    return out


if __name__ == "__main__":
    sys.exit(main())
