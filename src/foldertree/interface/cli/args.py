from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates parsed namespaces into
configuration overrides.
"""

import argparse
from typing import Any, Dict

from foldertree.domain.results import ConflictPolicy

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the foldertree CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="foldertree",
        description="Inspect and edit a remote virtual file tree.",
    )

    # --- Backend & Configuration ---
    p.add_argument("--api-url", dest="api_base_url", default=None,
                   help="Base URL of the files API server.")
    p.add_argument("--timeout", dest="request_timeout", type=float, default=None,
                   help="Request timeout in seconds.")
    p.add_argument("--demo", action="store_true",
                   help="Use an in-memory backend seeded with sample data.")
    p.add_argument("--config", dest="config_path", default=None,
                   help="Path to a JSON configuration file.")
    p.add_argument("--use-defaults", action="store_true",
                   help="Ignore the saved configuration file.")

    # --- Output & Diagnostics ---
    p.add_argument("--json", dest="json_output", action="store_true",
                   help="Print the result and resulting tree as JSON.")
    p.add_argument("--debug", action="store_true", help="Enable debug logging.")
    p.add_argument("--log-file", dest="log_file", default=None,
                   help="Also write logs to this file.")

    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Show the tree.")

    for name, help_text in (("mkdir", "Create a folder."), ("touch", "Create a file.")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("name")
        cmd.add_argument("--parent", default=None, help="Destination folder path.")
        cmd.add_argument("--unique", action="store_true",
                         help="Append a (n) counter instead of failing on a duplicate name.")

    rm = sub.add_parser("rm", help="Delete a file or folder.")
    rm.add_argument("path")

    mv = sub.add_parser("mv", help="Move a node into a folder (root if omitted).")
    mv.add_argument("path")
    mv.add_argument("target", nargs="?", default=None)
    mv.add_argument("--on-conflict", dest="on_conflict", default=ConflictPolicy.REPORT.value,
                    choices=[c.value for c in ConflictPolicy],
                    help="What to do when the destination already has that name.")

    rename = sub.add_parser("rename", help="Rename a node.")
    rename.add_argument("path")
    rename.add_argument("new_name")

    imp = sub.add_parser("import", help="Import a local directory tree.")
    imp.add_argument("source", help="Local directory to import.")
    imp.add_argument("--parent", default=None, help="Destination folder path.")

    return p


# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Map CLI flags to configuration keys (None means 'not provided')."""
    overrides: Dict[str, Any] = {
        "api_base_url": args.api_base_url,
        "request_timeout": args.request_timeout,
        "log_file": args.log_file,
    }
    if args.debug:
        overrides["log_level"] = "DEBUG"
    return overrides
