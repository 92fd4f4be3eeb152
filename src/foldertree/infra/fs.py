from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Resolves the per-user application directory and provides the local
entry source used to import a real directory into the virtual tree.
"""

import logging
import os
from typing import Iterator

from foldertree.domain.entry_models import DirectoryEntry, Entry, FileEntry

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "FolderTree"
UNIX_APP_DIR_NAME = ".foldertree"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/FolderTree
    - Linux/Mac: ~/.foldertree

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        logger.debug(f"Could not create user data dir '{path}': {e}")

    return os.path.abspath(path)


# -----------------------------------------------------------------------------
# LOCAL ENTRY SOURCE
# -----------------------------------------------------------------------------

def iter_local_entries(path: str) -> Iterator[Entry]:
    """
    Lazily yield the entries of a local directory, sorted by name.

    Subdirectories are returned as DirectoryEntry whose children are only
    listed when requested. File handles are absolute paths; contents are
    never read. Symlinked directories are treated as files to avoid loops.

    Args:
        path: Local directory to walk.

    Yields:
        Entry: File and directory entries of the current level.
    """
    try:
        with os.scandir(path) as it:
            items = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.warning(f"Local source: Cannot list '{path}': {e}")
        return

    for item in items:
        if item.is_dir(follow_symlinks=False):
            yield DirectoryEntry(name=item.name, entries=_lazy_listing(item.path))
        else:
            yield FileEntry(name=item.name, handle=os.path.abspath(item.path))


def _lazy_listing(path: str):
    return lambda: iter_local_entries(path)
