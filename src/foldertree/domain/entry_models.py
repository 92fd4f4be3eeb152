from __future__ import annotations

"""
Dropped Entry Data Models.

Shape of the lazily-produced hierarchy handed over by an external entry
source (a drop gesture, a local directory walk). Traversal is one-shot.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Union


@dataclass(frozen=True)
class FileEntry:
    """
    Leaf produced by the entry source.

    Attributes:
        name: Entry name as dropped.
        handle: Opaque content handle (never read by the tree core).
    """
    name: str
    handle: Any = None


@dataclass(frozen=True)
class DirectoryEntry:
    """
    Container produced by the entry source.

    Attributes:
        name: Directory name as dropped.
        entries: Zero-argument callable yielding the nested entries lazily.
    """
    name: str
    entries: Callable[[], Iterable["Entry"]] = field(default=lambda: ())


Entry = Union[FileEntry, DirectoryEntry]
