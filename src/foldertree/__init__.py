from __future__ import annotations

"""
foldertree: a virtual file/folder tree with commit-after-confirm persistence.
"""

__version__ = "0.1.0"
