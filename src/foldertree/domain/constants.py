from __future__ import annotations

"""
Global Domain Constants.

Centralizes the naming rules, drag timings and persistence endpoint
defaults shared by the core services and the interface layers.
"""

from typing import Tuple

# -----------------------------------------------------------------------------
# NAMING RULES
# -----------------------------------------------------------------------------
DEFAULT_FOLDER_NAME: str = "New Folder"
MAX_NAME_LENGTH: int = 255
FORBIDDEN_NAME_CHARS: Tuple[str, ...] = ("/", "\\")

# Path separator used by CLI name paths (not a filesystem path)
NAME_PATH_SEPARATOR: str = "/"

# -----------------------------------------------------------------------------
# DRAG & DROP
# -----------------------------------------------------------------------------
DRAG_DWELL_MS: int = 800

# -----------------------------------------------------------------------------
# PERSISTENCE ENDPOINT
# -----------------------------------------------------------------------------
DEFAULT_API_BASE_URL: str = "http://localhost:5173"
FILES_ENDPOINT: str = "/api/files"
DEFAULT_TIMEOUT: int = 10
USER_AGENT: str = "foldertree-client/0.1.0"
