from __future__ import annotations

"""
Configuration Domain Management.

Dict-based runtime configuration persisted as JSON in the user data
directory. Missing or corrupt files fall back to defaults.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from foldertree.domain.constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_FOLDER_NAME,
    DEFAULT_TIMEOUT,
    DRAG_DWELL_MS,
    MAX_NAME_LENGTH,
)
from foldertree.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Persistence backend
        "api_base_url": DEFAULT_API_BASE_URL,
        "request_timeout": DEFAULT_TIMEOUT,

        # Tree behaviour
        "default_folder_name": DEFAULT_FOLDER_NAME,
        "max_name_length": MAX_NAME_LENGTH,
        "drag_dwell_ms": DRAG_DWELL_MS,

        # Diagnostics
        "log_level": "INFO",
        "log_file": "",
        "log_max_bytes": 1024 * 1024,
        "log_backup_count": 3,
    }


def get_config_path() -> str:
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from disk, merged over the defaults.

    Args:
        path: Explicit config file; defaults to the user data directory.

    Returns:
        Dict[str, Any]: The merged configuration (defaults on failure).
    """
    config = get_default_config()
    path = path or get_config_path()

    if not os.path.exists(path):
        logger.debug(f"Config file not found at {path}. Using defaults.")
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Using defaults.")
        return config

    config.update({k: v for k, v in data.items() if k in config})
    return config


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> bool:
    """
    Persist configuration to disk.

    Returns:
        bool: True if the file was written.
    """
    path = path or get_config_path()
    try:
        parent = os.path.dirname(os.path.abspath(path))
        os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {path}")
        return True
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
        return False
