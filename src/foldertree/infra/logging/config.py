from __future__ import annotations

"""
Logging Configuration Models.

LoggingConfig is derived from the application configuration dictionary
(log_level, log_file, log_max_bytes, log_backup_count) so the CLI and
embedding applications share one source of truth for diagnostics.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings for the queue-backed logging subsystem.

    Attributes:
        level: Minimum severity captured by every handler.
        console: Whether tree commands are echoed to stderr.
        log_file: Rotating log file; None disables file output.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files kept next to the active one.
        console_fmt: Terminal line format.
        file_fmt: File line format (includes the emitting module).
        datefmt: Timestamp format for file entries.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_app_config(cls, conf: Mapping[str, Any], console: bool = True) -> "LoggingConfig":
        """
        Build the logging settings from a validated foldertree configuration.

        A blank log_file means console-only logging.
        """
        return cls(
            level=str(conf.get("log_level") or "INFO"),
            console=console,
            log_file=conf.get("log_file") or None,
            max_bytes=int(conf.get("log_max_bytes", cls.max_bytes)),
            backup_count=int(conf.get("log_backup_count", cls.backup_count)),
        )
