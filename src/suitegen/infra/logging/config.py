from __future__ import annotations

"""
Logging Configuration Models.

Settings consumed by `configure_logging`. The CLI derives them from its
`--debug`, `--quiet` and `--log-file` flags; library code never builds one.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# Accepted level names, case-insensitive
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
    Settings of the logging subsystem.

    Attributes:
        level: Root severity threshold.
        console: Emit records on stderr.
        log_file: Rotated log file, or None to disable file output.
        max_bytes: Size at which the log file is rotated.
        backup_count: Rotated files kept next to the active one.
        logger_levels: (logger name, level) overrides applied after the root
                       level, e.g. to silence per-fixture runtime records.
        console_fmt: Format of stderr records.
        file_fmt: Format of file records.
        datefmt: Timestamp format of file records.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 3
    logger_levels: Tuple[Tuple[str, str], ...] = ()

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
