"""File-system primitives — directory copy, timestamps and metadata."""

from __future__ import annotations

import shutil
from datetime import datetime
from pathlib import Path

from savekeeper.models.backup import TIMESTAMP_FORMAT

DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def now_timestamp() -> str:
    """Local-time backup token, e.g. ``2024_01_01_12_00_00``."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def format_time(timestamp: float) -> str:
    """Format a POSIX timestamp for display (local time)."""
    return datetime.fromtimestamp(timestamp).strftime(DISPLAY_TIME_FORMAT)


def file_exists(path: Path) -> bool:
    try:
        return path.exists()
    except OSError:
        return False


def modified_time(path: Path) -> float:
    return path.stat().st_mtime


def copy_tree(source: Path, dest: Path) -> None:
    """
    Recursively copy the *contents* of ``source`` into ``dest``.

    ``dest`` is created when missing and merged into when it exists.
    File metadata is preserved. Raises ``OSError`` (``shutil.Error`` for
    partial failures).
    """
    if not source.is_dir():
        raise NotADirectoryError(f"Not a directory: {source}")
    shutil.copytree(source, dest, symlinks=True, dirs_exist_ok=True)
