"""Engine error types — every file-system failure surfaces as a BackupError."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from savekeeper.core.restore import RestoreState


class BackupError(Exception):
    """An I/O failure during a scan or a backup mutation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class RestoreError(BackupError):
    """
    Failure while applying a backup.

    ``state`` is the last state the restore reached. When it is ``RENAMED``
    the live save has been moved to ``tmp_path`` and needs manual recovery.
    """

    def __init__(
        self,
        message: str,
        state: RestoreState,
        tmp_path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.state = state
        self.tmp_path = tmp_path
