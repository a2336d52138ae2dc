"""Backup models — timestamped snapshots and the per-save backup map."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

# Lexical order of this format equals chronological order
TIMESTAMP_FORMAT = "%Y_%m_%d_%H_%M_%S"


@dataclass(frozen=True)
class Backup:
    """
    One snapshot of a save.

    Layout on disk::

        <backups-root>/<save-name>/<timestamp>/<save-name>/...content...

    ``path`` points at the innermost content directory.
    """

    name: str  # Timestamp token, see TIMESTAMP_FORMAT
    path: Path

    @property
    def snapshot_dir(self) -> Path:
        """The timestamp directory — the unit removed by a delete."""
        return self.path.parent

    @property
    def bucket_dir(self) -> Path:
        return self.path.parent.parent

    @property
    def save_name(self) -> str:
        return self.path.name

    @property
    def created_at(self) -> datetime | None:
        try:
            return datetime.strptime(self.name, TIMESTAMP_FORMAT)
        except ValueError:
            return None


class BackupMap(dict[str, list[Backup]]):
    """
    Save name → backups, oldest first.

    Scanners never store an empty list under a key.
    """

    def latest(self, save_name: str) -> Backup | None:
        backups = self.get(save_name)
        return backups[-1] if backups else None

    def count(self) -> int:
        return sum(len(backups) for backups in self.values())
