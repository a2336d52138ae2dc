"""Backup manager — full-copy snapshots of save directories.

Directory structure:
  {backups_root}/{save_name}/
    └── {timestamp}/{save_name}/...copied save content...
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Callable, Iterable, Sequence

from loguru import logger

from savekeeper.core.fsops import copy_tree, now_timestamp
from savekeeper.core.restore import RestoreManager, RestoreResult
from savekeeper.core.trash import Trash, TrashEntry
from savekeeper.errors import BackupError
from savekeeper.models.backup import Backup, BackupMap
from savekeeper.models.save import Save


def find_unused_buckets(saves: Sequence[Save], backup_map: BackupMap) -> list[Path]:
    """Bucket directories whose save name no longer exists among ``saves``."""
    live_names = {save.name for save in saves}
    return [
        backups[0].bucket_dir
        for name, backups in backup_map.items()
        if name not in live_names and backups
    ]


class BackupManager:
    """Create, apply, delete and prune backups. Holds no state between calls."""

    def __init__(
        self,
        backups_root: Path,
        trash: Trash,
        copier: Callable[[Path, Path], None] = copy_tree,
        clock: Callable[[], str] = now_timestamp,
    ) -> None:
        self._root = backups_root
        self._trash = trash
        self._copy = copier
        self._clock = clock
        self._restore = RestoreManager(trash, copier)

    @property
    def backups_root(self) -> Path:
        return self._root

    # ── Create ──

    def create_backup(self, save: Save) -> Backup:
        """
        Copy ``save.path`` into a new timestamped snapshot.

        A failed copy leaves the partial snapshot on disk; it shows up on the
        next scan and has to be deleted by hand.
        """
        if not save.path.is_dir():
            raise BackupError(f"Save not found: {save.path}")

        name = self._clock()
        snapshot_dir = self._root / save.name / name
        if snapshot_dir.exists():
            raise BackupError(f"Backup {name} of {save.name} already exists")

        dest = snapshot_dir / save.name
        try:
            dest.mkdir(parents=True)
            self._copy(save.path, dest)
        except (OSError, shutil.Error) as e:
            logger.error(f"Backup of {save.name} failed, partial copy at {snapshot_dir}: {e}")
            raise BackupError(f"Failed to back up {save.name}: {e}") from e

        logger.info(f"Created backup {name} for {save.name}")
        return Backup(name=name, path=dest)

    # ── Apply ──

    def apply_backup(self, save: Save, backup_path: Path) -> RestoreResult:
        """Overwrite the live save with a backup's content directory."""
        return self._restore.apply(save, backup_path)

    # ── Delete ──

    def delete_backup(self, path: Path) -> TrashEntry:
        """Move one snapshot (its timestamp directory) to the trash."""
        entry = self._trash.move_to_trash(Path(path))
        logger.info(f"Deleted backup {Path(path).name}")
        return entry

    def delete_backup_many(self, paths: Iterable[Path]) -> list[TrashEntry]:
        """Trash each path in order; stops at the first failure."""
        entries: list[TrashEntry] = []
        for path in paths:
            entries.append(self._trash.move_to_trash(Path(path)))
        logger.info(f"Deleted {len(entries)} backup path(s)")
        return entries

    # ── Prune ──

    def prune_unused(self, saves: Sequence[Save], backup_map: BackupMap) -> list[Path]:
        """Trash every bucket whose save no longer exists."""
        unused = find_unused_buckets(saves, backup_map)
        if not unused:
            logger.debug("No unused backups to prune")
            return []

        self.delete_backup_many(unused)
        logger.info(f"Pruned backups of {len(unused)} removed save(s)")
        return unused
