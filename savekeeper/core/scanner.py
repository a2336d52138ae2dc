"""Scanners — enumerate live saves and existing backups from disk."""

from __future__ import annotations

from collections import Counter
from pathlib import Path

from loguru import logger

from savekeeper.core.fsops import format_time, modified_time
from savekeeper.errors import BackupError
from savekeeper.models.backup import Backup, BackupMap
from savekeeper.models.save import Save


def _subdirs(path: Path) -> list[Path]:
    """Immediate subdirectories of ``path`` in name order."""
    return sorted((p for p in path.iterdir() if p.is_dir()), key=lambda p: p.name)


class SaveScanner:
    """
    Lists live saves under ``<saves_root>/<category>/<save>``.

    ``categories`` fixes the set of category roots. When it is empty every
    subdirectory of ``saves_root`` is treated as a category.
    """

    def __init__(self, saves_root: Path, categories: tuple[str, ...] = ()) -> None:
        self._root = saves_root
        self._categories = tuple(categories)

    @property
    def saves_root(self) -> Path:
        return self._root

    def category_roots(self) -> list[Path]:
        if self._categories:
            return [self._root / name for name in self._categories]
        if not self._root.is_dir():
            return []
        try:
            return _subdirs(self._root)
        except OSError as e:
            raise BackupError(f"Failed to list saves root {self._root}: {e}") from e

    def scan_saves(self) -> list[Save]:
        """Scan every category root; missing roots contribute nothing."""
        saves: list[Save] = []
        for category_root in self.category_roots():
            if not category_root.is_dir():
                logger.debug(f"Category root missing, skipped: {category_root}")
                continue
            try:
                saves.extend(self._scan_category(category_root))
            except OSError as e:
                logger.error(f"Save scan failed at {category_root}: {e}")
                raise BackupError(f"Failed to scan saves in {category_root}: {e}") from e

        dupes = [name for name, n in Counter(s.name for s in saves).items() if n > 1]
        if dupes:
            logger.warning(f"Save names present in more than one category: {', '.join(dupes)}")

        logger.info(f"Found {len(saves)} save(s) under {self._root}")
        return saves

    def _scan_category(self, category_root: Path) -> list[Save]:
        saves: list[Save] = []
        for save_dir in _subdirs(category_root):
            mtime = modified_time(save_dir)
            saves.append(
                Save(
                    name=save_dir.name,
                    path=save_dir,
                    parent=category_root,
                    update_time=format_time(mtime),
                    category=category_root.name,
                    modified=mtime,
                )
            )
        return saves


class BackupScanner:
    """Lists backups under ``<backups_root>/<save>/<timestamp>/<save>``."""

    def __init__(self, backups_root: Path) -> None:
        self._root = backups_root

    @property
    def backups_root(self) -> Path:
        return self._root

    def scan_backups(self) -> BackupMap:
        """Build the backup map, creating the backups root on first use."""
        backup_map = BackupMap()
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            for bucket in _subdirs(self._root):
                backups = self._scan_bucket(bucket)
                if backups:
                    backup_map[bucket.name] = backups
        except OSError as e:
            logger.error(f"Backup scan failed at {self._root}: {e}")
            raise BackupError(f"Failed to scan backups in {self._root}: {e}") from e

        logger.info(
            f"Found {backup_map.count()} backup(s) for {len(backup_map)} save(s)"
        )
        return backup_map

    def _scan_bucket(self, bucket: Path) -> list[Backup]:
        # _subdirs sorts by name, which is chronological for timestamp tokens
        backups: list[Backup] = []
        for snapshot in _subdirs(bucket):
            content = snapshot / bucket.name
            if not content.is_dir():
                logger.debug(f"Snapshot without content skipped: {snapshot}")
                continue
            backups.append(Backup(name=snapshot.name, path=content))
        return backups
