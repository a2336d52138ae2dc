"""Engine runner — runs blocking engine calls on a bounded thread pool."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Iterable, Sequence

from loguru import logger

if TYPE_CHECKING:
    from savekeeper.core.backup import BackupManager
    from savekeeper.core.restore import RestoreResult
    from savekeeper.core.scanner import BackupScanner, SaveScanner
    from savekeeper.core.trash import TrashEntry
    from savekeeper.models.backup import Backup, BackupMap
    from savekeeper.models.save import Save


class EngineRunner:
    """
    Future-based front for the scanners and the backup manager.

    Callers are expected to wait for one operation before starting the next
    one on the same save; the runner does no locking of its own.
    """

    def __init__(
        self,
        save_scanner: SaveScanner,
        backup_scanner: BackupScanner,
        backup_manager: BackupManager,
        max_workers: int = 1,
    ) -> None:
        self._save_scanner = save_scanner
        self._backup_scanner = backup_scanner
        self._manager = backup_manager
        self._pool = ThreadPoolExecutor(
            max_workers=max(1, max_workers), thread_name_prefix="savekeeper-io"
        )

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        future = self._pool.submit(fn, *args)
        future.add_done_callback(_log_failure)
        return future

    def scan_saves_async(self) -> Future[list[Save]]:
        return self.submit(self._save_scanner.scan_saves)

    def scan_backups_async(self) -> Future[BackupMap]:
        return self.submit(self._backup_scanner.scan_backups)

    def create_backup_async(self, save: Save) -> Future[Backup]:
        return self.submit(self._manager.create_backup, save)

    def apply_backup_async(self, save: Save, backup_path: Path) -> Future[RestoreResult]:
        return self.submit(self._manager.apply_backup, save, backup_path)

    def delete_backup_async(self, path: Path) -> Future[TrashEntry]:
        return self.submit(self._manager.delete_backup, path)

    def delete_backup_many_async(self, paths: Iterable[Path]) -> Future[list[TrashEntry]]:
        return self.submit(self._manager.delete_backup_many, list(paths))

    def prune_unused_async(
        self, saves: Sequence[Save], backup_map: BackupMap
    ) -> Future[list[Path]]:
        return self.submit(self._manager.prune_unused, list(saves), backup_map)

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)


def _log_failure(future: Future) -> None:
    exc = future.exception()
    if exc is not None:
        logger.debug(f"Background operation failed: {exc}")
