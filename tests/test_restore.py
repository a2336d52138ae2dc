"""Tests for applying backups over live saves."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from savekeeper.core.backup import BackupManager
from savekeeper.core.restore import RestoreManager, RestoreState, tmp_path_for
from savekeeper.core.scanner import SaveScanner
from savekeeper.core.trash import MANIFEST_FILE, Trash
from savekeeper.errors import BackupError, RestoreError
from savekeeper.models.save import Save


def snapshot_tree(root: Path) -> dict[str, bytes]:
    """Relative path → file bytes for every file under ``root``."""
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def save(tmp_path: Path) -> Save:
    world = tmp_path / "saves" / "Survivor" / "Camp"
    (world / "chunks").mkdir(parents=True)
    (world / "map_t.bin").write_bytes(b"time=1")
    (world / "chunks" / "c_1_1.bin").write_bytes(b"chunk-original")
    return SaveScanner(tmp_path / "saves").scan_saves()[0]


@pytest.fixture
def trash(tmp_path: Path) -> Trash:
    return Trash(tmp_path / "trash")


@pytest.fixture
def manager(tmp_path: Path, trash: Trash, make_clock) -> BackupManager:
    return BackupManager(tmp_path / "backups", trash, clock=make_clock())


def _play(save: Save) -> None:
    """Mutate the live save the way a game session would."""
    (save.path / "map_t.bin").write_bytes(b"time=999")
    (save.path / "chunks" / "c_1_1.bin").unlink()
    (save.path / "chunks" / "c_9_9.bin").write_bytes(b"new chunk")


class TestApplyBackup:
    def test_round_trip_restores_captured_content(
        self, manager: BackupManager, save: Save
    ) -> None:
        captured = snapshot_tree(save.path)
        backup = manager.create_backup(save)
        _play(save)

        result = manager.apply_backup(save, backup.path)

        assert result.state is RestoreState.OLD_MOVED_TO_TRASH
        assert not result.warnings
        assert snapshot_tree(save.path) == captured

    def test_apply_twice_is_idempotent(self, manager: BackupManager, save: Save) -> None:
        backup = manager.create_backup(save)
        _play(save)

        manager.apply_backup(save, backup.path)
        first = snapshot_tree(save.path)
        manager.apply_backup(save, backup.path)

        assert snapshot_tree(save.path) == first

    def test_old_save_is_recoverable_from_trash(
        self, manager: BackupManager, trash: Trash, save: Save
    ) -> None:
        backup = manager.create_backup(save)
        _play(save)

        result = manager.apply_backup(save, backup.path)

        assert not result.tmp_path.exists()
        assert trash.contains(result.tmp_path)
        old = Path(result.trashed.trashed_path)
        assert (old / "map_t.bin").read_bytes() == b"time=999"

    def test_copy_failure_leaves_tmp_sibling(
        self, manager: BackupManager, trash: Trash, save: Save
    ) -> None:
        backup = manager.create_backup(save)

        def failing_copy(src: Path, dst: Path) -> None:
            raise OSError("Input/output error")

        restorer = RestoreManager(trash, copier=failing_copy)
        with pytest.raises(RestoreError) as exc_info:
            restorer.apply(save, backup.path)

        tmp = tmp_path_for(save)
        assert exc_info.value.state is RestoreState.RENAMED
        assert exc_info.value.tmp_path == tmp
        assert tmp.is_dir()
        assert (tmp / "map_t.bin").read_bytes() == b"time=1"
        assert not save.path.exists()

    def test_rename_blocked_leaves_save_untouched(
        self, manager: BackupManager, save: Save
    ) -> None:
        backup = manager.create_backup(save)
        tmp_path_for(save).mkdir()

        with pytest.raises(RestoreError) as exc_info:
            manager.apply_backup(save, backup.path)

        assert exc_info.value.state is RestoreState.LIVE
        assert (save.path / "map_t.bin").read_bytes() == b"time=1"

    def test_missing_backup_fails_cleanly(
        self, manager: BackupManager, save: Save, tmp_path: Path
    ) -> None:
        with pytest.raises(RestoreError) as exc_info:
            manager.apply_backup(save, tmp_path / "no" / "such" / "backup")

        assert exc_info.value.state is RestoreState.LIVE
        assert save.path.is_dir()
        assert not tmp_path_for(save).exists()

    def test_trash_failure_is_a_warning(self, manager: BackupManager, save: Save) -> None:
        backup = manager.create_backup(save)
        _play(save)

        broken_trash = MagicMock()
        broken_trash.move_to_trash.side_effect = BackupError("trash unavailable")
        result = RestoreManager(broken_trash).apply(save, backup.path)

        assert result.state is RestoreState.RESTORED
        assert result.trashed is None
        assert len(result.warnings) == 1
        assert "trash unavailable" in result.warnings[0]
        assert result.tmp_path.is_dir()
        assert (save.path / "map_t.bin").read_bytes() == b"time=1"

    def test_corrupt_trash_manifest_keeps_tmp_copy(
        self, manager: BackupManager, trash: Trash, save: Save
    ) -> None:
        backup = manager.create_backup(save)
        _play(save)
        trash.trash_dir.mkdir(parents=True, exist_ok=True)
        (trash.trash_dir / MANIFEST_FILE).write_text("{not json", encoding="utf-8")

        result = manager.apply_backup(save, backup.path)

        assert result.state is RestoreState.RESTORED
        assert result.tmp_path.is_dir()
        assert (result.tmp_path / "map_t.bin").read_bytes() == b"time=999"
        assert str(result.tmp_path) in result.warnings[0]
        assert (save.path / "map_t.bin").read_bytes() == b"time=1"
