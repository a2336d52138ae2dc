"""Recoverable trash — moves paths aside instead of deleting them.

Directory structure:
  {trash_dir}/manifest.json
  {trash_dir}/{entry_id}/{original basename}
"""

from __future__ import annotations

import json
import shutil
import threading
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

from loguru import logger

from savekeeper.core.fsops import file_exists
from savekeeper.errors import BackupError

MANIFEST_FILE = "manifest.json"


@dataclass
class TrashEntry:
    """One trashed path and where it went."""

    id: str
    original_path: str
    trashed_path: str
    deleted_at: str  # ISO datetime (UTC)


class Trash:
    """Safe-delete store backed by a local directory and a JSON manifest."""

    def __init__(self, trash_dir: Path) -> None:
        self._dir = trash_dir
        self._manifest = trash_dir / MANIFEST_FILE
        self._lock = threading.Lock()

    @property
    def trash_dir(self) -> Path:
        return self._dir

    # ── Manifest ──

    def _load(self) -> list[TrashEntry]:
        if not self._manifest.exists():
            return []
        try:
            with open(self._manifest, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise BackupError(f"Failed to read trash manifest: {e}") from e

        entries: list[TrashEntry] = []
        for item in data.get("entries", []):
            try:
                entries.append(TrashEntry(**item))
            except TypeError as e:
                logger.warning(f"Skipping malformed trash entry {item!r}: {e}")
        return entries

    def _save(self, entries: list[TrashEntry]) -> None:
        tmp_path = self._manifest.with_suffix(".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(
                    {"entries": [asdict(e) for e in entries]},
                    f,
                    ensure_ascii=False,
                    indent=2,
                )
            tmp_path.replace(self._manifest)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise BackupError(f"Failed to write trash manifest: {e}") from e

    # ── Operations ──

    def move_to_trash(self, path: Path) -> TrashEntry:
        """Move ``path`` (file or directory) into the trash."""
        path = Path(path)
        if not file_exists(path):
            raise BackupError(f"Cannot trash missing path: {path}")

        now = datetime.now(tz=timezone.utc)
        entry_id = f"{now.strftime('%Y%m%d_%H%M%S')}_{uuid4().hex[:8]}"

        with self._lock:
            # A bad manifest must fail before anything is moved
            entries = self._load()
            target = self._dir / entry_id / path.name
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.move(str(path), str(target))
            except (OSError, shutil.Error) as e:
                logger.error(f"Failed to move {path} to trash: {e}")
                raise BackupError(f"Failed to move {path} to trash: {e}") from e

            entry = TrashEntry(
                id=entry_id,
                original_path=str(path.absolute()),
                trashed_path=str(target),
                deleted_at=now.isoformat(),
            )
            entries.append(entry)
            try:
                self._save(entries)
            except BackupError as e:
                logger.error(f"{path} was moved to {target} but not recorded: {e.message}")
                raise BackupError(
                    f"{path} was moved to {target} but the trash manifest could not "
                    f"be updated: {e.message}"
                ) from e

        logger.debug(f"Trashed {path} -> {target}")
        return entry

    def entries(self) -> list[TrashEntry]:
        with self._lock:
            return self._load()

    def find(self, original_path: Path) -> list[TrashEntry]:
        """Entries for ``original_path`` whose trashed copy still exists, newest last."""
        wanted = str(Path(original_path).absolute())
        return [
            e
            for e in self.entries()
            if e.original_path == wanted and Path(e.trashed_path).exists()
        ]

    def contains(self, original_path: Path) -> bool:
        return bool(self.find(original_path))

    def restore(self, entry_id: str) -> Path:
        """Move a trashed entry back to its original location."""
        with self._lock:
            entries = self._load()
            entry = next((e for e in entries if e.id == entry_id), None)
            if entry is None:
                raise BackupError(f"No trash entry with id {entry_id}")

            source = Path(entry.trashed_path)
            dest = Path(entry.original_path)
            if not source.exists():
                raise BackupError(f"Trashed copy is gone: {source}")
            if dest.exists():
                raise BackupError(f"Restore target already exists: {dest}")

            try:
                dest.parent.mkdir(parents=True, exist_ok=True)
                shutil.move(str(source), str(dest))
            except (OSError, shutil.Error) as e:
                raise BackupError(f"Failed to restore {dest} from trash: {e}") from e

            try:
                source.parent.rmdir()
            except OSError as e:
                logger.warning(f"Could not remove empty trash slot {source.parent}: {e}")

            self._save([e for e in entries if e.id != entry_id])

        logger.info(f"Restored {dest} from trash")
        return dest
