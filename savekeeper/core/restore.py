"""Restore manager — overwrite a live save with a backup, one step at a time.

States, in order:
  LIVE                the live save is untouched
  RENAMED             live save moved to ``<name>_tmp``; ``save.path`` is absent
  RESTORED            backup copied to ``save.path``; ``<name>_tmp`` still on disk
  OLD_MOVED_TO_TRASH  ``<name>_tmp`` moved to the trash
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Callable

from loguru import logger

from savekeeper.core.fsops import copy_tree, file_exists
from savekeeper.core.trash import Trash, TrashEntry
from savekeeper.errors import BackupError, RestoreError
from savekeeper.models.save import Save

TMP_SUFFIX = "_tmp"


class RestoreState(StrEnum):
    """Progress of an apply, see module docstring."""

    LIVE = "live"
    RENAMED = "renamed"
    RESTORED = "restored"
    OLD_MOVED_TO_TRASH = "old_moved_to_trash"


@dataclass
class RestoreResult:
    """Outcome of a completed apply."""

    state: RestoreState
    tmp_path: Path
    trashed: TrashEntry | None = None
    warnings: list[str] = field(default_factory=list)


def tmp_path_for(save: Save) -> Path:
    return save.parent / f"{save.name}{TMP_SUFFIX}"


class RestoreManager:
    """Applies backups over live saves using rename → copy → trash."""

    def __init__(
        self,
        trash: Trash,
        copier: Callable[[Path, Path], None] = copy_tree,
    ) -> None:
        self._trash = trash
        self._copy = copier

    def apply(self, save: Save, backup_path: Path) -> RestoreResult:
        """
        Replace ``save.path`` with the contents of ``backup_path``.

        Raises RestoreError with ``state=LIVE`` when nothing was touched, or
        ``state=RENAMED`` when the live save sits in ``tmp_path`` and no
        complete copy exists at ``save.path``. A failure to trash the old
        save is reported as a warning on the result.
        """
        backup_path = Path(backup_path)
        tmp_path = tmp_path_for(save)

        # LIVE → RENAMED
        if not backup_path.is_dir():
            raise RestoreError(
                f"Backup not found: {backup_path}", RestoreState.LIVE
            )
        if not save.path.is_dir():
            raise RestoreError(f"Save not found: {save.path}", RestoreState.LIVE)
        if file_exists(tmp_path):
            raise RestoreError(
                f"Leftover from an earlier restore is in the way: {tmp_path}",
                RestoreState.LIVE,
            )
        try:
            save.path.rename(tmp_path)
        except OSError as e:
            logger.error(f"Failed to move {save.path} aside: {e}")
            raise RestoreError(
                f"Failed to move {save.name} aside: {e}", RestoreState.LIVE
            ) from e
        logger.debug(f"Moved live save {save.path} -> {tmp_path}")

        # RENAMED → RESTORED
        try:
            self._copy(backup_path, save.path)
        except (OSError, shutil.Error) as e:
            logger.error(
                f"Failed to copy {backup_path} over {save.path}: {e}; "
                f"original save left at {tmp_path}"
            )
            raise RestoreError(
                f"Failed to restore {save.name}: {e}. "
                f"The original save is kept at {tmp_path}",
                RestoreState.RENAMED,
                tmp_path,
            ) from e
        result = RestoreResult(state=RestoreState.RESTORED, tmp_path=tmp_path)

        # RESTORED → OLD_MOVED_TO_TRASH
        try:
            result.trashed = self._trash.move_to_trash(tmp_path)
            result.state = RestoreState.OLD_MOVED_TO_TRASH
        except BackupError as e:
            if file_exists(tmp_path):
                warning = f"Restored {save.name}, but the old copy stays at {tmp_path}: {e.message}"
            else:
                warning = f"Restored {save.name}, but trashing the old copy failed: {e.message}"
            logger.warning(warning)
            result.warnings.append(warning)

        logger.info(f"Applied backup {backup_path.parent.name} to {save.name}")
        return result
