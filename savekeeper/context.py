"""Application context — service container for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass

from savekeeper.config import Config, get_config
from savekeeper.core.backup import BackupManager
from savekeeper.core.runner import EngineRunner
from savekeeper.core.scanner import BackupScanner, SaveScanner
from savekeeper.core.trash import Trash
from savekeeper.logger import setup_logger


@dataclass
class AppContext:
    """
    Central service container.

    A UI shell receives this once and calls the engine through it; root
    paths are resolved from ``config`` here and nowhere else.
    """

    config: Config
    trash: Trash
    save_scanner: SaveScanner
    backup_scanner: BackupScanner
    backup_manager: BackupManager
    runner: EngineRunner


def create_context(config: Config | None = None, *, log_to_file: bool = True) -> AppContext:
    """Wire all services and return an AppContext."""
    config = config or get_config()

    # Logger
    setup_logger(config.data_dir / "logs" if log_to_file else None, config.log_level)

    # Core services
    trash = Trash(config.trash_path)
    save_scanner = SaveScanner(config.saves_root, config.save_categories)
    backup_scanner = BackupScanner(config.backup_path)
    backup_manager = BackupManager(config.backup_path, trash)
    runner = EngineRunner(
        save_scanner, backup_scanner, backup_manager, max_workers=config.max_workers
    )

    return AppContext(
        config=config,
        trash=trash,
        save_scanner=save_scanner,
        backup_scanner=backup_scanner,
        backup_manager=backup_manager,
        runner=runner,
    )
