"""Rollback bookkeeping and restoration for migration runs."""

from __future__ import annotations

from pathlib import Path

from .fs import LocalFileSystem
from .logging import get_logger
from .models import RollbackData, RollbackOperation


class RollbackError(RuntimeError):
    """Raised when a run cannot be rolled back."""


class RollbackManager:
    """Records reversible operations and restores an output path from its backup."""

    def __init__(self, fs: LocalFileSystem | None = None) -> None:
        self.fs = fs or LocalFileSystem()
        self.logger = get_logger("rollback")

    @staticmethod
    def record_create(data: RollbackData, path: Path) -> None:
        data.operations.append(RollbackOperation(kind="create", path=str(path)))

    def rollback(self, data: RollbackData | None, output_path: Path | str) -> None:
        """Delete every created path, then copy the backup tree onto ``output_path``.

        Raises :class:`RollbackError` when no backup exists for the run.
        """
        if data is None or not data.backup_path:
            raise RollbackError("No backup was recorded for this migration run")
        backup = Path(data.backup_path)
        if not self.fs.is_dir(backup):
            raise RollbackError(f"Backup directory does not exist: {backup}")

        output = Path(output_path)
        removed = 0
        for created in reversed(data.created_paths()):
            path = Path(created)
            if self.fs.exists(path) and not self.fs.is_dir(path):
                self.fs.remove_file(path)
                removed += 1
        self.logger.info("Removed %d created files under %s", removed, output)

        self.fs.copy_tree(backup, output)
        self.logger.info("Restored %s from backup %s", output, backup)


__all__ = ["RollbackError", "RollbackManager"]
