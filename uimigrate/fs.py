"""Filesystem access used by the migration pipeline.

All disk mutations performed during a run go through a :class:`LocalFileSystem`
instance so a run can be observed (or simulated) by swapping the instance.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import List


class LocalFileSystem:
    """Thin wrapper over pathlib/shutil for pipeline reads and writes."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def list_dir(self, path: Path) -> List[str]:
        return sorted(os.listdir(path))

    def ensure_dir(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def write_text(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def copy_file(self, source: Path, destination: Path) -> None:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)

    def copy_tree(self, source: Path, destination: Path) -> None:
        """Recursively copy ``source`` onto ``destination``, overwriting files."""
        shutil.copytree(source, destination, dirs_exist_ok=True)

    def remove_file(self, path: Path) -> None:
        path.unlink()


__all__ = ["LocalFileSystem"]
