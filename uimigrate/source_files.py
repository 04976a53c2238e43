"""Source tree walking utilities shared by analyzers and adapters."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".cache",
    ".next",
    ".turbo",
    "node_modules",
    "dist",
    "build",
    "coverage",
}

SOURCE_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx")
STYLE_EXTENSIONS = (".css", ".scss", ".less")

COMPANION_MARKERS = (".test.", ".spec.", ".stories.", ".story.")


@dataclass
class IgnoreRule:
    """An exclude pattern taken from .uimigrate.yml ``exclude_paths``."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rules(patterns: Iterable[str]) -> List[IgnoreRule]:
    rules: List[IgnoreRule] = []
    for raw in patterns:
        pattern = raw.strip()
        if not pattern:
            continue
        directory_only = pattern.endswith("/")
        if directory_only:
            pattern = pattern[:-1]
        anchored = pattern.startswith("/")
        if anchored:
            pattern = pattern[1:]
        rules.append(
            IgnoreRule(
                pattern=pattern,
                directory_only=directory_only,
                anchored=anchored,
                has_slash="/" in pattern,
            )
        )
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


def iter_files(
    directory: Path,
    extensions: Sequence[str] | None,
    *,
    root: Path | None = None,
    rules: Sequence[IgnoreRule] = (),
) -> Iterator[Path]:
    """Yield files under ``directory`` with one of ``extensions`` in sorted order.

    ``extensions=None`` yields every file.

    ``rules`` are matched against paths relative to ``root`` (defaults to
    ``directory``). Hidden directories and build output are never entered.
    """
    base = root or directory
    for dirpath, dirnames, filenames in os.walk(directory):
        current = Path(dirpath)
        rel_dir = current.relative_to(base).as_posix() if current != base else ""

        kept = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS or name.startswith("."):
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            kept.append(name)
        dirnames[:] = kept

        for filename in sorted(filenames):
            if extensions and not filename.endswith(tuple(extensions)):
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield current / filename


def is_companion_file(path: Path, root: Path | None = None) -> bool:
    """Return True for test, spec and story files that accompany a component.

    The ``__tests__`` directory check only looks below ``root`` when given.
    """
    if any(marker in path.name for marker in COMPANION_MARKERS):
        return True
    parts = path.relative_to(root).parts if root is not None else path.parts
    return "__tests__" in parts[:-1]


def unit_name(path: Path) -> str:
    """Return the file name without its (last) extension."""
    return path.name[: -len(path.suffix)] if path.suffix else path.name


__all__ = [
    "COMPANION_MARKERS",
    "IgnoreRule",
    "SOURCE_EXTENSIONS",
    "STYLE_EXTENSIONS",
    "build_ignore_rules",
    "is_companion_file",
    "iter_files",
    "unit_name",
]
