"""Output tree conventions: where each migrated unit lands."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Dict, List, Set, Tuple

from .models import ComponentInfo, MigrationOptions, PageInfo, ProjectAnalysis
from .render import pascal_case
from .source_files import COMPANION_MARKERS, unit_name

OUTPUT_DIRECTORIES = (
    "src",
    "src/components",
    "src/styles",
    "src/utils",
    "src/hooks",
    "src/types",
    "src/locales",
    "public",
    "docs",
)


def page_root(options: MigrationOptions) -> str:
    return "pages" if options.target_platform == "nextjs" else "src/pages"


def skeleton_directories(options: MigrationOptions) -> List[str]:
    """Directories created under the output root before any unit is written."""
    directories = list(OUTPUT_DIRECTORIES)
    directories.insert(2, page_root(options))
    return directories


def is_typed_output(analysis: ProjectAnalysis, options: MigrationOptions) -> bool:
    return analysis.is_typescript or options.convert_to_typescript


def markup_extension(typed: bool) -> str:
    return ".tsx" if typed else ".jsx"


def script_extension(typed: bool) -> str:
    return ".ts" if typed else ".js"


def page_identifier(page: PageInfo) -> str:
    """PascalCase identifier of a page component, e.g. ``users.$id`` -> ``UsersIdPage``."""
    base = pascal_case(page.name) or "Index"
    return f"{base}Page"


def component_output_path(
    output_root: Path,
    component: ComponentInfo,
    analysis: ProjectAnalysis,
    options: MigrationOptions,
) -> Path:
    typed = is_typed_output(analysis, options)
    if component.kind == "hook":
        return output_root / "src" / "hooks" / f"{component.name}{script_extension(typed)}"

    directory = output_root / "src" / "components"
    if options.preserve_structure:
        source_parent = PurePosixPath(component.path).parent
        base = PurePosixPath(analysis.structure.components_dir)
        try:
            nested = source_parent.relative_to(base)
        except ValueError:
            nested = PurePosixPath()
        directory = directory.joinpath(*nested.parts)
    return directory / f"{component.name}{markup_extension(typed)}"


def page_output_path(
    output_root: Path,
    page: PageInfo,
    analysis: ProjectAnalysis,
    options: MigrationOptions,
) -> Path:
    extension = markup_extension(is_typed_output(analysis, options))
    if options.target_platform != "nextjs":
        return output_root / "src" / "pages" / f"{page_identifier(page)}{extension}"

    segments = [_next_segment(segment) for segment in page.route.split("/") if segment]
    if not segments:
        return output_root / "pages" / f"index{extension}"
    *parents, leaf = segments
    return output_root.joinpath("pages", *parents) / f"{leaf}{extension}"


def companion_output_path(component_output: Path, companion: str) -> Path:
    """Place a test or story file next to its migrated component."""
    name = PurePosixPath(companion).name
    _, _, rest = name.partition(".")
    if not any(marker in name for marker in COMPANION_MARKERS):
        # __tests__/Button.tsx -> Button.test.tsx
        rest = f"test.{rest}"
    return component_output.parent / f"{unit_name(component_output)}.{rest}"


def _next_segment(segment: str) -> str:
    if segment == "*":
        return "[...all]"
    if segment.startswith(":"):
        name = segment[1:]
        if name.endswith("*"):
            return f"[...{name[:-1]}]"
        return f"[{name}]"
    return segment


class OutputNames:
    """Hands out unique output paths within one run.

    A colliding path receives a numeric suffix: ``Button.tsx``, ``Button-2.tsx``.
    """

    def __init__(self) -> None:
        self._taken: Set[str] = set()
        self._counts: Dict[str, int] = {}

    def claim(self, path: Path) -> Tuple[Path, bool]:
        """Return a free path for ``path`` and whether it had to be renamed."""
        key = str(path)
        if key not in self._taken:
            self._taken.add(key)
            return path, False

        stem = unit_name(path)
        suffix = path.name[len(stem) :]
        counter = self._counts.get(key, 1)
        while True:
            counter += 1
            candidate = path.with_name(f"{stem}-{counter}{suffix}")
            if str(candidate) not in self._taken:
                break
        self._counts[key] = counter
        self._taken.add(str(candidate))
        return candidate, True


__all__ = [
    "OUTPUT_DIRECTORIES",
    "OutputNames",
    "companion_output_path",
    "component_output_path",
    "is_typed_output",
    "markup_extension",
    "page_identifier",
    "page_output_path",
    "page_root",
    "script_extension",
    "skeleton_directories",
]
