"""Tests for source tree walking."""

from __future__ import annotations

from pathlib import Path

from uimigrate.source_files import (
    SOURCE_EXTENSIONS,
    build_ignore_rules,
    is_companion_file,
    iter_files,
    unit_name,
)
from tests._fixtures.project_builder import ProjectBuilder


def _names(paths: list[Path], root: Path) -> list[str]:
    return [path.relative_to(root).as_posix() for path in paths]


def test_iter_files_skips_vendored_and_hidden_directories(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "src/App.tsx": "x",
            "src/styles.css": "x",
            "src/node_modules/lib/index.js": "x",
            "src/.cache/App.tsx": "x",
            "src/nested/Card.jsx": "x",
        }
    )
    root = project_builder.path()

    found = _names(list(iter_files(root / "src", SOURCE_EXTENSIONS, root=root)), root)

    assert found == ["src/App.tsx", "src/nested/Card.jsx"]


def test_iter_files_without_extensions_yields_everything(project_builder: ProjectBuilder) -> None:
    project_builder.write({"public/logo.svg": "x", "public/fonts/a.woff2": "x"})
    root = project_builder.path()

    found = _names(list(iter_files(root / "public", None, root=root)), root)

    assert found == ["public/logo.svg", "public/fonts/a.woff2"]


def test_ignore_rules_support_anchored_and_directory_patterns(project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "src/legacy/Old.tsx": "x",
            "src/App.tsx": "x",
            "src/App.generated.tsx": "x",
            "legacy/Keep.tsx": "x",
        }
    )
    root = project_builder.path()
    rules = build_ignore_rules(["/src/legacy/", "*.generated.tsx", ""])

    found = _names(list(iter_files(root, SOURCE_EXTENSIONS, rules=rules)), root)

    assert found == ["legacy/Keep.tsx", "src/App.tsx"]


def test_companion_files_and_unit_names() -> None:
    assert is_companion_file(Path("src/components/Button.test.tsx"))
    assert is_companion_file(Path("src/components/Button.stories.jsx"))
    assert is_companion_file(Path("src/components/__tests__/Button.tsx"))
    assert not is_companion_file(Path("src/components/Button.tsx"))
    assert unit_name(Path("app/routes/users.$id.tsx")) == "users.$id"
    assert unit_name(Path("README")) == "README"


def test_tests_directory_above_project_root_is_ignored(tmp_path: Path) -> None:
    root = tmp_path / "__tests__" / "project"
    component = root / "src" / "components" / "Button.tsx"

    assert not is_companion_file(component, root)
    assert is_companion_file(root / "src" / "components" / "__tests__" / "Button.tsx", root)
