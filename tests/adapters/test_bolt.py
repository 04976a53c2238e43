"""Tests for the Bolt adapter transforms."""

from __future__ import annotations

from uimigrate.adapters.bolt import BoltAdapter, inject_tokens
from uimigrate.models import MigrationOptions
from tests._fixtures.project_builder import ProjectBuilder, bolt_project


def _adapter(**overrides: object) -> BoltAdapter:
    return BoltAdapter(MigrationOptions(output_path="/tmp/out", **overrides))  # type: ignore[arg-type]


def test_header_component_rewrites_runtime_imports(project_builder: ProjectBuilder) -> None:
    bolt_project(project_builder)
    adapter = _adapter()
    analysis = adapter.analyze_project(project_builder.path())
    header = analysis.components[0]

    output = adapter.transform_component(header, analysis)

    assert header.name == "Header"
    assert "import { NavLink } from 'react-router-dom';" in output
    assert "import { Card, Container } from '@xala-technologies/ui-system';" in output
    assert "@remix-run" not in output
    assert "  readonly title: string;" in output
    assert "Hooks: useLoading" in output
    assert "Elements: Card" in output


def test_header_component_for_nextjs(project_builder: ProjectBuilder) -> None:
    bolt_project(project_builder)
    adapter = _adapter(target_platform="nextjs")
    analysis = adapter.analyze_project(project_builder.path())

    output = adapter.transform_component(analysis.components[0], analysis)

    assert "import Link from 'next/link';" in output
    assert "react-router-dom" not in output


def test_route_page_for_nextjs_keeps_server_data_fetching(project_builder: ProjectBuilder) -> None:
    bolt_project(project_builder)
    adapter = _adapter(target_platform="nextjs")
    analysis = adapter.analyze_project(project_builder.path())
    page = next(page for page in analysis.pages if page.route == "/users/:id")

    output = adapter.transform_page(page, analysis)

    assert "import type { GetServerSideProps } from 'next';" in output
    assert "import { useSession } from 'next-auth/react';" in output
    assert "export const getServerSideProps: GetServerSideProps = async () => {" in output
    assert "<title>User profile</title>" in output
    assert "import { Button, Container, Typography } from '@xala-technologies/ui-system';" in output
    assert "(route /users/:id)" in output


def test_styles_carry_source_css_with_tokens(project_builder: ProjectBuilder) -> None:
    bolt_project(project_builder)
    adapter = _adapter()
    analysis = adapter.analyze_project(project_builder.path())

    files = adapter.transform_styles(analysis.styling, analysis)
    carried_styles = adapter.carried_styles(analysis.styling, analysis, files)

    assert set(files) == {"globals.css", "tokens.css", "components.css"}
    assert [(style.source, style.name) for style in carried_styles] == [("app/styles/tailwind.css", "tailwind.css")]
    carried = carried_styles[0].content
    assert carried.startswith("@tailwind base;\n:root {\n  /* Norwegian design tokens */\n")
    assert "  --radius: 4px;" in carried
    assert "--color-primary: var(--color-norway-blue);" in files["tokens.css"]


def test_carried_style_name_collision_gets_prefix(project_builder: ProjectBuilder) -> None:
    bolt_project(project_builder)
    project_builder.write({"app/styles/globals.css": "body { margin: 0; }\n"})
    adapter = _adapter()
    analysis = adapter.analyze_project(project_builder.path())

    files = adapter.transform_styles(analysis.styling, analysis)
    carried = {style.name: style.content for style in adapter.carried_styles(analysis.styling, analysis, files)}

    assert carried["legacy-globals.css"] == "body { margin: 0; }\n"
    assert files["globals.css"].startswith("@tailwind base;")


def test_inject_tokens_only_touches_first_root_block() -> None:
    css = ":root {\n  --a: 1;\n}\n:root {\n  --b: 2;\n}\n"

    injected = inject_tokens(css)

    assert injected.count("--color-norway-blue") == 1
    assert injected.endswith(":root {\n  --b: 2;\n}\n")
    assert inject_tokens("body {}\n") == "body {}\n"


def test_manifest_excludes_remix_and_bolt_packages(project_builder: ProjectBuilder) -> None:
    bolt_project(project_builder)
    adapter = _adapter(target_platform="nextjs")
    analysis = adapter.analyze_project(project_builder.path())

    manifest = adapter.package_manifest(analysis)

    assert "@remix-run/node" not in manifest["dependencies"]
    assert "@remix-run/react" not in manifest["dependencies"]
    assert manifest["dependencies"]["next"] == "^14.0.0"
    assert manifest["scripts"]["dev"] == "next dev"
