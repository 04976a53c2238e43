"""Tests for ProjectAnalyzer."""

from __future__ import annotations

from uimigrate.adapters.bolt import BoltAdapter
from uimigrate.adapters.lovable import LovableAdapter
from uimigrate.analyzers import ProjectAnalyzer, ProjectLayout
from uimigrate.models import ComponentProp, ExtractedText
from uimigrate.source_files import build_ignore_rules
from tests._fixtures.project_builder import ProjectBuilder, bolt_project, lovable_project


def test_lovable_project_components_and_companions(project_builder: ProjectBuilder) -> None:
    lovable_project(project_builder)

    analysis = ProjectAnalyzer(LovableAdapter.layout).analyze(project_builder.path())

    assert analysis.source == "lovable"
    assert analysis.language == "typescript"
    assert analysis.package_manager == "npm"
    names = [component.name for component in analysis.components]
    assert names == ["PriceButton", "ProfileCard"]

    button = analysis.components[0]
    assert button.path == "src/components/PriceButton.tsx"
    assert button.kind == "functional"
    assert button.has_state is True
    assert button.hooks == ("useState",)
    assert button.complexity == 2
    assert button.tests == ("src/components/PriceButton.test.tsx",)
    assert button.stories is None
    assert "@lovable-dev/ui" in button.dependencies
    assert button.props[0] == ComponentProp(name="price", type="number", required=True)


def test_lovable_pages_routes_and_markers(project_builder: ProjectBuilder) -> None:
    lovable_project(project_builder)

    analysis = ProjectAnalyzer(LovableAdapter.layout).analyze(project_builder.path())

    pages = {page.name: page for page in analysis.pages}
    assert set(pages) == {"Pricing", "index"}
    pricing = pages["Pricing"]
    assert pricing.route == "/pricing"
    assert pricing.has_auth is True
    assert pricing.has_layout is True
    assert pricing.components == ("Layout", "PriceButton")
    assert pricing.seo.title == "Pricing"
    assert pricing.seo.description == "Plans and pricing"
    assert pages["index"].route == "/"


def test_project_wide_facts(project_builder: ProjectBuilder) -> None:
    lovable_project(project_builder)
    (project_builder.path() / "pnpm-lock.yaml").write_text("", encoding="utf-8")

    texts = [ExtractedText(key="home.title", text="Home")]
    analysis = ProjectAnalyzer(LovableAdapter.layout).analyze(project_builder.path(), texts)

    assert analysis.package_manager == "pnpm"
    assert analysis.styling.type == "tailwind"
    assert analysis.styling.files == ("src/styles/app.css",)
    assert [asset.path for asset in analysis.assets] == ["public/logo.svg"]
    assert analysis.assets[0].type == "image"
    assert analysis.configuration["tsconfig.json"] == {"compilerOptions": {"jsx": "react-jsx"}}
    assert analysis.state_management is not None
    assert analysis.state_management.type == "none"
    assert analysis.routing is not None
    assert analysis.routing.type == "file-based"
    assert analysis.texts == tuple(texts)


def test_bolt_routes_and_data_fetching(project_builder: ProjectBuilder) -> None:
    bolt_project(project_builder)

    analysis = ProjectAnalyzer(BoltAdapter.layout).analyze(project_builder.path())

    assert analysis.framework == "remix"
    assert analysis.structure.components_dir == "app/components"
    routes = {page.path: page for page in analysis.pages}
    user = routes["app/routes/users.$id.tsx"]
    assert user.route == "/users/:id"
    assert user.data_fetching == "ssr"
    assert user.has_auth is True
    assert user.seo.title == "User profile"
    assert routes["app/routes/_index.tsx"].route == "/"
    assert analysis.routing is not None
    assert analysis.routing.type == "remix-router"
    protected = [route.path for route in analysis.routing.routes if route.protected]
    assert protected == ["/users/:id"]


def test_malformed_component_becomes_parse_warning(project_builder: ProjectBuilder) -> None:
    lovable_project(project_builder)
    project_builder.write({"src/components/Broken.tsx": "export const Broken = () => {\n  return <div>;\n"})

    analysis = ProjectAnalyzer(LovableAdapter.layout).analyze(project_builder.path())

    broken = next(component for component in analysis.components if component.name == "Broken")
    assert broken.props == ()
    assert broken.hooks == ()
    assert broken.complexity == 1
    assert [warning.kind for warning in analysis.warnings] == ["parse"]
    assert analysis.warnings[0].file == "src/components/Broken.tsx"
    assert len(analysis.components) == 3


def test_exclude_rules_skip_components(project_builder: ProjectBuilder) -> None:
    lovable_project(project_builder)
    rules = build_ignore_rules(["ProfileCard.jsx"])

    analysis = ProjectAnalyzer(LovableAdapter.layout, rules=rules).analyze(project_builder.path())

    assert [component.name for component in analysis.components] == ["PriceButton"]


def test_missing_directories_yield_empty_analysis(project_builder: ProjectBuilder) -> None:
    project_builder.package({"react": "^18.0.0"})

    analysis = ProjectAnalyzer(ProjectLayout(source="lovable")).analyze(project_builder.path())

    assert analysis.components == ()
    assert analysis.pages == ()
    assert analysis.language == "javascript"
    assert analysis.testing is None
    assert analysis.routing is not None
    assert analysis.routing.type == "none"
