"""Structural analysis of a source project into a ProjectAnalysis."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import (
    LANGUAGE_JAVASCRIPT,
    LANGUAGE_TYPESCRIPT,
    AssetInfo,
    ComponentInfo,
    ExtractedText,
    MigrationWarning,
    PageInfo,
    ProjectAnalysis,
    ProjectStructure,
    RouteInfo,
    RoutingInfo,
    SeoInfo,
    StateManagementInfo,
    StylingInfo,
    TestingInfo,
)
from ..render import unit_identifier
from ..source_files import (
    SOURCE_EXTENSIONS,
    STYLE_EXTENSIONS,
    IgnoreRule,
    is_companion_file,
    iter_files,
    unit_name,
)
from .routes import derive_route, route_params
from .syntax import ParsedSource, SourceParseError, SyntaxParser
from .utils import (
    asset_type,
    dependency_map,
    detect_build_tool,
    detect_framework,
    detect_node_package_manager,
    detect_state_library,
    detect_styling_type,
    detect_test_framework,
    has_coverage_tooling,
    has_e2e_tooling,
    load_package_json,
    state_library_modules,
)

_SEO_TITLE = re.compile(r"title:\s*[\"']([^\"']+)[\"']")
_SEO_DESCRIPTION = re.compile(r"description:\s*[\"']([^\"']+)[\"']")
_HOOK_COMPONENT = re.compile(r"^use[A-Z0-9]")
_LOCKFILES = ("pnpm-lock.yaml", "yarn.lock", "package-lock.json")

_GENERIC_DATA_FETCHING: Tuple[Tuple[str, str], ...] = (
    ("getServerSideProps", "ssr"),
    ("getStaticProps", "ssg"),
    ("useQuery", "client"),
    ("useSWR", "client"),
)


@dataclass(frozen=True)
class ProjectLayout:
    """Directory and text-marker conventions of one source framework.

    Directory tuples are candidates in priority order; the first one that
    exists in the project is used.
    """

    source: str
    default_framework: str = "react"
    src_dirs: Tuple[str, ...] = ("src",)
    component_dirs: Tuple[str, ...] = ("src/components", "components")
    page_dirs: Tuple[str, ...] = ("src/pages", "pages")
    style_dirs: Tuple[str, ...] = ("src/styles", "styles")
    asset_dirs: Tuple[str, ...] = ("src/assets", "assets")
    public_dirs: Tuple[str, ...] = ("public",)
    test_dirs: Tuple[str, ...] = ("__tests__", "tests", "test")
    typescript_markers: Tuple[str, ...] = ("tsconfig.json",)
    config_files: Tuple[str, ...] = ("package.json", "tsconfig.json")
    auth_markers: Tuple[str, ...] = ()
    layout_markers: Tuple[str, ...] = ("Layout",)
    data_fetching_markers: Tuple[Tuple[str, str], ...] = ()
    lowercase_routes: bool = False


class ProjectAnalyzer:
    """Walks a source tree according to a :class:`ProjectLayout`."""

    def __init__(
        self,
        layout: ProjectLayout,
        *,
        parser: SyntaxParser | None = None,
        rules: Sequence[IgnoreRule] = (),
    ) -> None:
        self.layout = layout
        self.parser = parser or SyntaxParser()
        self.rules = list(rules)
        self.logger = get_logger("analyzer")

    def analyze(self, project_path: Path, texts: Iterable[ExtractedText] = ()) -> ProjectAnalysis:
        root = Path(project_path).expanduser().resolve()
        self.logger.info("Analyzing %s project at %s", self.layout.source, root)

        package = load_package_json(root)
        dependencies = dependency_map(package, "dependencies")
        dev_dependencies = dependency_map(package, "devDependencies")
        dependency_names = set(dependencies) | set(dev_dependencies)
        lockfiles = {name for name in _LOCKFILES if (root / name).exists()}

        structure = self._analyze_structure(root)
        warnings: List[MigrationWarning] = []
        sources: Dict[str, str] = {}

        components = self._analyze_components(root, structure, warnings, sources)
        pages = self._analyze_pages(root, structure, warnings, sources)
        styling = self._analyze_styling(root, dependency_names)
        assets = self._analyze_assets(root, structure, sources)
        configuration = self._analyze_configuration(root, structure, warnings)

        framework = detect_framework(dependency_names, self.layout.default_framework)
        analysis = ProjectAnalysis(
            root=str(root),
            source=self.layout.source,
            framework=framework,
            language=LANGUAGE_TYPESCRIPT if structure.has_typescript else LANGUAGE_JAVASCRIPT,
            package_manager=detect_node_package_manager(lockfiles),
            structure=structure,
            dependencies=dependencies,
            dev_dependencies=dev_dependencies,
            components=tuple(components),
            pages=tuple(pages),
            assets=tuple(assets),
            configuration=configuration,
            build_tool=detect_build_tool(dependency_names, structure.config_files),
            styling=styling,
            state_management=self._analyze_state(dependency_names, components, sources),
            routing=self._analyze_routing(framework, dependency_names, pages),
            testing=self._analyze_testing(package, dependency_names, components),
            texts=tuple(texts),
            warnings=tuple(warnings),
        )
        self.logger.info(
            "Analysis complete: %d components, %d pages, %d warnings",
            len(analysis.components),
            len(analysis.pages),
            len(analysis.warnings),
        )
        return analysis

    # -- structure ---------------------------------------------------------

    def _analyze_structure(self, root: Path) -> ProjectStructure:
        layout = self.layout
        has_tests = any((root / name).is_dir() for name in layout.test_dirs)
        return ProjectStructure(
            src_dir=_first_existing(root, layout.src_dirs) or layout.src_dirs[0],
            components_dir=_first_existing(root, layout.component_dirs) or layout.component_dirs[0],
            pages_dir=_first_existing(root, layout.page_dirs),
            styles_dir=_first_existing(root, layout.style_dirs),
            assets_dir=_first_existing(root, layout.asset_dirs),
            public_dir=_first_existing(root, layout.public_dirs),
            config_files=tuple(name for name in layout.config_files if (root / name).is_file()),
            has_typescript=any((root / name).exists() for name in layout.typescript_markers),
            has_tests=has_tests,
        )

    def _analyze_configuration(
        self,
        root: Path,
        structure: ProjectStructure,
        warnings: List[MigrationWarning],
    ) -> Dict[str, object]:
        configuration: Dict[str, object] = {}
        for name in structure.config_files:
            if name == "package.json":
                continue
            content = (root / name).read_text(encoding="utf-8", errors="ignore")
            if name.endswith(".json"):
                try:
                    configuration[name] = json.loads(content)
                except json.JSONDecodeError as exc:
                    warnings.append(
                        MigrationWarning(
                            file=name,
                            kind="parse",
                            message=f"Could not parse {name}: {exc}",
                        )
                    )
                    configuration[name] = {"content": content}
            else:
                configuration[name] = {"content": content}
        return configuration

    # -- components --------------------------------------------------------

    def _analyze_components(
        self,
        root: Path,
        structure: ProjectStructure,
        warnings: List[MigrationWarning],
        sources: Dict[str, str],
    ) -> List[ComponentInfo]:
        directory = root / structure.components_dir
        if not directory.is_dir():
            self.logger.debug("No component directory found under %s", root)
            return []

        files: List[Path] = []
        companions: Dict[str, List[str]] = {}
        for path in iter_files(directory, SOURCE_EXTENSIONS, root=root, rules=self.rules):
            if is_companion_file(path, root):
                companions.setdefault(_companion_owner(path, root), []).append(_relative(path, root))
            else:
                files.append(path)

        components: List[ComponentInfo] = []
        for path in files:
            component = self._analyze_component(path, root, companions, warnings, sources)
            components.append(component)
        return components

    def _analyze_component(
        self,
        path: Path,
        root: Path,
        companions: Dict[str, List[str]],
        warnings: List[MigrationWarning],
        sources: Dict[str, str],
    ) -> ComponentInfo:
        relative = _relative(path, root)
        name = unit_name(path)
        identifier = unit_identifier(name)
        attached = companions.get(_companion_key(path.parent, name, root), [])
        tests = tuple(item for item in attached if not _is_story(item))
        stories = next((item for item in attached if _is_story(item)), None)

        parsed = self._parse(path, relative, warnings, sources)
        if parsed is None:
            return ComponentInfo(name=name, path=relative, tests=tests, stories=stories)

        hooks = _unique(call.name for call in parsed.hook_calls())
        classes = parsed.class_components()
        if identifier in classes or name in classes:
            kind = "class"
        elif _HOOK_COMPONENT.match(identifier):
            kind = "hook"
        else:
            kind = "functional"

        return ComponentInfo(
            name=name,
            path=relative,
            kind=kind,
            props=parsed.component_props(identifier),
            dependencies=_unique(decl.module for decl in parsed.imports()),
            has_state=parsed.has_state(),
            hooks=hooks,
            complexity=parsed.complexity(),
            tests=tests,
            stories=stories,
        )

    # -- pages -------------------------------------------------------------

    def _analyze_pages(
        self,
        root: Path,
        structure: ProjectStructure,
        warnings: List[MigrationWarning],
        sources: Dict[str, str],
    ) -> List[PageInfo]:
        if not structure.pages_dir:
            return []
        directory = root / structure.pages_dir
        pages: List[PageInfo] = []
        for path in iter_files(directory, SOURCE_EXTENSIONS, root=root, rules=self.rules):
            if is_companion_file(path, root):
                continue
            pages.append(self._analyze_page(path, root, directory, warnings, sources))
        return pages

    def _analyze_page(
        self,
        path: Path,
        root: Path,
        directory: Path,
        warnings: List[MigrationWarning],
        sources: Dict[str, str],
    ) -> PageInfo:
        relative = _relative(path, root)
        route = derive_route(
            path.relative_to(directory).as_posix(),
            lowercase=self.layout.lowercase_routes,
        )
        parsed = self._parse(path, relative, warnings, sources)
        text = sources.get(relative, "")
        components: Tuple[str, ...] = tuple(parsed.component_elements()) if parsed else ()

        return PageInfo(
            name=unit_name(path),
            path=relative,
            route=route,
            components=components,
            has_layout=any(marker in text for marker in self.layout.layout_markers),
            has_auth=any(marker in text for marker in self.layout.auth_markers),
            data_fetching=self._detect_data_fetching(text),
            seo=_extract_seo(text),
        )

    def _detect_data_fetching(self, text: str) -> Optional[str]:
        for marker, mode in self.layout.data_fetching_markers + _GENERIC_DATA_FETCHING:
            if marker in text:
                return mode
        return None

    # -- styles, assets and project-wide facts -----------------------------

    def _analyze_styling(self, root: Path, dependency_names: Iterable[str]) -> StylingInfo:
        files: List[str] = []
        for name in self.layout.style_dirs:
            directory = root / name
            if not directory.is_dir():
                continue
            for path in iter_files(directory, STYLE_EXTENSIONS, root=root, rules=self.rules):
                files.append(_relative(path, root))
        return StylingInfo(type=detect_styling_type(dependency_names, files), files=tuple(files))

    def _analyze_assets(
        self,
        root: Path,
        structure: ProjectStructure,
        sources: Dict[str, str],
    ) -> List[AssetInfo]:
        assets: List[AssetInfo] = []
        for name in (structure.public_dir, structure.assets_dir):
            if not name:
                continue
            directory = root / name
            for path in iter_files(directory, None, root=root, rules=self.rules):
                if path.name.startswith("."):
                    continue
                assets.append(
                    AssetInfo(
                        name=path.relative_to(directory).as_posix(),
                        path=_relative(path, root),
                        type=asset_type(path.name),
                        size=path.stat().st_size,
                        used=any(path.name in text for text in sources.values()),
                    )
                )
        return assets

    def _analyze_state(
        self,
        dependency_names: Iterable[str],
        components: Sequence[ComponentInfo],
        sources: Dict[str, str],
    ) -> StateManagementInfo:
        library = detect_state_library(dependency_names)
        if library is not None:
            modules = state_library_modules(library)
            files = tuple(
                component.path
                for component in components
                if modules.intersection(component.dependencies)
            )
            return StateManagementInfo(type=library, files=files)

        context_files = tuple(
            path for path, text in sources.items() if "createContext" in text
        )
        if context_files:
            return StateManagementInfo(type="context", files=context_files)
        return StateManagementInfo(type="none")

    def _analyze_routing(
        self,
        framework: str,
        dependency_names: Iterable[str],
        pages: Sequence[PageInfo],
    ) -> RoutingInfo:
        if framework == "remix":
            router = "remix-router"
        elif framework == "nextjs":
            router = "next-router"
        elif "react-router-dom" in set(dependency_names):
            router = "react-router"
        elif pages:
            router = "file-based"
        else:
            router = "none"
        routes = tuple(
            RouteInfo(
                path=page.route,
                component=page.name,
                protected=page.has_auth,
                params=route_params(page.route),
            )
            for page in pages
        )
        return RoutingInfo(type=router, routes=routes)

    def _analyze_testing(
        self,
        package: Dict[str, object],
        dependency_names: Iterable[str],
        components: Sequence[ComponentInfo],
    ) -> Optional[TestingInfo]:
        names = set(dependency_names)
        framework = detect_test_framework(names)
        files = tuple(path for component in components for path in component.tests)
        if framework is None and not files:
            return None
        scripts = package.get("scripts")
        return TestingInfo(
            framework=framework or "vitest",
            files=files,
            coverage=has_coverage_tooling(names, scripts if isinstance(scripts, dict) else {}),
            e2e=has_e2e_tooling(names),
        )

    # -- parsing -----------------------------------------------------------

    def _parse(
        self,
        path: Path,
        relative: str,
        warnings: List[MigrationWarning],
        sources: Dict[str, str],
    ) -> Optional[ParsedSource]:
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            self.logger.warning("Could not decode %s: %s", relative, exc)
            warnings.append(
                MigrationWarning(file=relative, kind="parse", message=f"Could not decode {relative}: {exc}")
            )
            return None
        sources[relative] = text
        try:
            return self.parser.parse(text, relative)
        except SourceParseError as exc:
            self.logger.warning("%s", exc)
            warnings.append(
                MigrationWarning(
                    file=relative,
                    kind="parse",
                    message=str(exc),
                    suggestion="Fix the syntax error and re-run the migration for this file.",
                )
            )
            return None


def _first_existing(root: Path, candidates: Sequence[str]) -> Optional[str]:
    for name in candidates:
        if (root / name).is_dir():
            return name
    return None


def _relative(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def _companion_key(directory: Path, stem: str, root: Path) -> str:
    return f"{_relative(directory, root)}/{stem}" if directory != root else stem


def _companion_owner(path: Path, root: Path) -> str:
    """Key of the component a companion belongs to.

    ``forms/Field.test.tsx`` and ``forms/__tests__/Field.tsx`` both belong to
    ``forms/Field``; a same-named component in another directory does not
    pick them up.
    """
    directory = path.parent
    if directory.name == "__tests__":
        directory = directory.parent
    return _companion_key(directory, path.name.split(".", 1)[0], root)


def _is_story(relative: str) -> bool:
    return ".stories." in relative or ".story." in relative


def _unique(values: Iterable[str]) -> Tuple[str, ...]:
    seen: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return tuple(seen)


def _extract_seo(text: str) -> SeoInfo:
    if "meta" not in text and "title:" not in text:
        return SeoInfo()
    title = _SEO_TITLE.search(text)
    description = _SEO_DESCRIPTION.search(text)
    return SeoInfo(
        title=title.group(1) if title else None,
        description=description.group(1) if description else None,
    )


__all__ = ["ProjectAnalyzer", "ProjectLayout"]
