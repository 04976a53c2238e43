"""Base class for source-framework adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Sequence

from ..analyzers.project import ProjectAnalyzer, ProjectLayout
from ..analyzers.syntax import ParsedSource, SyntaxParser
from ..analyzers.utils import all_dependency_names, load_package_json
from ..artifacts import configuration_files, package_manifest
from ..logging import get_logger
from ..models import (
    ComponentInfo,
    ComponentProp,
    ExtractedText,
    MigrationOptions,
    PageInfo,
    ProjectAnalysis,
    StylingInfo,
)
from ..outputs import is_typed_output, page_identifier
from ..render import TemplateRenderer, camel_case, kebab_case, unit_identifier
from ..source_files import SOURCE_EXTENSIONS, STYLE_EXTENSIONS, IgnoreRule, iter_files
from .rewriter import TARGET_LIBRARY, SourceRewriter

# Modules the generated templates import themselves.
_TEMPLATE_MODULES = {"react", "react-i18next", TARGET_LIBRARY}

Signal = Callable[[Path], bool]


@dataclass(frozen=True)
class CarriedStyle:
    """A source style file carried into ``src/styles`` under ``name``."""

    source: str
    name: str
    content: str


@dataclass(frozen=True)
class DetectionProfile:
    """Independent detection signals for one source framework."""

    marker_files: Sequence[str] = ()
    dependencies: Sequence[str] = ()
    layout_dirs: Sequence[str] = ()
    usage_tokens: Sequence[str] = ()
    scan_dirs: Sequence[str] = ("src",)


class SourceAdapter(ABC):
    """Detects, analyzes and transforms projects of one source framework."""

    name: str = ""
    description: str = ""
    profile: DetectionProfile = DetectionProfile()
    layout: ProjectLayout
    # Emit the extended token set in generated style files.
    extended_tokens: bool = False

    def __init__(
        self,
        options: MigrationOptions | None = None,
        *,
        parser: SyntaxParser | None = None,
        renderer: TemplateRenderer | None = None,
        rules: Sequence[IgnoreRule] = (),
    ) -> None:
        self.options = options or MigrationOptions(output_path="")
        self.parser = parser or SyntaxParser()
        self.renderer = renderer or TemplateRenderer()
        self.rules = list(rules)
        self.rewriter = self.build_rewriter()
        self.logger = get_logger(f"adapters.{self.name or type(self).__name__.lower()}")

    @abstractmethod
    def build_rewriter(self) -> SourceRewriter:
        """Return the rewriter holding this framework's import and tag rules."""

    # -- detection ---------------------------------------------------------

    def can_migrate(self, project_path: Path | str) -> bool:
        """Return True when any detection signal fires for ``project_path``."""
        root = Path(project_path)
        try:
            if not root.is_dir():
                return False
            for signal in self.detection_signals():
                if signal(root):
                    self.logger.debug("%s signal %s matched %s", self.name, signal.__name__, root)
                    return True
            return False
        except Exception as exc:  # pragma: no cover - probing must never raise
            self.logger.error("Error checking %s project at %s: %s", self.name, root, exc)
            return False

    def detection_signals(self) -> List[Signal]:
        return [self.has_marker_file, self.has_dependency, self.has_layout_dir, self.has_usage]

    def has_marker_file(self, root: Path) -> bool:
        return any((root / name).exists() for name in self.profile.marker_files)

    def has_dependency(self, root: Path) -> bool:
        names = all_dependency_names(load_package_json(root))
        return any(dep in names for dep in self.profile.dependencies)

    def has_layout_dir(self, root: Path) -> bool:
        return any((root / name).is_dir() for name in self.profile.layout_dirs)

    def has_usage(self, root: Path) -> bool:
        tokens = tuple(self.profile.usage_tokens)
        if not tokens:
            return False
        for name in self.profile.scan_dirs:
            directory = root / name
            if not directory.is_dir():
                continue
            for path in iter_files(directory, SOURCE_EXTENSIONS, root=root, rules=self.rules):
                text = path.read_text(encoding="utf-8", errors="ignore")
                if any(token in text for token in tokens):
                    return True
        return False

    # -- analysis ----------------------------------------------------------

    def analyze_project(
        self,
        project_path: Path | str,
        texts: Iterable[ExtractedText] = (),
    ) -> ProjectAnalysis:
        analyzer = ProjectAnalyzer(self.layout, parser=self.parser, rules=self.rules)
        return analyzer.analyze(Path(project_path), texts)

    # -- transforms --------------------------------------------------------

    def transform_component(self, component: ComponentInfo, analysis: ProjectAnalysis) -> str:
        """Regenerate ``component`` as a target-library skeleton."""
        self.logger.debug("Transforming component %s", component.name)
        parsed = self._parse_unit(analysis, component.path)
        platform = self.options.target_platform
        rewrite = self.rewriter.rewrite(parsed, platform)
        typed = is_typed_output(analysis, self.options)
        identifier = unit_identifier(component.name)
        imports = rewrite.plan.runtime_imports + self._passthrough_imports(rewrite.plan.passthrough)

        if component.kind == "hook":
            return self.renderer.render(
                "hook.js.j2",
                name=identifier,
                typed=typed,
                imports=imports,
                hooks=rewrite.hooks,
                complexity=component.complexity,
                source_label=self.description,
            )

        localization = self.options.add_localization
        class_names = [f"'{kebab_case(component.name)}{self._utility_classes()}'", "className"]
        return self.renderer.render(
            "component.jsx.j2",
            name=identifier,
            typed=typed,
            props=list(component.props),
            parameters=_parameters(component.props, localization),
            localization=localization,
            target_names=_target_names(rewrite.plan.target_names, rewrite.elements, {"Container"}),
            imports=imports,
            class_names=class_names,
            translation_key=camel_case(component.name),
            source_label=self.description,
            kind=component.kind,
            hooks=rewrite.hooks,
            elements=rewrite.elements,
            complexity=component.complexity,
        )

    def transform_page(self, page: PageInfo, analysis: ProjectAnalysis) -> str:
        """Regenerate ``page`` as a routable target-library page."""
        self.logger.debug("Transforming page %s", page.name)
        parsed = self._parse_unit(analysis, page.path)
        rewrite = self.rewriter.rewrite(parsed, self.options.target_platform)
        identifier = page_identifier(page)
        slug = kebab_case(page.name) or "index"
        localization = self.options.add_localization
        platform = self.options.target_platform
        heading = f"{{t('pages.{camel_case(page.name) or 'index'}.title')}}" if localization else identifier[: -len("Page")]
        return self.renderer.render(
            "page.jsx.j2",
            identifier=identifier,
            name=page.name,
            route=page.route,
            slug=slug,
            typed=is_typed_output(analysis, self.options),
            platform=platform,
            head_tag="Head" if platform == "nextjs" else "Helmet",
            has_auth=page.has_auth,
            has_layout=page.has_layout,
            data_fetching=page.data_fetching,
            localization=localization,
            title=page.seo.title or f"{identifier[: -len('Page')]} | App",
            description=page.seo.description,
            heading=heading,
            components=list(page.components),
            target_names=_target_names(rewrite.plan.target_names, rewrite.elements, {"Container", "Typography"}),
            source_label=self.description,
        )

    def transform_styles(self, styling: StylingInfo, analysis: ProjectAnalysis) -> Dict[str, str]:
        """Return generated style files keyed by name under ``src/styles``."""
        target = self.options.target_styling
        typed = is_typed_output(analysis, self.options)
        extended = self.extended_tokens
        files: Dict[str, str] = {}
        if target == "tailwind":
            files["globals.css"] = self.renderer.render("styles/globals.css.j2", extended=extended)
            files["tokens.css"] = self.renderer.render("styles/tokens.css.j2", extended=extended)
        elif target == "styled-components":
            extension = ".ts" if typed else ".js"
            files[f"theme{extension}"] = self.renderer.render("styles/theme.js.j2", typed=typed)
            files[f"GlobalStyle{extension}"] = self.renderer.render("styles/global-styles.js.j2")
        elif target == "css-modules":
            files["tokens.css"] = self.renderer.render("styles/tokens.css.j2", extended=extended)
            files["base.module.css"] = self.renderer.render("styles/base.module.css.j2")
        for name, content in self.extra_styles(styling, analysis, files).items():
            files[name] = content
        return files

    def extra_styles(
        self,
        styling: StylingInfo,
        analysis: ProjectAnalysis,
        generated: Dict[str, str],
    ) -> Dict[str, str]:
        return {}

    def carried_styles(
        self,
        styling: StylingInfo,
        analysis: ProjectAnalysis,
        generated: Dict[str, str],
    ) -> List[CarriedStyle]:
        """Source style files to copy alongside the generated ones."""
        return []

    def transform_companion(self, path: str, analysis: ProjectAnalysis) -> str:
        """Rewrite a test or story file's imports, tags and hooks in place."""
        parsed = self._parse_unit(analysis, path)
        return self.rewriter.rewrite(parsed, self.options.target_platform).text

    # -- project artifacts -------------------------------------------------

    def configuration_files(self, analysis: ProjectAnalysis) -> Dict[str, str]:
        return configuration_files(self.renderer, analysis, self.options)

    def package_manifest(self, analysis: ProjectAnalysis) -> Dict[str, Any]:
        return package_manifest(
            analysis,
            self.options,
            description=f"Migrated from {self.description} to {TARGET_LIBRARY}",
            excluded=self.excluded_dependencies(analysis),
        )

    def excluded_dependencies(self, analysis: ProjectAnalysis) -> List[str]:
        """Source dependencies that must not be carried into the target manifest."""
        return [
            name
            for name in analysis.all_dependencies()
            if self.rewriter.classify(name) != "unrelated" or name in self.profile.dependencies
        ]

    # -- helpers -----------------------------------------------------------

    def _parse_unit(self, analysis: ProjectAnalysis, relative: str) -> ParsedSource:
        path = Path(analysis.root) / relative
        return self.parser.parse(path.read_text(encoding="utf-8"), relative)

    def _passthrough_imports(self, declarations: Iterable[Any]) -> List[str]:
        lines: List[str] = []
        for decl in declarations:
            if decl.module in _TEMPLATE_MODULES:
                continue
            if decl.module.startswith(".") and decl.module.endswith(STYLE_EXTENSIONS):
                continue
            lines.append(decl.text)
        return lines

    def _utility_classes(self) -> str:
        return " p-4 rounded-lg" if self.options.target_styling == "tailwind" else ""

def _parameters(props: Sequence[ComponentProp], localization: bool) -> List[str]:
    parameters = [
        f"{prop.name} = {prop.default_value}" if prop.default_value is not None else prop.name
        for prop in props
    ]
    parameters.append("className")
    if localization:
        parameters.append("ariaLabel")
    return parameters


def _target_names(imported: Iterable[str], used: Iterable[str], required: Iterable[str]) -> List[str]:
    return sorted(set(imported) | set(used) | set(required))


__all__ = ["CarriedStyle", "DetectionProfile", "SourceAdapter"]
