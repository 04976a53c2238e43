"""Core data models shared across uimigrate components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# Tag values kept as plain strings, mirroring the on-disk formats they describe.
LANGUAGE_TYPESCRIPT = "typescript"
LANGUAGE_JAVASCRIPT = "javascript"

ERROR_KINDS = ("parse", "transform", "write", "dependency")
WARNING_KINDS = ("parse", "deprecated", "manual-review", "compatibility")
ROLLBACK_KINDS = ("create", "modify", "delete")


@dataclass(frozen=True)
class ComponentProp:
    """A single declared prop of a component."""

    name: str
    type: str = "any"
    required: bool = True
    default_value: Optional[str] = None


@dataclass(frozen=True)
class ComponentInfo:
    """One reusable UI unit discovered during analysis."""

    name: str
    path: str
    kind: str = "functional"
    props: Tuple[ComponentProp, ...] = ()
    dependencies: Tuple[str, ...] = ()
    has_state: bool = False
    hooks: Tuple[str, ...] = ()
    complexity: int = 1
    tests: Tuple[str, ...] = ()
    stories: Optional[str] = None


@dataclass(frozen=True)
class SeoInfo:
    title: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class PageInfo:
    """One routable screen discovered during analysis."""

    name: str
    path: str
    route: str
    components: Tuple[str, ...] = ()
    has_layout: bool = False
    has_auth: bool = False
    data_fetching: Optional[str] = None
    seo: SeoInfo = field(default_factory=SeoInfo)


@dataclass(frozen=True)
class AssetInfo:
    name: str
    path: str
    type: str
    size: int
    used: bool = False


@dataclass(frozen=True)
class StylingInfo:
    """Project-wide styling approach."""

    type: str = "css"
    files: Tuple[str, ...] = ()


@dataclass(frozen=True)
class StateManagementInfo:
    type: str = "none"
    files: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RouteInfo:
    path: str
    component: str
    protected: bool = False
    params: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RoutingInfo:
    type: str = "none"
    routes: Tuple[RouteInfo, ...] = ()


@dataclass(frozen=True)
class TestingInfo:
    framework: str = "vitest"
    files: Tuple[str, ...] = ()
    coverage: bool = False
    e2e: bool = False


@dataclass(frozen=True)
class ProjectStructure:
    """Directory conventions resolved for one source project."""

    src_dir: str
    components_dir: str
    pages_dir: Optional[str] = None
    styles_dir: Optional[str] = None
    assets_dir: Optional[str] = None
    public_dir: Optional[str] = None
    config_files: Tuple[str, ...] = ()
    has_typescript: bool = False
    has_tests: bool = False


@dataclass(frozen=True)
class ExtractedText:
    """A localisable string supplied by the text-extraction subsystem."""

    key: str
    text: str
    file: str = ""
    line: int = 0


@dataclass(frozen=True)
class MigrationWarning:
    file: str
    kind: str
    message: str
    suggestion: Optional[str] = None


@dataclass
class MigrationError:
    file: str
    kind: str
    message: str
    original_error: Optional[BaseException] = None


@dataclass(frozen=True)
class ProjectAnalysis:
    """Structural model of the source project, read-only once built."""

    root: str
    source: str
    framework: str
    language: str
    package_manager: str
    structure: ProjectStructure
    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)
    components: Tuple[ComponentInfo, ...] = ()
    pages: Tuple[PageInfo, ...] = ()
    assets: Tuple[AssetInfo, ...] = ()
    configuration: Dict[str, Any] = field(default_factory=dict)
    build_tool: str = "vite"
    styling: StylingInfo = field(default_factory=StylingInfo)
    state_management: Optional[StateManagementInfo] = None
    routing: Optional[RoutingInfo] = None
    testing: Optional[TestingInfo] = None
    texts: Tuple[ExtractedText, ...] = ()
    warnings: Tuple[MigrationWarning, ...] = ()

    @property
    def is_typescript(self) -> bool:
        return self.language == LANGUAGE_TYPESCRIPT

    def all_dependencies(self) -> Dict[str, str]:
        merged = dict(self.dependencies)
        merged.update(self.dev_dependencies)
        return merged


@dataclass(frozen=True)
class MigrationOptions:
    """Run configuration, immutable for the duration of a migration."""

    output_path: str
    preserve_structure: bool = False
    create_backup: bool = False
    migrate_tests: bool = False
    migrate_stories: bool = False
    convert_to_typescript: bool = False
    add_localization: bool = False
    add_compliance: bool = False
    target_platform: str = "react"
    target_styling: str = "tailwind"
    dry_run: bool = False


@dataclass
class ChangeCounters:
    components: int = 0
    pages: int = 0
    styles: int = 0
    tests: int = 0
    configurations: int = 0


@dataclass
class MigrationSummary:
    total_files: int = 0
    migrated_files: int = 0
    skipped_files: int = 0
    errors: int = 0
    warnings: int = 0
    duration: int = 0
    changes: ChangeCounters = field(default_factory=ChangeCounters)


@dataclass(frozen=True)
class RollbackOperation:
    kind: str
    path: str
    original_content: Optional[str] = None


@dataclass
class RollbackData:
    """Undo anchor: backup location plus the ordered operation log."""

    backup_path: str = ""
    operations: List[RollbackOperation] = field(default_factory=list)

    def created_paths(self) -> List[str]:
        return [op.path for op in self.operations if op.kind == "create"]


@dataclass
class MigrationResult:
    """Outcome of one pipeline run, accumulated stage by stage."""

    success: bool = False
    analysis: Optional[ProjectAnalysis] = None
    migrated_files: List[str] = field(default_factory=list)
    skipped_files: List[str] = field(default_factory=list)
    errors: List[MigrationError] = field(default_factory=list)
    warnings: List[MigrationWarning] = field(default_factory=list)
    summary: MigrationSummary = field(default_factory=MigrationSummary)
    rollback_data: Optional[RollbackData] = None
    unit_failures: int = 0
    aborted: bool = False

    @property
    def core_success(self) -> bool:
        """True when every component and page unit migrated, ignoring best-effort artifacts."""
        return not self.aborted and self.analysis is not None and self.unit_failures == 0
