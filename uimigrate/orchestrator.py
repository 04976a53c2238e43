"""Migration pipeline: validate, analyze, backup, setup, migrate and finalize."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path, PurePosixPath
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .adapters import SourceAdapter, select_adapter
from .artifacts import dump_json, locale_files, render_compliance, render_summary
from .fs import LocalFileSystem
from .logging import get_logger
from .models import (
    ExtractedText,
    MigrationError,
    MigrationOptions,
    MigrationResult,
    MigrationWarning,
    ProjectAnalysis,
    RollbackData,
)
from .outputs import (
    OutputNames,
    companion_output_path,
    component_output_path,
    page_output_path,
    skeleton_directories,
)
from .rollback import RollbackManager

STAGES = ("validation", "analysis", "backup", "setup", "migration", "finalization")

ProgressCallback = Callable[[str, int, int, str], None]
Clock = Callable[[], datetime]

logger = get_logger("orchestrator")


class IncompatibleProjectError(RuntimeError):
    """Raised by the validation stage when no adapter can migrate the project."""


class OutputNotEmptyError(RuntimeError):
    """Raised by the setup stage when the output directory already has content."""


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class MigrationSession:
    """State threaded through the stage functions of one run."""

    source: Path
    output: Path
    options: MigrationOptions
    fs: LocalFileSystem
    clock: Clock = _utc_now
    adapter: Optional[SourceAdapter] = None
    texts: Tuple[ExtractedText, ...] = ()
    result: MigrationResult = field(default_factory=MigrationResult)
    rollback: RollbackData = field(default_factory=RollbackData)
    names: OutputNames = field(default_factory=OutputNames)

    @property
    def analysis(self) -> ProjectAnalysis:
        if self.result.analysis is None:
            raise RuntimeError("Project has not been analyzed yet")
        return self.result.analysis

    @property
    def dry_run(self) -> bool:
        return self.options.dry_run

    def write(self, path: Path, content: str) -> None:
        """Write ``content`` and log the creation; a no-op in dry-run mode."""
        if self.dry_run:
            return
        self.fs.write_text(path, content)
        RollbackManager.record_create(self.rollback, path)

    def copy(self, source: Path, destination: Path) -> None:
        if self.dry_run:
            return
        self.fs.copy_file(source, destination)
        RollbackManager.record_create(self.rollback, destination)

    def error(self, file: str, kind: str, exc: BaseException, *, unit: bool = False) -> None:
        logger.error("%s failed for %s: %s", kind.capitalize(), file or "project", exc)
        self.result.errors.append(MigrationError(file=file, kind=kind, message=str(exc), original_error=exc))
        if unit:
            self.result.unit_failures += 1

    def warn(self, file: str, kind: str, message: str, suggestion: Optional[str] = None) -> None:
        logger.warning("%s", message)
        self.result.warnings.append(MigrationWarning(file=file, kind=kind, message=message, suggestion=suggestion))

    def claim(self, path: Path, source_file: str) -> Path:
        target, renamed = self.names.claim(path)
        if renamed:
            self.warn(
                source_file,
                "compatibility",
                f"Output name {path.name} is already taken; writing {target.name} instead",
                suggestion="Rename one of the source units to keep output names unique.",
            )
        return target


# -- stages ----------------------------------------------------------------


def validate_stage(session: MigrationSession) -> None:
    """Resolve the adapter; raises :class:`IncompatibleProjectError` when none applies."""
    if session.adapter is None:
        session.adapter = select_adapter(session.source, session.options)
        if session.adapter is None:
            raise IncompatibleProjectError(f"No adapter can migrate the project at {session.source}")
    elif not session.adapter.can_migrate(session.source):
        raise IncompatibleProjectError(
            f"{session.source} is not a {session.adapter.description} project"
        )


def analyze_stage(session: MigrationSession) -> None:
    assert session.adapter is not None
    analysis = session.adapter.analyze_project(session.source, session.texts)
    session.result.analysis = analysis
    session.result.warnings.extend(analysis.warnings)
    session.result.summary.total_files = (
        len(analysis.components) + len(analysis.pages) + len(analysis.styling.files) + len(analysis.assets)
    )


def backup_stage(session: MigrationSession) -> Optional[Path]:
    """Copy the source tree next to the output directory; returns the backup path."""
    if not session.options.create_backup or session.dry_run:
        return None
    timestamp = session.clock().strftime("%Y%m%d%H%M%S")
    backup = session.output.parent / f"backup-{session.source.name}-{timestamp}"
    session.fs.copy_tree(session.source, backup)
    session.rollback.backup_path = str(backup)
    logger.info("Backed up %s to %s", session.source, backup)
    return backup


def setup_stage(session: MigrationSession) -> None:
    """Reject a populated output directory, then create the skeleton (not in dry-run)."""
    if session.fs.is_dir(session.output) and session.fs.list_dir(session.output):
        raise OutputNotEmptyError(
            f"Output directory {session.output} is not empty; migrating into existing content is not supported"
        )
    if session.dry_run:
        return
    for directory in skeleton_directories(session.options):
        session.fs.ensure_dir(session.output / directory)


def migrate_stage(session: MigrationSession) -> None:
    _migrate_components(session)
    _migrate_pages(session)
    _migrate_styles(session)
    _migrate_assets(session)
    _migrate_configuration(session)


def finalize_stage(session: MigrationSession) -> None:
    """Write project-level artifacts; each one is best effort."""
    if session.dry_run:
        return
    assert session.adapter is not None
    adapter = session.adapter
    analysis = session.analysis
    options = session.options
    generated_at = session.clock().isoformat()

    try:
        manifest = dump_json(adapter.package_manifest(analysis))
    except Exception as exc:
        session.error("package.json", "dependency", exc)
    else:
        _write_artifact(session, session.output / "package.json", manifest)

    if options.add_localization:
        try:
            locales = locale_files(session.texts or analysis.texts, generated_at=generated_at)
        except Exception as exc:
            session.error("src/locales", "transform", exc)
        else:
            for name, content in locales.items():
                _write_artifact(session, session.output / "src" / "locales" / name, content)

    if options.add_compliance:
        try:
            compliance = render_compliance(adapter.renderer, generated_at=generated_at)
        except Exception as exc:
            session.error("docs/COMPLIANCE.md", "transform", exc)
        else:
            _write_artifact(session, session.output / "docs" / "COMPLIANCE.md", compliance)

    _update_summary(session)
    try:
        readme = render_summary(adapter.renderer, session.result, options, generated_at=generated_at)
    except Exception as exc:
        session.error("README.md", "transform", exc)
    else:
        _write_artifact(session, session.output / "README.md", readme)


# -- migrate helpers -------------------------------------------------------


def _migrate_components(session: MigrationSession) -> None:
    assert session.adapter is not None
    adapter = session.adapter
    analysis = session.analysis
    options = session.options
    result = session.result

    for component in analysis.components:
        try:
            content = adapter.transform_component(component, analysis)
        except Exception as exc:
            session.error(component.path, "transform", exc, unit=True)
            continue
        target = session.claim(component_output_path(session.output, component, analysis, options), component.path)
        try:
            session.write(target, content)
        except OSError as exc:
            session.error(component.path, "write", exc, unit=True)
            continue
        result.migrated_files.append(str(target))
        result.summary.changes.components += 1

        companions: List[str] = list(component.tests)
        if component.stories:
            companions.append(component.stories)
        for companion in companions:
            story = companion == component.stories
            wanted = options.migrate_stories if story else options.migrate_tests
            if not wanted:
                result.skipped_files.append(companion)
                continue
            _migrate_companion(session, companion, target, count_as_test=not story)


def _migrate_companion(session: MigrationSession, companion: str, owner: Path, *, count_as_test: bool) -> None:
    assert session.adapter is not None
    try:
        content = session.adapter.transform_companion(companion, session.analysis)
    except Exception as exc:
        session.error(companion, "transform", exc)
        return
    target = session.claim(companion_output_path(owner, companion), companion)
    try:
        session.write(target, content)
    except OSError as exc:
        session.error(companion, "write", exc)
        return
    session.result.migrated_files.append(str(target))
    if count_as_test:
        session.result.summary.changes.tests += 1


def _migrate_pages(session: MigrationSession) -> None:
    assert session.adapter is not None
    analysis = session.analysis
    for page in analysis.pages:
        try:
            content = session.adapter.transform_page(page, analysis)
        except Exception as exc:
            session.error(page.path, "transform", exc, unit=True)
            continue
        target = session.claim(page_output_path(session.output, page, analysis, session.options), page.path)
        try:
            session.write(target, content)
        except OSError as exc:
            session.error(page.path, "write", exc, unit=True)
            continue
        session.result.migrated_files.append(str(target))
        session.result.summary.changes.pages += 1


def _migrate_styles(session: MigrationSession) -> None:
    assert session.adapter is not None
    analysis = session.analysis
    try:
        files = session.adapter.transform_styles(analysis.styling, analysis)
        carried = session.adapter.carried_styles(analysis.styling, analysis, files)
    except Exception as exc:
        session.error(analysis.structure.styles_dir or "styles", "transform", exc)
        return
    for name, content in files.items():
        _write_style(session, name, content, name)
    for style in carried:
        original = PurePosixPath(style.source).name
        if style.name != original:
            session.warn(
                style.source,
                "compatibility",
                f"Style file {original} clashes with a generated file; writing {style.name} instead",
            )
        _write_style(session, style.name, style.content, style.source)


def _write_style(session: MigrationSession, name: str, content: str, source_file: str) -> None:
    target = session.claim(session.output / "src" / "styles" / name, source_file)
    try:
        session.write(target, content)
    except OSError as exc:
        session.error(source_file, "write", exc)
        return
    session.result.migrated_files.append(str(target))
    session.result.summary.changes.styles += 1


def _migrate_assets(session: MigrationSession) -> None:
    analysis = session.analysis
    public_dir = analysis.structure.public_dir
    for asset in analysis.assets:
        in_public = bool(public_dir) and PurePosixPath(asset.path).parts[0] == public_dir
        base = session.output / "public" if in_public else session.output / "src" / "assets"
        target = session.claim(base.joinpath(*PurePosixPath(asset.name).parts), asset.path)
        try:
            session.copy(Path(analysis.root) / asset.path, target)
        except OSError as exc:
            session.error(asset.path, "write", exc)
            continue
        session.result.migrated_files.append(str(target))


def _migrate_configuration(session: MigrationSession) -> None:
    assert session.adapter is not None
    try:
        files = session.adapter.configuration_files(session.analysis)
    except Exception as exc:
        session.error("configuration", "transform", exc)
        return
    for name, content in files.items():
        target = session.claim(session.output / name, name)
        try:
            session.write(target, content)
        except OSError as exc:
            session.error(name, "write", exc)
            continue
        session.result.migrated_files.append(str(target))
        session.result.summary.changes.configurations += 1


def _write_artifact(session: MigrationSession, path: Path, content: str) -> None:
    try:
        session.write(path, content)
    except OSError as exc:
        session.error(str(path.relative_to(session.output)), "write", exc)


def _update_summary(session: MigrationSession) -> None:
    result = session.result
    summary = result.summary
    summary.migrated_files = len(result.migrated_files)
    summary.skipped_files = len(result.skipped_files)
    summary.errors = len(result.errors)
    summary.warnings = len(result.warnings)


# -- orchestrator ----------------------------------------------------------


_STAGE_MESSAGES = {
    "validation": "Validating project compatibility",
    "analysis": "Analyzing project structure",
    "backup": "Creating backup",
    "setup": "Preparing output directory",
    "migration": "Migrating components, pages and styles",
    "finalization": "Writing project files and documentation",
}


class MigrationOrchestrator:
    """Runs the staged migration pipeline and aggregates a :class:`MigrationResult`."""

    def __init__(
        self,
        options: MigrationOptions,
        adapter: SourceAdapter | None = None,
        fs: LocalFileSystem | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.options = options
        self.adapter = adapter
        self.fs = fs or LocalFileSystem()
        self.clock = clock or _utc_now
        self.logger = logger

    def migrate(
        self,
        source_path: Path | str,
        on_progress: ProgressCallback | None = None,
        texts: Iterable[ExtractedText] = (),
    ) -> MigrationResult:
        """Run every stage against ``source_path``; never raises."""
        started = self.clock()
        session = MigrationSession(
            source=Path(source_path).expanduser().resolve(),
            output=Path(self.options.output_path).expanduser().resolve(),
            options=self.options,
            fs=self.fs,
            clock=self.clock,
            adapter=self.adapter,
            texts=tuple(texts),
        )
        result = session.result
        self.logger.info(
            "Starting migration of %s into %s%s",
            session.source,
            session.output,
            " (dry-run)" if self.options.dry_run else "",
        )

        stages: Sequence[Tuple[str, Callable[[MigrationSession], object]]] = (
            ("validation", validate_stage),
            ("analysis", analyze_stage),
            ("backup", backup_stage),
            ("setup", setup_stage),
            ("migration", migrate_stage),
            ("finalization", finalize_stage),
        )
        try:
            for index, (stage, run_stage) in enumerate(stages, start=1):
                if on_progress is not None:
                    on_progress(stage, index, len(STAGES), _STAGE_MESSAGES[stage])
                self.logger.debug("Stage %d/%d: %s", index, len(STAGES), stage)
                run_stage(session)
        except Exception as exc:
            self.logger.error("Migration aborted: %s", exc)
            result.aborted = True
            result.errors.append(MigrationError(file="", kind="parse", message=str(exc), original_error=exc))

        if session.rollback.backup_path:
            result.rollback_data = session.rollback
        _update_summary(session)
        result.summary.duration = int((self.clock() - started).total_seconds() * 1000)
        result.success = not result.errors
        self.logger.info(
            "Migration %s: %d files migrated, %d errors, %d warnings",
            "succeeded" if result.success else "finished with errors",
            result.summary.migrated_files,
            result.summary.errors,
            result.summary.warnings,
        )
        return result

    def rollback(self, result: MigrationResult) -> None:
        """Undo a run using its backup; raises ``RollbackError`` without one."""
        RollbackManager(self.fs).rollback(result.rollback_data, self.options.output_path)


__all__ = [
    "IncompatibleProjectError",
    "MigrationOrchestrator",
    "MigrationSession",
    "OutputNotEmptyError",
    "STAGES",
    "analyze_stage",
    "backup_stage",
    "finalize_stage",
    "migrate_stage",
    "setup_stage",
    "validate_stage",
]
