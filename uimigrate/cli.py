"""CLI entrypoints for uimigrate commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict

from .adapters import adapter_names, get_adapter, select_adapter
from .config import TARGET_PLATFORMS, TARGET_STYLINGS, ConfigError, build_options, load_config
from .logging import configure_logging
from .models import MigrationResult
from .orchestrator import MigrationOrchestrator
from .rollback import RollbackError
from .source_files import build_ignore_rules


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_flag(parser: argparse.ArgumentParser, name: str, help_text: str) -> None:
    parser.add_argument(f"--{name}", action="store_true", default=None, help=help_text)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="uimigrate",
        description="Migrate generated React projects onto @xala-technologies/ui-system.",
    )
    _add_verbose_option(parser)
    parser.add_argument("--log-file", help="Also write a DEBUG-level log of the run to this file.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    migrate_parser = subparsers.add_parser(
        "migrate",
        help="Migrate a source project into a new output directory.",
    )
    _add_verbose_option(migrate_parser, suppress_default=True)
    migrate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the source project (defaults to current directory).",
    )
    migrate_parser.add_argument("-o", "--output", help="Directory to write the migrated project into.")
    migrate_parser.add_argument("--adapter", help="Force a source adapter instead of auto-detection.")
    migrate_parser.add_argument("--platform", choices=TARGET_PLATFORMS, help="Target platform.")
    migrate_parser.add_argument("--styling", choices=TARGET_STYLINGS, help="Target styling approach.")
    _add_flag(migrate_parser, "preserve-structure", "Mirror component sub-directories in the output.")
    _add_flag(migrate_parser, "backup", "Copy the source project next to the output before migrating.")
    _add_flag(migrate_parser, "migrate-tests", "Carry component tests into the output.")
    _add_flag(migrate_parser, "migrate-stories", "Carry component stories into the output.")
    _add_flag(migrate_parser, "typescript", "Emit TypeScript even for JavaScript sources.")
    _add_flag(migrate_parser, "localization", "Add i18n hooks and locale files.")
    _add_flag(migrate_parser, "compliance", "Add compliance documentation.")
    _add_flag(migrate_parser, "dry-run", "Run every transform without writing files.")
    migrate_parser.add_argument(
        "--rollback-on-failure",
        action="store_true",
        help="Restore the output from the backup when the run reports errors (requires --backup).",
    )

    detect_parser = subparsers.add_parser(
        "detect",
        help="Report which adapter recognises a project.",
    )
    _add_verbose_option(detect_parser, suppress_default=True)
    detect_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the source project (defaults to current directory).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for uimigrate commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    if args.command == "detect":
        adapter = select_adapter(Path(args.path))
        if adapter is None:
            parser.exit(1, f"No adapter recognises {args.path} (known: {', '.join(adapter_names())})\n")
        print(f"{adapter.name}: {adapter.description} project")
    elif args.command == "migrate":
        _run_migrate(parser, args)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_migrate(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    source = Path(args.path)
    try:
        config = load_config(source)
        options = build_options(config, _overrides(args))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    rules = build_ignore_rules(config.exclude_paths)
    adapter_name = args.adapter or config.adapter
    adapter = None
    if adapter_name:
        try:
            adapter = get_adapter(adapter_name, options, rules=rules)
        except ValueError as exc:
            parser.exit(1, f"{exc}\n")
    else:
        adapter = select_adapter(source, options, rules=rules)

    orchestrator = MigrationOrchestrator(options, adapter=adapter)
    result = orchestrator.migrate(source, on_progress=_print_progress)
    _print_result(result, dry_run=options.dry_run)

    if result.success:
        return
    if args.rollback_on_failure and result.rollback_data and result.rollback_data.backup_path:
        try:
            orchestrator.rollback(result)
        except RollbackError as exc:
            parser.exit(1, f"Rollback failed: {exc}\n")
        print(f"Rolled back {options.output_path} from {result.rollback_data.backup_path}")
    parser.exit(1, "Migration finished with errors. Run with --verbose for more details.\n")


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "output_path": args.output,
        "target_platform": args.platform,
        "target_styling": args.styling,
        "preserve_structure": args.preserve_structure,
        "create_backup": args.backup,
        "migrate_tests": args.migrate_tests,
        "migrate_stories": args.migrate_stories,
        "convert_to_typescript": args.typescript,
        "add_localization": args.localization,
        "add_compliance": args.compliance,
        "dry_run": args.dry_run,
    }


def _print_progress(stage: str, current: int, total: int, message: str) -> None:
    print(f"[{current}/{total}] {stage}: {message}")


def _print_result(result: MigrationResult, *, dry_run: bool) -> None:
    summary = result.summary
    changes = summary.changes
    suffix = " (dry-run)" if dry_run else ""
    print(
        f"Migrated {summary.migrated_files} files{suffix}: "
        f"{changes.components} components, {changes.pages} pages, {changes.styles} styles, "
        f"{changes.tests} tests, {changes.configurations} configuration files"
    )
    for warning in result.warnings:
        location = f"{warning.file}: " if warning.file else ""
        print(f"warning [{warning.kind}] {location}{warning.message}")
    for error in result.errors:
        location = f"{error.file}: " if error.file else ""
        print(f"error [{error.kind}] {location}{error.message}", file=sys.stderr)


if __name__ == "__main__":
    main(sys.argv[1:])
