"""CLI entrypoints for ctxsync commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from .annotations import REASON_LABELS
from .config import ConfigError, load_config
from .logging import configure_logging
from .models import LocalRegistry, NeedType
from .orchestrator import LocalValidationReport, Orchestrator, SyncOutcome
from .validators import RegistryReport, ValidationResult

_SELECTORS = ("local", "global")


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    # Subcommand copies suppress their defaults so a value given before the
    # command is not reset by the subparser.
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write a DEBUG-level log of the run to this file.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ctxsync",
        description="Synchronise and validate context registries.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser(
        "sync",
        help="Regenerate the local and/or global context registry.",
    )
    _add_logging_options(sync_parser, suppress_default=True)
    sync_parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help="'local', 'global', or a directory to scan for context files (defaults to both registries).",
    )
    sync_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show registry changes without writing them.",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate context files and registry consistency.",
    )
    _add_logging_options(validate_parser, suppress_default=True)
    validate_parser.add_argument(
        "target",
        nargs="?",
        default=None,
        help="'local', 'global', a directory, or a single context file (defaults to both registries).",
    )
    validate_parser.add_argument(
        "--json",
        action="store_true",
        help="Print a machine-readable summary instead of text.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for ctxsync commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        orchestrator = Orchestrator(load_config(Path.cwd()))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "sync":
        try:
            outcomes = _run_sync(orchestrator, args.target, dry_run=bool(args.dry_run))
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        for outcome in outcomes:
            _print_sync_outcome(outcome, dry_run=bool(args.dry_run))
    elif args.command == "validate":
        try:
            failed = _run_validate(orchestrator, args.target, as_json=bool(args.json))
        except FileNotFoundError as exc:
            parser.exit(1, f"Error: {exc}\n")
        if failed:
            parser.exit(1)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_sync(orchestrator: Orchestrator, target: str | None, *, dry_run: bool) -> List[SyncOutcome]:
    if target is None:
        return [orchestrator.sync_local(dry_run=dry_run), orchestrator.sync_global(dry_run=dry_run)]
    if target == "local":
        return [orchestrator.sync_local(dry_run=dry_run)]
    if target == "global":
        return [orchestrator.sync_global(dry_run=dry_run)]
    return [orchestrator.sync_local(target, dry_run=dry_run)]


def _run_validate(orchestrator: Orchestrator, target: str | None, *, as_json: bool) -> bool:
    """Run the selected validations, print them, and return whether any error was found."""
    results: List[ValidationResult] = []
    local_reports: List[LocalValidationReport] = []
    registry_reports: List[RegistryReport] = []

    if target is None or target == "local":
        local_reports.append(orchestrator.validate_local())
    if target is None or target == "global":
        registry_reports.append(orchestrator.validate_global())
    if target is not None and target not in _SELECTORS:
        path = Path(target)
        if not path.exists():
            raise FileNotFoundError(f"Path does not exist: {target}")
        if path.is_dir():
            local_reports.append(orchestrator.validate_local(path))
        else:
            results.append(orchestrator.validate_file(path))

    for report in local_reports:
        results.extend(report.results)
        registry_reports.append(report.registry)

    failed = any(not result.valid for result in results) or any(
        report.has_errors for report in registry_reports
    )

    if as_json:
        payload = {
            "valid": not failed,
            "files": [result.to_dict() for result in results],
            "registries": [report.to_dict() for report in registry_reports],
        }
        print(json.dumps(payload, indent=2))
    else:
        _print_validation(results, registry_reports, failed)
    return failed


def _print_sync_outcome(outcome: SyncOutcome, *, dry_run: bool) -> None:
    label = "Local" if outcome.kind == "local" else "Global"
    if outcome.written:
        print(f"{label} context registry updated at {_relativize(outcome.path)}")
    elif outcome.changed and dry_run:
        print(f"{label} context registry changes (dry-run):")
        print("\n".join(outcome.diff) or "(no diff)")
    else:
        print(f"{label} context registry is up to date (no changes)")

    registry = outcome.registry
    if isinstance(registry, LocalRegistry):
        print(f"  Total contexts: {registry.meta.total_contexts}")
        print(f"  Categories: {len(registry.by_category)}")
        print(f"  Entry points: {len(registry.entry_points)}")
        if outcome.errors:
            print(f"  Errors: {len(outcome.errors)}")
            for error in outcome.errors:
                print(f"    - {error}")
        return

    for name, folder in registry.folders.items():
        print(f"  {name}: {folder.file_count} files")
    if outcome.annotation_needs:
        print(f"AI annotation needed ({len(outcome.annotation_needs)} items):")
        for need in outcome.annotation_needs:
            kind = "folder" if need.type is NeedType.FOLDER else "file"
            print(f"  [{kind}] {need.path} ({REASON_LABELS[need.reason]})")
        print("Run the annotation step to fill in ai_comment fields.")
    else:
        print("All contexts have AI annotations")


def _print_validation(
    results: List[ValidationResult], registry_reports: List[RegistryReport], failed: bool
) -> None:
    for result in results:
        name = Path(result.file).name
        if result.valid and not result.warnings:
            print(f"Valid: {name}")
            continue
        print(f"{'Invalid' if not result.valid else 'Valid with warnings'}: {name}")
        for issue in result.errors:
            print(f"  error {issue.field}: {issue.message}")
        for issue in result.warnings:
            print(f"  warning {issue.field}: {issue.message}")

    for report in registry_reports:
        if not report.issues:
            print(f"Registry '{report.registry}' is in sync with the filesystem")
            continue
        for issue in report.issues:
            print(f"Registry '{report.registry}' {issue.severity.value}: {issue.message}")

    warning_count = sum(len(result.warnings) for result in results) + sum(
        len(report.warnings) for report in registry_reports
    )
    print(f"Total files: {len(results)}")
    print(f"Valid: {sum(1 for result in results if result.valid)}")
    print(f"Errors: {sum(1 for result in results if not result.valid)}")
    print(f"Warnings: {warning_count}")
    print(f"Registry issues: {sum(len(report.errors) for report in registry_reports)}")
    if failed:
        print("Validation failed")
    elif warning_count:
        print("Passed with warnings")
    else:
        print("All validations passed")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
