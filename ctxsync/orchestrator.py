"""Pipeline orchestration for sync and validate flows."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from .annotations import detect_annotation_needs
from .changes import diff_registries
from .config import CtxSyncConfig, load_config
from .global_registry import GlobalRegistryBuilder
from .local_registry import LocalRegistryBuilder, relative_source
from .logging import get_logger
from .models import AnnotationNeed, GlobalRegistry, LocalRegistry
from .parser import ParseFailure, parse_context_document
from .stores import ANNOTATION_MARKER, load_previous, render_registry, write_registry
from .validators import (
    ContextSchemaValidator,
    IssueCollector,
    RegistryReport,
    ValidationResult,
    check_global_registry,
    check_local_registry,
)


@dataclass
class SyncOutcome:
    """Result of regenerating one registry."""

    kind: str
    path: Path
    registry: Union[LocalRegistry, GlobalRegistry]
    changed: bool
    written: bool
    diff: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    annotation_needs: List[AnnotationNeed] = field(default_factory=list)


@dataclass
class LocalValidationReport:
    """Schema results for every discovered document plus the registry cross-check."""

    root: Path
    results: List[ValidationResult]
    registry: RegistryReport

    @property
    def has_errors(self) -> bool:
        return any(not result.valid for result in self.results) or self.registry.has_errors


class Orchestrator:
    """Coordinates discovery, building, change detection and validation."""

    def __init__(
        self,
        config: CtxSyncConfig | None = None,
        *,
        local_builder: LocalRegistryBuilder | None = None,
        global_builder: GlobalRegistryBuilder | None = None,
        schema_validator: ContextSchemaValidator | None = None,
    ) -> None:
        self.config = config or load_config(Path.cwd())
        discovery = self.config.discovery
        self.local_builder = local_builder or LocalRegistryBuilder(
            patterns=discovery.patterns,
            exclude_dirs=discovery.exclude_dirs,
            exclude_hidden=discovery.exclude_hidden,
            generation_command=self.config.commands.local,
        )
        self.global_builder = global_builder or GlobalRegistryBuilder(
            folders=self.config.global_.folders,
            suffix=self.config.global_.suffix,
        )
        self.schema_validator = schema_validator or ContextSchemaValidator()
        self.logger = get_logger("orchestrator")

    # ------------------------------------------------------------------
    # Sync

    def sync_local(self, scan_root: Path | str | None = None, *, dry_run: bool = False) -> SyncOutcome:
        """Regenerate the local registry, writing only when its content changed."""
        root = self._resolve_root(scan_root)
        output_path = self.config.local_registry_path
        self.logger.info("Starting local sync for %s", root)

        registry = self.local_builder.build(root)
        previous = load_previous(output_path)
        diff = diff_registries(registry.to_dict(), previous)

        written = False
        if diff.changed and not dry_run:
            text = render_registry(
                registry.to_dict(),
                title="Local Context Registry",
                command=self.config.commands.local,
                generated_at=registry.meta.last_sync,
            )
            write_registry(output_path, text)
            written = True
            self.logger.info("Local context registry updated at %s", output_path)
        elif diff.changed:
            self.logger.info("Dry-run completed; local registry changes not written")
        else:
            self.logger.info("Local context registry is up to date (no changes)")

        return SyncOutcome(
            kind="local",
            path=output_path,
            registry=registry,
            changed=diff.changed,
            written=written,
            diff=diff.lines,
            errors=list(registry.errors),
        )

    def sync_global(self, *, dry_run: bool = False) -> SyncOutcome:
        """Regenerate the global registry, preserving annotations and listing needs."""
        output_path = self.config.global_registry_path
        self.logger.info("Starting global sync for %s", self.config.global_root)

        previous_raw = load_previous(output_path, preserve_marker=ANNOTATION_MARKER)
        previous = GlobalRegistry.from_dict(previous_raw) if previous_raw is not None else None

        registry = self.global_builder.build(self.config.global_root, previous)
        needs = detect_annotation_needs(registry, previous)
        diff = diff_registries(registry.to_dict(), previous_raw)

        written = False
        if diff.changed and not dry_run:
            text = render_registry(
                registry.to_dict(),
                title="Global Context Registry",
                command=self.config.commands.global_,
                generated_at=registry.meta.last_synced,
            )
            write_registry(output_path, text)
            written = True
            self.logger.info("Global context registry updated at %s", output_path)
        elif diff.changed:
            self.logger.info("Dry-run completed; global registry changes not written")
        else:
            self.logger.info("Global context registry is up to date (no changes)")

        if needs:
            self.logger.debug("%d item(s) need annotation", len(needs))

        return SyncOutcome(
            kind="global",
            path=output_path,
            registry=registry,
            changed=diff.changed,
            written=written,
            diff=diff.lines,
            annotation_needs=needs,
        )

    # ------------------------------------------------------------------
    # Validate

    def validate_file(self, path: Path | str) -> ValidationResult:
        """Schema-check a single context document."""
        file_path = Path(path).expanduser().resolve()
        if not file_path.is_file():
            raise FileNotFoundError(f"File does not exist: {path}")
        parsed = parse_context_document(file_path)
        if isinstance(parsed, ParseFailure):
            issues = IssueCollector()
            issues.error("file", f"Failed to parse YAML: {parsed.message}")
            return ValidationResult(file=str(file_path), issues=issues.issues)
        return self.schema_validator.validate(parsed.data, str(file_path))

    def validate_local(self, scan_root: Path | str | None = None) -> LocalValidationReport:
        """Schema-check every document under the root and cross-check the registry."""
        root = self._resolve_root(scan_root)
        documents = self.local_builder.discover(root)
        self.logger.info("Validating %d context file(s) under %s", len(documents), root)

        results: List[ValidationResult] = []
        for path in documents:
            result = self.validate_file(path)
            result.file = relative_source(path, root)
            results.append(result)

        registry_path = self.config.local_registry_path
        raw = load_previous(registry_path)
        if raw is None:
            report = self._unavailable_registry("local", registry_path, self.config.commands.local)
        else:
            report = check_local_registry(LocalRegistry.from_dict(raw), documents, root)
        return LocalValidationReport(root=root, results=results, registry=report)

    def validate_global(self) -> RegistryReport:
        """Check recorded global files still exist and still match their checksums."""
        registry_path = self.config.global_registry_path
        raw = load_previous(registry_path, preserve_marker=ANNOTATION_MARKER)
        if raw is None:
            return self._unavailable_registry("global", registry_path, self.config.commands.global_)
        return check_global_registry(GlobalRegistry.from_dict(raw), self.config.global_root)

    # ------------------------------------------------------------------
    # Internal helpers

    def _resolve_root(self, scan_root: Path | str | None) -> Path:
        if scan_root is None:
            return self.config.root
        root = Path(scan_root).expanduser().resolve()
        if not root.is_dir():
            raise FileNotFoundError(f"Path does not exist or is not a directory: {scan_root}")
        return root

    @staticmethod
    def _unavailable_registry(name: str, path: Path, command: str) -> RegistryReport:
        issues = IssueCollector()
        if path.exists():
            issues.warning("registry", f"Could not parse registry file {path}")
        else:
            issues.warning("registry", f"Registry file not found. Run '{command}' to generate it")
        return RegistryReport(registry=name, issues=issues.issues)


__all__ = ["LocalValidationReport", "Orchestrator", "SyncOutcome"]
