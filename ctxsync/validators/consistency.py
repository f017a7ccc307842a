"""Cross-check generated registries against the live filesystem."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ..checksum import file_checksum
from ..local_registry import relative_source
from ..models import GlobalRegistry, LocalRegistry
from .base import IssueCollector, RegistryReport


def check_local_registry(
    registry: LocalRegistry, documents: Iterable[Path], root: Path, *, name: str = "local"
) -> RegistryReport:
    """Every discovered document must be registered and every source must exist."""
    issues = IssueCollector()
    sources = {entry.source for entry in registry.contexts.values()}

    for path in documents:
        rel_path = relative_source(path, root)
        if rel_path not in sources:
            issues.error(rel_path, f"File not in registry: {rel_path}")

    for entry in registry.contexts.values():
        if not (root / entry.source).is_file():
            issues.error(entry.source, f"Registry references missing file: {entry.source}")

    return RegistryReport(registry=name, issues=issues.issues)


def check_global_registry(
    registry: GlobalRegistry, ctx_root: Path, *, name: str = "global"
) -> RegistryReport:
    """Recorded files must exist; checksum drift is only a warning."""
    issues = IssueCollector()
    for folder in registry.folders.values():
        for item in folder.files:
            full_path = ctx_root / item.path
            if not full_path.is_file():
                issues.error(item.path, f"Registry references missing file: {item.path}")
                continue
            current = file_checksum(full_path)
            if current != item.checksum:
                issues.warning(
                    item.path,
                    f"Checksum mismatch ({item.checksum} -> {current}): "
                    "content may have changed since last sync",
                )
    return RegistryReport(registry=name, issues=issues.issues)


__all__ = ["check_global_registry", "check_local_registry"]
