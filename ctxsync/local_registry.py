"""Build the local registry of context documents keyed by module path."""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from .checksum import file_checksum, utc_now
from .config import DEFAULT_EXCLUDE_DIRS, DEFAULT_PATTERNS
from .discovery import CONTEXT_FILENAME, CONTEXT_SUFFIX, discover_context_documents
from .logging import get_logger
from .models import REGISTRY_VERSION, LocalRegistry, LocalRegistryEntry, LocalRegistryMeta
from .parser import ContextDocument, ParseFailure, parse_context_document

NO_DESCRIPTION = "No description available"

_ENTRY_POINT_MARKERS = ("/app", "/pages", "/src/main", "/src/index")

logger = get_logger("local_registry")


def relative_source(path: Path, root: Path) -> str:
    return Path(path).resolve().relative_to(Path(root).resolve()).as_posix()


def module_path_for(path: Path, root: Path, document: Optional[ContextDocument] = None) -> str:
    """Derive the canonical module path for a context document.

    An explicit ``meta.target`` wins. Otherwise ``<dir>/ctx.yml`` maps to
    ``/<dir>`` and ``<dir>/<name>.ctx.yml`` maps to ``/<dir>/<name>``.
    """
    if document is not None and document.target:
        return document.target

    rel_path = relative_source(path, root)
    dir_path, file_name = posixpath.split(rel_path)
    if file_name == CONTEXT_FILENAME:
        return "/" + dir_path

    module_name = file_name[: -len(CONTEXT_SUFFIX)] if file_name.endswith(CONTEXT_SUFFIX) else file_name
    full_path = f"{dir_path}/{module_name}" if dir_path else module_name
    return "/" + full_path


def _first_line(value: object) -> str:
    if isinstance(value, list):
        value = value[0] if value else None
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).split("\n")[0].strip()


def extract_description(document: ContextDocument) -> str:
    """First line of ``what``, then ``description``, then ``notes``."""
    for candidate in (document.what, document.description, document.notes):
        line = _first_line(candidate)
        if line:
            return line
    return NO_DESCRIPTION


def is_entry_point(module_path: str) -> bool:
    """Heuristic: module paths that look like application entry points."""
    return any(marker in module_path for marker in _ENTRY_POINT_MARKERS)


class LocalRegistryBuilder:
    """Walks a scan root and summarises every context document it finds."""

    def __init__(
        self,
        *,
        patterns: Sequence[str] = DEFAULT_PATTERNS,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
        exclude_hidden: bool = True,
        generation_command: str = "ctxsync sync local",
    ) -> None:
        self.patterns = tuple(patterns)
        self.exclude_dirs = tuple(exclude_dirs)
        self.exclude_hidden = exclude_hidden
        self.generation_command = generation_command

    def discover(self, root: Path) -> List[Path]:
        return discover_context_documents(
            root,
            patterns=self.patterns,
            exclude_hidden=self.exclude_hidden,
            exclude_dirs=self.exclude_dirs,
        )

    def build(self, root: Path) -> LocalRegistry:
        """Return a freshly generated registry for ``root``."""
        root_path = Path(root).expanduser().resolve()
        logger.info("Scanning for local context files under %s", root_path)
        documents = self.discover(root_path)
        logger.info("Found %d context files", len(documents))

        contexts: Dict[str, LocalRegistryEntry] = {}
        errors: List[str] = []

        for path in documents:
            source = relative_source(path, root_path)
            parsed = parse_context_document(path)
            if isinstance(parsed, ParseFailure):
                errors.append(f"Failed to parse: {source}")
                continue

            module_path = module_path_for(path, root_path, parsed)
            previous = contexts.get(module_path)
            if previous is not None:
                # Last discovered document keeps the slot; the clash is reported.
                message = (
                    f"Module path conflict: {module_path} "
                    f"({previous.source} replaced by {source})"
                )
                logger.warning(message)
                errors.append(message)

            contexts[module_path] = LocalRegistryEntry(
                what=extract_description(parsed),
                use_when=parsed.use_when,
                category=parsed.category,
                source=source,
                hash=file_checksum(path),
            )

        by_category: Dict[str, List[str]] = {}
        for module_path, entry in contexts.items():
            if entry.category:
                by_category.setdefault(entry.category, []).append(module_path)

        return LocalRegistry(
            meta=LocalRegistryMeta(
                version=REGISTRY_VERSION,
                total_contexts=len(contexts),
                last_sync=utc_now(),
                generation_command=self.generation_command,
            ),
            contexts=contexts,
            by_category={name: sorted(paths) for name, paths in sorted(by_category.items())},
            entry_points=sorted(path for path in contexts if is_entry_point(path)),
            errors=errors,
        )


__all__ = [
    "LocalRegistryBuilder",
    "NO_DESCRIPTION",
    "extract_description",
    "is_entry_point",
    "module_path_for",
    "relative_source",
]
