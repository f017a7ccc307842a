"""Locate context documents and documentation assets on disk."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Set

from .config import DEFAULT_EXCLUDE_DIRS, DEFAULT_PATTERNS
from .logging import get_logger

CONTEXT_FILENAME = "ctx.yml"
CONTEXT_SUFFIX = ".ctx.yml"

logger = get_logger("discovery")


def _pattern_matches(rel_path: str, pattern: str) -> bool:
    normalized = rel_path.replace("\\", "/")
    if pattern.startswith("**/"):
        tail = pattern[3:]
        if "/" not in tail:
            return fnmatchcase(normalized.rsplit("/", 1)[-1], tail)
        return fnmatchcase(normalized, tail) or fnmatchcase(normalized, pattern)
    return fnmatchcase(normalized, pattern)


def _iter_files(root: Path, *, exclude_hidden: bool, exclude_dirs: Set[str]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            name
            for name in dirnames
            if name not in exclude_dirs and not (exclude_hidden and name.startswith("."))
        )
        current_dir = Path(dirpath)
        for filename in sorted(filenames):
            if exclude_hidden and filename.startswith("."):
                continue
            yield current_dir / filename


def discover(
    root: Path,
    patterns: Sequence[str],
    *,
    exclude_hidden: bool = True,
    exclude_dirs: Iterable[str] = (),
) -> Set[Path]:
    """Resolve glob patterns under ``root`` into a deduplicated set of absolute paths."""
    root_path = Path(root).expanduser().resolve()
    if not root_path.is_dir():
        logger.info("Discovery root %s is not a directory; nothing to scan", root_path)
        return set()

    matches: Set[Path] = set()
    for path in _iter_files(root_path, exclude_hidden=exclude_hidden, exclude_dirs=set(exclude_dirs)):
        rel_path = path.relative_to(root_path).as_posix()
        if any(_pattern_matches(rel_path, pattern) for pattern in patterns):
            matches.add(path)
    return matches


def discover_context_documents(
    root: Path,
    *,
    patterns: Sequence[str] = DEFAULT_PATTERNS,
    exclude_hidden: bool = True,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
) -> List[Path]:
    """Return ``ctx.yml`` and ``*.ctx.yml`` documents under ``root`` in sorted order."""
    found = discover(root, patterns, exclude_hidden=exclude_hidden, exclude_dirs=exclude_dirs)
    if not found:
        logger.info("No context documents found under %s", root)
    return sorted(found)


def list_folder_files(folder: Path, suffix: str = ".md") -> List[Path]:
    """Non-recursive listing of visible files in ``folder`` ending with ``suffix``."""
    if not folder.is_dir():
        logger.warning("Folder not found: %s, skipping", folder)
        return []
    return sorted(
        entry
        for entry in folder.iterdir()
        if entry.is_file() and entry.name.endswith(suffix) and not entry.name.startswith(".")
    )


__all__ = [
    "CONTEXT_FILENAME",
    "CONTEXT_SUFFIX",
    "discover",
    "discover_context_documents",
    "list_folder_files",
]
